"""
Shared FastAPI dependencies: stores, generator, orchestrator and chat sessions.
"""
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from narumate.core.config import settings
from narumate.db.session import SessionLocal
from narumate.services.chat_service import ChatOrchestrator, ChatSession, ChatSessionRegistry
from narumate.services.conversation_service import SqlConversationStore
from narumate.services.inference_service import Generator, HuggingFaceGenerator
from narumate.services.mood_service import SqlMoodStore
from narumate.services.store import ConversationStore, MoodStore

# In-memory chat state per client; discarded on restart
chat_sessions = ChatSessionRegistry()

LOCAL_MODE_DETAIL = "Persistence is not configured (local mode)"


def get_conversation_store() -> Optional[ConversationStore]:
    """Conversation store, or None in local mode."""
    if SessionLocal is None:
        return None
    return SqlConversationStore(SessionLocal, user_id=settings.DEFAULT_USER_ID)


def get_mood_store() -> Optional[MoodStore]:
    """Mood store, or None in local mode."""
    if SessionLocal is None:
        return None
    return SqlMoodStore(SessionLocal)


def require_conversation_store(
    store: Optional[ConversationStore] = Depends(get_conversation_store)
) -> ConversationStore:
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=LOCAL_MODE_DETAIL
        )
    return store


def require_mood_store(store: Optional[MoodStore] = Depends(get_mood_store)) -> MoodStore:
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=LOCAL_MODE_DETAIL
        )
    return store


@lru_cache
def get_generator() -> Generator:
    """Shared Hugging Face client."""
    return HuggingFaceGenerator()


def get_orchestrator(
    generator: Generator = Depends(get_generator),
    conversation_store: Optional[ConversationStore] = Depends(get_conversation_store),
    mood_store: Optional[MoodStore] = Depends(get_mood_store)
) -> ChatOrchestrator:
    return ChatOrchestrator(
        generator,
        conversation_store=conversation_store,
        mood_store=mood_store,
        user_id=settings.DEFAULT_USER_ID
    )


def get_chat_session(x_chat_session: str = Header("default")) -> ChatSession:
    """Chat session selected by the X-Chat-Session header."""
    return chat_sessions.get(x_chat_session)
