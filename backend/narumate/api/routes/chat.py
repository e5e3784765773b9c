"""
Chat routes: user turns, session state and mood check-ins from the chat view.
"""
import asyncio
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from narumate.api.dependencies import get_chat_session, get_generator, get_orchestrator
from narumate.schemas.chat import (
    ChatMessageRequest, ChatMessageResponse, ChatReplyResponse, ChatSessionResponse,
    ChatMoodRequest, ChatMoodResponse, ModelInfo
)
from narumate.services.chat_service import (
    ChatMessage, ChatOrchestrator, ChatSession, SessionConfig, SubmissionInProgress
)
from narumate.services.inference_service import Generator, HF_MODELS, ModelKey

router = APIRouter(prefix="/chat", tags=["chat"])


def to_message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        role=message.role,
        content=message.content,
        timestamp=message.timestamp
    )


def to_session_response(session: ChatSession, orchestrator: ChatOrchestrator) -> ChatSessionResponse:
    return ChatSessionResponse(
        conversation_id=session.conversation_id,
        persistence_enabled=orchestrator.conversation_store is not None,
        in_flight=session.in_flight,
        messages=[to_message_response(m) for m in session.messages]
    )


def session_config(orchestrator: ChatOrchestrator, advanced_mode: bool = False,
                   model: ModelKey = ModelKey.CHAT) -> SessionConfig:
    """Persistence follows whether a store is available for this request."""
    return SessionConfig(
        advanced_mode=advanced_mode,
        model=model,
        persistence_enabled=orchestrator.conversation_store is not None
    )


@router.post("/messages", response_model=ChatReplyResponse)
async def send_message(
    message_data: ChatMessageRequest,
    session: ChatSession = Depends(get_chat_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Send a user message and get the assistant reply."""
    config = session_config(orchestrator, message_data.advanced_mode, message_data.model)
    try:
        reply = await orchestrator.send_message(session, message_data.message, config)
    except SubmissionInProgress as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return ChatReplyResponse(
        conversation_id=reply.conversation_id,
        route=reply.route.value,
        used_fallback=reply.used_fallback,
        user_message=to_message_response(reply.user_message),
        assistant_message=to_message_response(reply.assistant_message)
    )


@router.get("/session", response_model=ChatSessionResponse)
async def get_session(
    session: ChatSession = Depends(get_chat_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Current chat state of this client."""
    return to_session_response(session, orchestrator)


@router.post("/new", response_model=ChatSessionResponse)
async def new_conversation(
    session: ChatSession = Depends(get_chat_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Start a new conversation (local mode just clears the chat)."""
    orchestrator.new_conversation(session, session_config(orchestrator))
    return to_session_response(session, orchestrator)


@router.post("/load/{conversation_id}", response_model=ChatSessionResponse)
async def load_conversation(
    conversation_id: str,
    session: ChatSession = Depends(get_chat_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Make a stored conversation the active one."""
    if orchestrator.conversation_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Conversation history is unavailable in local mode"
        )
    if not orchestrator.load_conversation(session, conversation_id, session_config(orchestrator)):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )
    return to_session_response(session, orchestrator)


@router.post("/mood", response_model=ChatMoodResponse)
async def record_mood(
    mood_data: ChatMoodRequest,
    session: ChatSession = Depends(get_chat_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Record how the user feels and acknowledge it in the chat."""
    result = orchestrator.record_mood(
        session,
        mood_data.mood_type.value,
        mood_data.intensity,
        session_config(orchestrator),
        secondary_moods=[m.value for m in mood_data.secondary_moods],
        notes=mood_data.notes,
        triggers=mood_data.triggers
    )
    return ChatMoodResponse(
        entry_saved=result.entry is not None,
        conversation_mood_saved=result.conversation_mood is not None,
        assistant_message=to_message_response(result.assistant_message)
    )


@router.get("/models", response_model=List[ModelInfo])
async def list_models(
    check_status: bool = False,
    generator: Generator = Depends(get_generator)
):
    """Models selectable in advanced mode, optionally with availability."""
    keys = list(HF_MODELS)
    available = [None] * len(keys)
    if check_status:
        available = await asyncio.gather(*(generator.check_model_status(key) for key in keys))

    return [
        ModelInfo(key=key.value, name=HF_MODELS[key], available=is_up)
        for key, is_up in zip(keys, available)
    ]
