"""
Conversation history routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from narumate.api.dependencies import (
    chat_sessions, get_orchestrator, require_conversation_store, require_mood_store
)
from narumate.schemas.conversation import (
    ConversationCreate, ConversationUpdate, ConversationResponse,
    ConversationDetailResponse, MessageCreate, MessageResponse
)
from narumate.schemas.mood import ConversationMoodCreate, ConversationMoodResponse
from narumate.services.chat_service import ChatOrchestrator, SessionConfig
from narumate.services.store import ConversationStore, MoodStore

router = APIRouter(prefix="/conversations", tags=["conversations"])


def check_conversation_exists(conversation_id: str, store: ConversationStore):
    """Return the conversation or raise 404."""
    conversation = store.get_conversation(conversation_id)
    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )
    return conversation


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(store: ConversationStore = Depends(require_conversation_store)):
    """List conversations, most recently updated first."""
    return store.list_conversations()


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    conversation_data: ConversationCreate,
    store: ConversationStore = Depends(require_conversation_store)
):
    """Create a new conversation."""
    title = (conversation_data.title or "").strip() or None
    conversation = store.create_conversation(title)
    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create conversation"
        )
    return conversation


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def get_conversation(
    conversation_id: str,
    store: ConversationStore = Depends(require_conversation_store)
):
    """Get a conversation with its messages."""
    conversation = check_conversation_exists(conversation_id, store)
    return ConversationDetailResponse(
        **ConversationResponse.model_validate(conversation).model_dump(),
        messages=[MessageResponse.model_validate(m) for m in store.list_messages(conversation_id)]
    )


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: str,
    conversation_data: ConversationUpdate,
    store: ConversationStore = Depends(require_conversation_store),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Rename a conversation."""
    check_conversation_exists(conversation_id, store)
    config = SessionConfig(persistence_enabled=True)
    if not orchestrator.rename_conversation(conversation_id, conversation_data.title, config):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rename conversation"
        )
    return check_conversation_exists(conversation_id, store)


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    store: ConversationStore = Depends(require_conversation_store),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator)
):
    """Delete a conversation with its messages and moods."""
    check_conversation_exists(conversation_id, store)
    config = SessionConfig(persistence_enabled=True)
    if not orchestrator.delete_conversation(conversation_id, config, sessions=chat_sessions.all()):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete conversation"
        )
    return {"message": "Conversation deleted successfully"}


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: str,
    store: ConversationStore = Depends(require_conversation_store)
):
    """Get messages of a conversation in order."""
    check_conversation_exists(conversation_id, store)
    return store.list_messages(conversation_id)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def append_message(
    conversation_id: str,
    message_data: MessageCreate,
    store: ConversationStore = Depends(require_conversation_store)
):
    """Append a message without running the assistant."""
    check_conversation_exists(conversation_id, store)
    message = store.append_message(conversation_id, message_data.role, message_data.content)
    if not message:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save message"
        )
    return message


@router.get("/{conversation_id}/moods", response_model=List[ConversationMoodResponse])
async def list_conversation_moods(
    conversation_id: str,
    store: ConversationStore = Depends(require_conversation_store),
    mood_store: MoodStore = Depends(require_mood_store)
):
    """Get moods recorded in a conversation."""
    check_conversation_exists(conversation_id, store)
    return mood_store.list_conversation_moods(conversation_id)


@router.post(
    "/{conversation_id}/moods",
    response_model=ConversationMoodResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_conversation_mood(
    conversation_id: str,
    mood_data: ConversationMoodCreate,
    store: ConversationStore = Depends(require_conversation_store),
    mood_store: MoodStore = Depends(require_mood_store)
):
    """Attach a mood to a conversation."""
    check_conversation_exists(conversation_id, store)
    mood = mood_store.add_conversation_mood(
        conversation_id,
        mood_data.mood_type.value,
        mood_data.intensity,
        description=mood_data.description
    )
    if not mood:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save mood"
        )
    return mood
