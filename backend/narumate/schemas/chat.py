"""
Pydantic schemas for the chat endpoints.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from narumate.models.mood import MoodType, MIN_INTENSITY, MAX_INTENSITY
from narumate.services.inference_service import ModelKey


class ChatMessageRequest(BaseModel):
    """A user turn plus the session settings that apply to it."""
    message: str
    advanced_mode: bool = False
    model: ModelKey = ModelKey.CHAT

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class ChatMessageResponse(BaseModel):
    """A message held in the chat session."""
    id: str
    role: str
    content: str
    timestamp: datetime


class ChatReplyResponse(BaseModel):
    """Outcome of one user turn."""
    conversation_id: Optional[str] = None
    route: str
    used_fallback: bool
    user_message: ChatMessageResponse
    assistant_message: ChatMessageResponse


class ChatSessionResponse(BaseModel):
    """Current in-memory chat state."""
    conversation_id: Optional[str] = None
    persistence_enabled: bool
    in_flight: bool
    messages: List[ChatMessageResponse] = []


class ChatMoodRequest(BaseModel):
    """Mood submitted from the chat view."""
    mood_type: MoodType
    intensity: int = Field(..., ge=MIN_INTENSITY, le=MAX_INTENSITY)
    secondary_moods: List[MoodType] = []
    notes: Optional[str] = None
    triggers: List[str] = []


class ChatMoodResponse(BaseModel):
    """Result of recording a mood from the chat view."""
    entry_saved: bool
    conversation_mood_saved: bool
    assistant_message: ChatMessageResponse


class ModelInfo(BaseModel):
    """An inference model selectable in advanced mode."""
    key: str
    name: str
    available: Optional[bool] = None
