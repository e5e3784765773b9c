"""
Pydantic schemas for Conversation and Message entities.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class ConversationCreate(BaseModel):
    """Schema for conversation creation."""
    title: Optional[str] = Field(None, max_length=255)


class ConversationUpdate(BaseModel):
    """Schema for renaming a conversation."""
    title: str = Field(..., max_length=255)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class ConversationResponse(BaseModel):
    """Schema for conversation response."""
    id: str
    title: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    """Schema for appending a message directly to a conversation."""
    role: Literal["user", "assistant"]
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class MessageResponse(BaseModel):
    """Schema for message response."""
    id: str
    conversation_id: str
    role: str
    content: str
    timestamp: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class ConversationDetailResponse(ConversationResponse):
    """Conversation with its ordered messages."""
    messages: List[MessageResponse] = []
