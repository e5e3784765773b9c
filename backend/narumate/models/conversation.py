"""
Conversation model for chat threads.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from narumate.db.base import BaseModel, Timestamp
from narumate.core.utils import utcnow

DEFAULT_TITLE = "New Conversation"


class Conversation(BaseModel):
    """A titled, timestamped thread of ordered messages."""
    __tablename__ = "conversations"

    title = Column(String(255), nullable=False, default=DEFAULT_TITLE)
    updated_at = Column(Timestamp, default=utcnow, nullable=False, index=True)
    user_id = Column(String(64), nullable=False, default="anonymous", index=True)  # Not enforced yet

    # Relationships
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.timestamp"
    )
    moods = relationship("ConversationMood", back_populates="conversation", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Conversation(id={self.id}, title='{self.title}')>"
