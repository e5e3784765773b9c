"""
Message model for chat messages in conversations.
"""
from sqlalchemy import Column, String, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from narumate.db.base import BaseModel, Timestamp
from narumate.core.utils import utcnow

MESSAGE_ROLES = ("user", "assistant")


class Message(BaseModel):
    """A single user or assistant message, ordered by its logical timestamp."""
    __tablename__ = "messages"

    conversation_id = Column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(Timestamp, default=utcnow, nullable=False, index=True)

    # Relationships
    conversation = relationship("Conversation", back_populates="messages")

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_messages_role"),
    )

    def __repr__(self):
        return f"<Message(id={self.id}, conversation_id={self.conversation_id}, role='{self.role}')>"
