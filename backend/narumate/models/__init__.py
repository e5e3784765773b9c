"""Models package - Import all models for SQLAlchemy registration."""
from narumate.models.conversation import Conversation
from narumate.models.message import Message
from narumate.models.mood import MoodEntry, ConversationMood, MoodType

__all__ = [
    "Conversation",
    "Message",
    "MoodEntry",
    "ConversationMood",
    "MoodType",
]
