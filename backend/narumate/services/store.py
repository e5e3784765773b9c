"""
Store interfaces used by the chat orchestrator and mood endpoints.

Implementations must never raise for persistence failures: they log and
return an empty list, False or None instead.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional


class ConversationStore(ABC):
    """Persistence of conversations and their messages."""

    @abstractmethod
    def create_conversation(self, title: Optional[str] = None):
        """Insert a conversation. Returns it, or None on failure."""

    @abstractmethod
    def list_conversations(self) -> List:
        """All conversations of the owner, most recently updated first."""

    @abstractmethod
    def get_conversation(self, conversation_id: str):
        """Single conversation or None."""

    @abstractmethod
    def rename_conversation(self, conversation_id: str, title: str) -> bool:
        """Update the title only."""

    @abstractmethod
    def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation together with its messages and moods."""

    @abstractmethod
    def append_message(self, conversation_id: str, role: str, content: str):
        """Insert a message, bump the conversation and derive its title on the first user message."""

    @abstractmethod
    def list_messages(self, conversation_id: str) -> List:
        """Messages ordered by logical timestamp ascending."""

    @abstractmethod
    def delete_message(self, message_id: str) -> bool:
        """Delete a single message."""


class MoodStore(ABC):
    """Persistence of the mood journal and conversation-scoped moods."""

    @abstractmethod
    def add_mood_entry(
        self,
        user_id: str,
        mood_type: str,
        intensity: int,
        secondary_moods: Optional[List[str]] = None,
        notes: Optional[str] = None,
        triggers: Optional[List[str]] = None,
        entry_date: Optional[date] = None
    ):
        """Insert a journal entry. Returns it, or None when refused or on failure."""

    @abstractmethod
    def list_mood_entries(self, user_id: str, limit: Optional[int] = 50) -> List:
        """Entries newest first; `limit=None` returns all of them."""

    @abstractmethod
    def list_mood_entries_in_range(self, user_id: str, start: date, end: date) -> List:
        """Entries with `start <= date <= end`, newest first."""

    @abstractmethod
    def get_todays_mood_entry(self, user_id: str, today: Optional[date] = None):
        """Most recently created entry dated today, or None."""

    @abstractmethod
    def delete_mood_entry(self, entry_id: str) -> bool:
        """Delete a journal entry."""

    @abstractmethod
    def add_conversation_mood(
        self,
        conversation_id: str,
        mood_type: str,
        intensity: int,
        description: Optional[str] = None
    ):
        """Attach a mood to a conversation."""

    @abstractmethod
    def list_conversation_moods(self, conversation_id: str) -> List:
        """Moods of a conversation, oldest first."""
