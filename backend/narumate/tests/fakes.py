"""
In-memory stand-ins for the store and generator ports.
"""
import uuid
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from typing import List, Optional
from narumate.core.utils import derive_title, unique
from narumate.models.conversation import DEFAULT_TITLE
from narumate.models.mood import is_mood_type
from narumate.services.inference_service import Generator, InferenceError, ModelKey
from narumate.services.store import ConversationStore, MoodStore

START = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns strictly increasing times, one step per call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value

    def today(self) -> date:
        return self.current.date()


class FakeConversationStore(ConversationStore):
    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.conversations = {}
        self.messages: List[SimpleNamespace] = []
        self.unreachable = False

    def create_conversation(self, title=None):
        if self.unreachable:
            return None
        moment = self.clock()
        conversation = SimpleNamespace(
            id=str(uuid.uuid4()),
            title=title or DEFAULT_TITLE,
            user_id="anonymous",
            created_at=moment,
            updated_at=moment
        )
        self.conversations[conversation.id] = conversation
        return conversation

    def list_conversations(self):
        if self.unreachable:
            return []
        return sorted(self.conversations.values(), key=lambda c: c.updated_at, reverse=True)

    def get_conversation(self, conversation_id):
        if self.unreachable:
            return None
        return self.conversations.get(conversation_id)

    def rename_conversation(self, conversation_id, title):
        title = (title or "").strip()
        if self.unreachable or not title or conversation_id not in self.conversations:
            return False
        self.conversations[conversation_id].title = title
        return True

    def delete_conversation(self, conversation_id):
        if self.unreachable or conversation_id not in self.conversations:
            return False
        del self.conversations[conversation_id]
        self.messages = [m for m in self.messages if m.conversation_id != conversation_id]
        return True

    def append_message(self, conversation_id, role, content):
        conversation = self.get_conversation(conversation_id)
        if conversation is None or role not in ("user", "assistant"):
            return None
        first_user = role == "user" and not any(
            m.conversation_id == conversation_id and m.role == "user" for m in self.messages
        )
        moment = self.clock()
        message = SimpleNamespace(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content,
            timestamp=moment,
            created_at=moment
        )
        self.messages.append(message)
        conversation.updated_at = moment
        if first_user:
            conversation.title = derive_title(content)
        return message

    def list_messages(self, conversation_id):
        if self.unreachable:
            return []
        return sorted(
            (m for m in self.messages if m.conversation_id == conversation_id),
            key=lambda m: m.timestamp
        )

    def delete_message(self, message_id):
        before = len(self.messages)
        self.messages = [m for m in self.messages if m.id != message_id]
        return len(self.messages) < before


class FakeMoodStore(MoodStore):
    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.entries: List[SimpleNamespace] = []
        self.conversation_moods: List[SimpleNamespace] = []

    def add_mood_entry(self, user_id, mood_type, intensity, secondary_moods=None,
                       notes=None, triggers=None, entry_date=None):
        if not is_mood_type(mood_type) or not 1 <= intensity <= 5:
            return None
        moment = self.clock()
        entry = SimpleNamespace(
            id=str(uuid.uuid4()),
            user_id=user_id,
            mood_type=mood_type,
            secondary_moods=[m for m in unique(secondary_moods or []) if m != mood_type],
            intensity=intensity,
            notes=notes,
            triggers=unique(triggers or []),
            created_at=moment,
            date=entry_date or moment.date()
        )
        self.entries.append(entry)
        return entry

    def _newest_first(self, entries):
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    def list_mood_entries(self, user_id, limit=50):
        entries = self._newest_first(e for e in self.entries if e.user_id == user_id)
        return entries if limit is None else entries[:limit]

    def list_mood_entries_in_range(self, user_id, start, end):
        return self._newest_first(
            e for e in self.entries if e.user_id == user_id and start <= e.date <= end
        )

    def get_todays_mood_entry(self, user_id, today=None):
        today = today or self.clock.today()
        entries = self._newest_first(e for e in self.entries if e.user_id == user_id and e.date == today)
        return entries[0] if entries else None

    def delete_mood_entry(self, entry_id):
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.id != entry_id]
        return len(self.entries) < before

    def add_conversation_mood(self, conversation_id, mood_type, intensity, description=None):
        if not is_mood_type(mood_type) or not 1 <= intensity <= 5:
            return None
        mood = SimpleNamespace(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            mood_type=mood_type,
            intensity=intensity,
            description=description,
            created_at=self.clock()
        )
        self.conversation_moods.append(mood)
        return mood

    def list_conversation_moods(self, conversation_id):
        return [m for m in self.conversation_moods if m.conversation_id == conversation_id]


class FakeGenerator(Generator):
    """Records every call and answers with a fixed reply or raises."""

    def __init__(self, reply: str = "Generated reply", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def _respond(self) -> str:
        if self.error is not None:
            raise self.error
        return self.reply

    async def generate_chat(self, messages, model=ModelKey.CHAT, temperature=0.7, max_length=1000):
        self.calls.append({"kind": "chat", "model": model, "messages": messages, "temperature": temperature})
        return self._respond()

    async def generate_supportive(self, user_message, mood=None, intensity=None):
        self.calls.append({"kind": "supportive", "mood": mood, "intensity": intensity, "text": user_message})
        return self._respond()

    async def generate_creative(self, prompt, kind="story"):
        self.calls.append({"kind": "creative", "creative_kind": kind, "text": prompt})
        return self._respond()

    async def check_model_status(self, model):
        return self.error is None


def failing_generator() -> FakeGenerator:
    return FakeGenerator(error=InferenceError("Hugging Face API error: 503 - loading"))
