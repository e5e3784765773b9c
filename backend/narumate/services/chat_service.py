"""
Chat service: routes each user turn to the right generation path and keeps
the in-memory chat state in step with the conversation store.
"""
import enum
import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional
from narumate.core.utils import contains_any, utcnow
from narumate.models.mood import is_mood_type, MIN_INTENSITY, MAX_INTENSITY
from narumate.services.fallback_service import generate_fallback_response
from narumate.services.inference_service import Generator, ModelKey
from narumate.services.store import ConversationStore, MoodStore

logger = logging.getLogger(__name__)

# Keyword families, matched as case-insensitive substrings
MOOD_KEYWORDS = ("feel", "mood")
SCRIPT_KEYWORDS = ("script",)
NARRATION_KEYWORDS = ("narrat",)
STORY_KEYWORDS = ("story",)

DEFAULT_MODEL = ModelKey.CHAT


class ChatRoute(str, enum.Enum):
    """Generation path chosen for a user turn."""
    SUPPORTIVE = "supportive"
    CREATIVE = "creative"
    GENERAL = "general"


class SubmissionInProgress(Exception):
    """Raised when a session submits while its previous turn is still pending."""


@dataclass(frozen=True)
class SessionConfig:
    """Per-call chat settings: advanced routing, selected model and whether persistence is on."""
    advanced_mode: bool = False
    model: ModelKey = DEFAULT_MODEL
    persistence_enabled: bool = False


@dataclass(frozen=True)
class RouteDecision:
    route: ChatRoute
    model: ModelKey
    temperature: float = 0.7
    creative_kind: Optional[str] = None


@dataclass
class ChatMessage:
    """A message held in a chat session."""
    role: str
    content: str
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def as_turn(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatSession:
    """
    In-memory chat state of one client: the active conversation and its
    messages. In local mode this is the only copy of the history.
    """
    conversation_id: Optional[str] = None
    messages: List[ChatMessage] = field(default_factory=list)
    in_flight: bool = False

    def reset(self, conversation_id: Optional[str] = None, messages: Optional[List[ChatMessage]] = None):
        self.conversation_id = conversation_id
        self.messages = messages or []

    def add(self, role: str, content: str, timestamp: datetime) -> ChatMessage:
        message = ChatMessage(role=role, content=content, timestamp=timestamp)
        self.messages.append(message)
        return message


@dataclass
class ChatReply:
    """Outcome of one user turn."""
    conversation_id: Optional[str]
    route: ChatRoute
    used_fallback: bool
    user_message: ChatMessage
    assistant_message: ChatMessage


@dataclass
class MoodRecordResult:
    entry: object
    conversation_mood: object
    assistant_message: ChatMessage


class ChatSessionRegistry:
    """Chat sessions keyed by the client-supplied session id."""

    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}

    def get(self, session_id: str) -> ChatSession:
        if session_id not in self._sessions:
            self._sessions[session_id] = ChatSession()
        return self._sessions[session_id]

    def all(self) -> List[ChatSession]:
        return list(self._sessions.values())

    def clear(self):
        self._sessions.clear()


def creative_kind(text: str) -> Optional[str]:
    """Script beats narration, narration beats story; None when no family matches."""
    if contains_any(text, SCRIPT_KEYWORDS):
        return "script"
    if contains_any(text, NARRATION_KEYWORDS):
        return "narration"
    if contains_any(text, STORY_KEYWORDS):
        return "story"
    return None


def choose_route(text: str, config: SessionConfig, todays_mood=None) -> RouteDecision:
    """
    Pick the generation path for a user turn.

    Precedence: supportive (advanced, mood keyword, mood recorded today),
    creative (advanced, story/script/narration keyword), general chat with
    the selected model (advanced), general chat with the default model.
    """
    if not config.advanced_mode:
        return RouteDecision(ChatRoute.GENERAL, DEFAULT_MODEL, temperature=0.7)

    if todays_mood is not None and contains_any(text, MOOD_KEYWORDS):
        return RouteDecision(ChatRoute.SUPPORTIVE, ModelKey.SUPPORTIVE, temperature=0.8)

    kind = creative_kind(text)
    if kind:
        return RouteDecision(ChatRoute.CREATIVE, ModelKey.CREATIVE, temperature=0.9, creative_kind=kind)

    return RouteDecision(ChatRoute.GENERAL, config.model, temperature=0.8)


class ChatOrchestrator:
    """
    Runs user turns end to end: persistence, routing, generation, fallback.

    Stores may be None (local mode); every persistence step is then skipped.
    """

    def __init__(
        self,
        generator: Generator,
        conversation_store: Optional[ConversationStore] = None,
        mood_store: Optional[MoodStore] = None,
        user_id: str = "anonymous",
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = utcnow
    ):
        self.generator = generator
        self.conversation_store = conversation_store
        self.mood_store = mood_store
        self.user_id = user_id
        self.rng = rng or random.Random()
        self.now = now

    def persisting(self, config: SessionConfig) -> bool:
        return config.persistence_enabled and self.conversation_store is not None

    def _todays_mood(self, config: SessionConfig):
        if not config.persistence_enabled or self.mood_store is None:
            return None
        return self.mood_store.get_todays_mood_entry(self.user_id, self.now().date())

    def _save(self, session: ChatSession, config: SessionConfig, role: str, content: str):
        if self.persisting(config) and session.conversation_id:
            self.conversation_store.append_message(session.conversation_id, role, content)

    async def _generate(self, decision: RouteDecision, text: str, turns: List[Dict[str, str]], todays_mood) -> str:
        if decision.route == ChatRoute.SUPPORTIVE:
            return await self.generator.generate_supportive(text, todays_mood.mood_type, todays_mood.intensity)
        if decision.route == ChatRoute.CREATIVE:
            return await self.generator.generate_creative(text, decision.creative_kind)
        return await self.generator.generate_chat(
            turns,
            model=decision.model,
            temperature=decision.temperature,
            max_length=1000
        )

    # ==================== USER TURNS ====================

    async def send_message(self, session: ChatSession, text: str, config: SessionConfig) -> ChatReply:
        """
        Handle one user turn. Always produces an assistant message: a
        generation failure is replaced by a fallback reply that takes today's
        mood into account, an empty result by a mood-agnostic one.
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("Message must not be empty")
        if session.in_flight:
            raise SubmissionInProgress("A message is already being processed for this session")

        session.in_flight = True
        try:
            turns = [m.as_turn() for m in session.messages]
            turns.append({"role": "user", "content": text})
            user_message = session.add("user", text, self.now())

            # Create the conversation lazily on first send
            if self.persisting(config) and not session.conversation_id:
                conversation = self.conversation_store.create_conversation()
                if conversation:
                    session.conversation_id = conversation.id
            self._save(session, config, "user", text)

            todays_mood = self._todays_mood(config) if config.advanced_mode else None
            decision = choose_route(text, config, todays_mood)
            logger.info(f"Routing turn to {decision.route.value} ({decision.model.value})")

            used_fallback = False
            try:
                content = (await self._generate(decision, text, turns, todays_mood)).strip()
            except Exception as e:  # noqa: BLE001 - every failure degrades to a canned reply
                logger.warning(f"Generation failed, using fallback response: {str(e)}")
                if todays_mood is None:
                    todays_mood = self._todays_mood(config)
                content = generate_fallback_response(
                    text,
                    todays_mood.mood_type if todays_mood else None,
                    rng=self.rng
                )
                used_fallback = True
            else:
                if not content:
                    logger.warning("Empty generation result, using fallback response")
                    content = generate_fallback_response(text, rng=self.rng)
                    used_fallback = True

            assistant_message = session.add("assistant", content, self.now())
            self._save(session, config, "assistant", content)

            return ChatReply(
                conversation_id=session.conversation_id,
                route=decision.route,
                used_fallback=used_fallback,
                user_message=user_message,
                assistant_message=assistant_message
            )
        finally:
            session.in_flight = False

    def record_mood(
        self,
        session: ChatSession,
        mood_type: str,
        intensity: int,
        config: SessionConfig,
        secondary_moods: Optional[List[str]] = None,
        notes: Optional[str] = None,
        triggers: Optional[List[str]] = None
    ) -> MoodRecordResult:
        """Save the day's mood (and the conversation mood) and acknowledge it in the chat."""
        if not is_mood_type(mood_type):
            raise ValueError(f"Unknown mood type '{mood_type}'")
        if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
            raise ValueError(f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}")

        entry = None
        conversation_mood = None
        if config.persistence_enabled and self.mood_store is not None:
            entry = self.mood_store.add_mood_entry(
                self.user_id,
                mood_type,
                intensity,
                secondary_moods=secondary_moods,
                notes=notes,
                triggers=triggers
            )
            if session.conversation_id:
                conversation_mood = self.mood_store.add_conversation_mood(
                    session.conversation_id,
                    mood_type,
                    intensity,
                    description=notes
                )

        content = (
            f"I see you're feeling {mood_type} with an intensity of {intensity}/5. "
            "Thank you for sharing that with me. Your emotional state can provide valuable context "
            "for our conversation. How can I best support you today?"
        )
        assistant_message = session.add("assistant", content, self.now())
        self._save(session, config, "assistant", content)

        return MoodRecordResult(entry=entry, conversation_mood=conversation_mood, assistant_message=assistant_message)

    # ==================== CONVERSATION STATE ====================

    def new_conversation(self, session: ChatSession, config: SessionConfig):
        """Start a fresh conversation. In local mode this only clears the session."""
        if not self.persisting(config):
            session.reset()
            return None

        conversation = self.conversation_store.create_conversation()
        if conversation:
            session.reset(conversation.id)
        return conversation

    def load_conversation(self, session: ChatSession, conversation_id: str, config: SessionConfig) -> bool:
        """Make a stored conversation the active one, loading its messages."""
        if not self.persisting(config):
            return False

        conversation = self.conversation_store.get_conversation(conversation_id)
        if not conversation:
            return False

        messages = [
            ChatMessage(role=m.role, content=m.content, timestamp=m.timestamp, id=m.id)
            for m in self.conversation_store.list_messages(conversation_id)
        ]
        session.reset(conversation_id, messages)
        return True

    def delete_conversation(
        self,
        conversation_id: str,
        config: SessionConfig,
        sessions: Iterable[ChatSession] = ()
    ) -> bool:
        """Delete a conversation; sessions that had it active drop back to no conversation."""
        if not self.persisting(config):
            return False

        deleted = self.conversation_store.delete_conversation(conversation_id)
        if deleted:
            for session in sessions:
                if session.conversation_id == conversation_id:
                    session.reset()
        return deleted

    def rename_conversation(self, conversation_id: str, title: str, config: SessionConfig) -> bool:
        """Rename a conversation; blank titles are refused."""
        title = (title or "").strip()
        if not title or not self.persisting(config):
            return False
        return self.conversation_store.rename_conversation(conversation_id, title)
