"""
Mood models: the daily mood journal and conversation-scoped moods.
"""
import enum
from sqlalchemy import Column, String, Date, Text, ForeignKey, Integer, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from narumate.db.base import BaseModel
from narumate.core.utils import utc_today

MIN_INTENSITY = 1
MAX_INTENSITY = 5


class MoodType(str, enum.Enum):
    """Closed set of mood categories."""
    HAPPY = "happy"
    EXCITED = "excited"
    GRATEFUL = "grateful"
    CALM = "calm"
    CONTENT = "content"
    SAD = "sad"
    ANXIOUS = "anxious"
    STRESSED = "stressed"
    ANGRY = "angry"
    FRUSTRATED = "frustrated"
    CONFUSED = "confused"
    TIRED = "tired"
    LONELY = "lonely"
    HOPEFUL = "hopeful"
    MOTIVATED = "motivated"
    PEACEFUL = "peaceful"


# Display label and emoji per category
MOOD_DISPLAY = {
    MoodType.HAPPY: ("Happy", "😊"),
    MoodType.EXCITED: ("Excited", "🤩"),
    MoodType.GRATEFUL: ("Grateful", "🙏"),
    MoodType.CALM: ("Calm", "😌"),
    MoodType.CONTENT: ("Content", "😊"),
    MoodType.SAD: ("Sad", "😢"),
    MoodType.ANXIOUS: ("Anxious", "😰"),
    MoodType.STRESSED: ("Stressed", "😤"),
    MoodType.ANGRY: ("Angry", "😠"),
    MoodType.FRUSTRATED: ("Frustrated", "😤"),
    MoodType.CONFUSED: ("Confused", "😕"),
    MoodType.TIRED: ("Tired", "😴"),
    MoodType.LONELY: ("Lonely", "😔"),
    MoodType.HOPEFUL: ("Hopeful", "🌟"),
    MoodType.MOTIVATED: ("Motivated", "💪"),
    MoodType.PEACEFUL: ("Peaceful", "☮️"),
}

# Suggested, not enforced
COMMON_TRIGGERS = [
    "Work/Career",
    "Relationships",
    "Family",
    "Health",
    "Finances",
    "Weather",
    "Social Media",
    "News",
    "Exercise",
    "Sleep",
    "Food",
    "Travel",
    "Achievement",
    "Disappointment",
    "Change",
    "Uncertainty",
]


def is_mood_type(value: str) -> bool:
    """Check membership in the mood catalog."""
    return value in MoodType._value2member_map_


class MoodEntry(BaseModel):
    """Daily mood journal entry."""
    __tablename__ = "mood_entries"

    user_id = Column(String(64), nullable=False, default="anonymous", index=True)
    mood_type = Column(String(32), nullable=False, index=True)
    secondary_moods = Column(JSON, nullable=False, default=list)
    intensity = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    triggers = Column(JSON, nullable=False, default=list)
    date = Column(Date, nullable=False, default=utc_today, index=True)  # Calendar day, distinct from created_at

    __table_args__ = (
        CheckConstraint("intensity >= 1 AND intensity <= 5", name="ck_mood_entries_intensity"),
    )


class ConversationMood(BaseModel):
    """Mood attached to a specific conversation."""
    __tablename__ = "moods"

    conversation_id = Column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    mood_type = Column(String(32), nullable=False)
    intensity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    conversation = relationship("Conversation", back_populates="moods")

    __table_args__ = (
        CheckConstraint("intensity >= 1 AND intensity <= 5", name="ck_moods_intensity"),
    )
