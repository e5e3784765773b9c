"""
Pydantic schemas for mood entries, conversation moods and statistics.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date, datetime
from narumate.models.mood import MoodType, MIN_INTENSITY, MAX_INTENSITY


class MoodEntryCreate(BaseModel):
    """Schema for mood entry creation."""
    mood_type: MoodType
    intensity: int = Field(..., ge=MIN_INTENSITY, le=MAX_INTENSITY)
    secondary_moods: List[MoodType] = []
    notes: Optional[str] = None
    triggers: List[str] = []


class MoodEntryResponse(BaseModel):
    """Schema for mood entry response."""
    id: str
    user_id: str
    mood_type: str
    secondary_moods: List[str] = []
    intensity: int
    notes: Optional[str] = None
    triggers: List[str] = []
    created_at: datetime
    date: date

    class Config:
        from_attributes = True


class ConversationMoodCreate(BaseModel):
    """Schema for attaching a mood to a conversation."""
    mood_type: MoodType
    intensity: int = Field(..., ge=MIN_INTENSITY, le=MAX_INTENSITY)
    description: Optional[str] = None


class ConversationMoodResponse(BaseModel):
    """Schema for conversation mood response."""
    id: str
    conversation_id: str
    mood_type: str
    intensity: int
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TrendPoint(BaseModel):
    """One (date, mood, intensity) point of the recent trend."""
    date: date
    mood: str
    intensity: int


class MoodStats(BaseModel):
    """Aggregate statistics over a window of mood entries."""
    total_entries: int = 0
    average_intensity: float = 0
    most_common_mood: str = ""
    mood_distribution: Dict[str, int] = {}
    weekly_trend: List[TrendPoint] = []


class StreakResponse(BaseModel):
    """Consecutive days with at least one mood entry."""
    streak: int


class MoodDashboardResponse(BaseModel):
    """Everything the mood dashboard needs in one payload."""
    days: int
    entries: List[MoodEntryResponse] = []
    stats: MoodStats
    streak: int


class MoodTypeInfo(BaseModel):
    """Display data for one mood category."""
    value: str
    label: str
    emoji: str


class MoodCatalogResponse(BaseModel):
    """Mood categories and suggested triggers."""
    moods: List[MoodTypeInfo]
    triggers: List[str]
