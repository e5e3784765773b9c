"""
Mood service for the mood journal, conversation moods and dashboard data.
"""
import asyncio
import logging
from datetime import date, datetime
from typing import Callable, List, Optional
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from narumate.core.utils import unique, utc_today, utcnow
from narumate.models.mood import MoodEntry, ConversationMood, is_mood_type, MIN_INTENSITY, MAX_INTENSITY
from narumate.schemas.mood import MoodStats
from narumate.services.mood_stats import compute_mood_stats, compute_streak, stats_window
from narumate.services.store import MoodStore

logger = logging.getLogger(__name__)


def _valid_mood(mood_type: str, intensity: int) -> bool:
    """Write-time checks shared by both mood tables."""
    if not is_mood_type(mood_type):
        logger.error(f"Unknown mood type '{mood_type}'")
        return False
    if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
        logger.error(f"Intensity {intensity} outside {MIN_INTENSITY}-{MAX_INTENSITY}")
        return False
    return True


class SqlMoodStore(MoodStore):
    """Mood store over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker, now: Callable[[], datetime] = utcnow):
        self.session_factory = session_factory
        self.now = now

    def today(self) -> date:
        return self.now().date()

    # ==================== MOOD JOURNAL ====================

    def add_mood_entry(
        self,
        user_id: str,
        mood_type: str,
        intensity: int,
        secondary_moods: Optional[List[str]] = None,
        notes: Optional[str] = None,
        triggers: Optional[List[str]] = None,
        entry_date: Optional[date] = None
    ) -> Optional[MoodEntry]:
        """Add a mood journal entry."""
        if not _valid_mood(mood_type, intensity):
            return None

        # Secondary moods are a set of known categories excluding the primary
        secondary = [
            mood for mood in unique(secondary_moods or [])
            if mood != mood_type and is_mood_type(mood)
        ]

        moment = self.now()
        with self.session_factory() as db:
            try:
                entry = MoodEntry(
                    user_id=user_id,
                    mood_type=mood_type,
                    secondary_moods=secondary,
                    intensity=intensity,
                    notes=(notes or "").strip() or None,
                    triggers=unique(triggers or []),
                    created_at=moment,
                    date=entry_date or moment.date()
                )
                db.add(entry)
                db.commit()
                db.refresh(entry)
                return entry
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error adding mood entry: {str(e)}")
                return None

    def list_mood_entries(self, user_id: str, limit: Optional[int] = 50) -> List[MoodEntry]:
        """Get mood entries for a user, newest first."""
        with self.session_factory() as db:
            try:
                query = db.query(MoodEntry).filter(
                    MoodEntry.user_id == user_id
                ).order_by(MoodEntry.created_at.desc())
                if limit is not None:
                    query = query.limit(limit)
                return query.all()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching mood entries: {str(e)}")
                return []

    def list_mood_entries_in_range(self, user_id: str, start: date, end: date) -> List[MoodEntry]:
        """Get mood entries dated within [start, end], newest first."""
        with self.session_factory() as db:
            try:
                return db.query(MoodEntry).filter(
                    MoodEntry.user_id == user_id,
                    MoodEntry.date >= start,
                    MoodEntry.date <= end
                ).order_by(MoodEntry.created_at.desc()).all()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching mood entries in range: {str(e)}")
                return []

    def get_todays_mood_entry(self, user_id: str, today: Optional[date] = None) -> Optional[MoodEntry]:
        """Get today's mood entry; the latest one wins if there are several."""
        with self.session_factory() as db:
            try:
                return db.query(MoodEntry).filter(
                    MoodEntry.user_id == user_id,
                    MoodEntry.date == (today or self.today())
                ).order_by(MoodEntry.created_at.desc()).first()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching today's mood entry: {str(e)}")
                return None

    def delete_mood_entry(self, entry_id: str) -> bool:
        """Delete a mood entry."""
        with self.session_factory() as db:
            try:
                deleted = db.query(MoodEntry).filter(
                    MoodEntry.id == entry_id
                ).delete(synchronize_session=False)
                db.commit()
                return deleted > 0
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error deleting mood entry: {str(e)}")
                return False

    # ==================== CONVERSATION MOODS ====================

    def add_conversation_mood(
        self,
        conversation_id: str,
        mood_type: str,
        intensity: int,
        description: Optional[str] = None
    ) -> Optional[ConversationMood]:
        """Attach a mood to a conversation."""
        if not _valid_mood(mood_type, intensity):
            return None

        with self.session_factory() as db:
            try:
                mood = ConversationMood(
                    conversation_id=conversation_id,
                    mood_type=mood_type,
                    intensity=intensity,
                    description=(description or "").strip() or None,
                    created_at=self.now()
                )
                db.add(mood)
                db.commit()
                db.refresh(mood)
                return mood
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error adding conversation mood: {str(e)}")
                return None

    def list_conversation_moods(self, conversation_id: str) -> List[ConversationMood]:
        """Get moods for a conversation, oldest first."""
        with self.session_factory() as db:
            try:
                return db.query(ConversationMood).filter(
                    ConversationMood.conversation_id == conversation_id
                ).order_by(ConversationMood.created_at.asc()).all()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching conversation moods: {str(e)}")
                return []


# ==================== STATISTICS ====================

def get_mood_stats(store: MoodStore, user_id: str, days: int = 30, today: Optional[date] = None) -> MoodStats:
    """Statistics over the entries dated within the last `days` days."""
    start, end = stats_window(days, today or utc_today())
    entries = store.list_mood_entries_in_range(user_id, start, end)
    return compute_mood_stats(entries)


async def load_dashboard(
    store: MoodStore,
    user_id: str,
    days: int = 30,
    recent_limit: int = 50,
    today: Optional[date] = None
) -> dict:
    """
    Gather recent entries, window statistics and the streak.

    The two reads are independent, so they run concurrently in worker threads;
    both must finish before anything is computed.
    """
    today = today or utc_today()
    start, end = stats_window(days, today)

    all_entries, window_entries = await asyncio.gather(
        run_in_threadpool(store.list_mood_entries, user_id, None),
        run_in_threadpool(store.list_mood_entries_in_range, user_id, start, end)
    )

    return {
        "days": days,
        "entries": all_entries[:recent_limit],
        "stats": compute_mood_stats(window_entries),
        "streak": compute_streak(all_entries, today)
    }
