"""
Mood journal routes: entries, statistics, streak and dashboard.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from narumate.api.dependencies import require_mood_store
from narumate.core.config import settings
from narumate.core.utils import utc_today
from narumate.models.mood import MOOD_DISPLAY, COMMON_TRIGGERS
from narumate.schemas.mood import (
    MoodEntryCreate, MoodEntryResponse, MoodStats, StreakResponse,
    MoodDashboardResponse, MoodCatalogResponse, MoodTypeInfo
)
from narumate.services.mood_service import get_mood_stats, load_dashboard
from narumate.services.mood_stats import compute_streak
from narumate.services.store import MoodStore

router = APIRouter(prefix="/moods", tags=["moods"])


@router.get("/types", response_model=MoodCatalogResponse)
async def get_mood_types():
    """Mood categories with labels and emoji, plus suggested triggers."""
    return MoodCatalogResponse(
        moods=[
            MoodTypeInfo(value=mood.value, label=label, emoji=emoji)
            for mood, (label, emoji) in MOOD_DISPLAY.items()
        ],
        triggers=COMMON_TRIGGERS
    )


@router.post("/entries", response_model=MoodEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_mood_entry(
    entry_data: MoodEntryCreate,
    store: MoodStore = Depends(require_mood_store)
):
    """Record a mood journal entry for today."""
    entry = store.add_mood_entry(
        settings.DEFAULT_USER_ID,
        entry_data.mood_type.value,
        entry_data.intensity,
        secondary_moods=[m.value for m in entry_data.secondary_moods],
        notes=entry_data.notes,
        triggers=entry_data.triggers
    )
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save mood entry"
        )
    return entry


@router.get("/entries", response_model=List[MoodEntryResponse])
async def list_mood_entries(
    limit: int = Query(50, ge=1, le=500),
    store: MoodStore = Depends(require_mood_store)
):
    """Recent mood entries, newest first."""
    return store.list_mood_entries(settings.DEFAULT_USER_ID, limit)


@router.get("/entries/today", response_model=Optional[MoodEntryResponse])
async def get_todays_mood_entry(store: MoodStore = Depends(require_mood_store)):
    """Today's mood entry, or null."""
    return store.get_todays_mood_entry(settings.DEFAULT_USER_ID, utc_today())


@router.delete("/entries/{entry_id}")
async def delete_mood_entry(
    entry_id: str,
    store: MoodStore = Depends(require_mood_store)
):
    """Delete a mood entry."""
    if not store.delete_mood_entry(entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Mood entry not found"
        )
    return {"message": "Mood entry deleted successfully"}


@router.get("/stats", response_model=MoodStats)
async def get_stats(
    days: int = Query(30, ge=0),
    store: MoodStore = Depends(require_mood_store)
):
    """Statistics over the last `days` days."""
    return get_mood_stats(store, settings.DEFAULT_USER_ID, days, utc_today())


@router.get("/streak", response_model=StreakResponse)
async def get_streak(store: MoodStore = Depends(require_mood_store)):
    """Consecutive days with a mood entry, ending today or yesterday."""
    entries = store.list_mood_entries(settings.DEFAULT_USER_ID, None)
    return StreakResponse(streak=compute_streak(entries, utc_today()))


@router.get("/dashboard", response_model=MoodDashboardResponse)
async def get_dashboard(
    days: int = Query(30, ge=0),
    store: MoodStore = Depends(require_mood_store)
):
    """Recent entries, statistics and streak in one call."""
    return await load_dashboard(store, settings.DEFAULT_USER_ID, days, today=utc_today())
