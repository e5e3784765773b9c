"""
Mood statistics and streak calculation.

Pure functions over mood entries. Entries only need ``mood_type``,
``intensity``, ``date`` and ``created_at`` attributes, so ORM rows and
plain objects work the same way.
"""
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence, Tuple
from narumate.schemas.mood import MoodStats, TrendPoint

TREND_LENGTH = 7


def stats_window(days: int, today: date) -> Tuple[date, date]:
    """Return the inclusive (start, end) date range covering the last `days` days."""
    if days < 0:
        raise ValueError("days must be a non-negative integer")
    return today - timedelta(days=days), today


def round_half_up(value: Decimal, places: int = 1) -> float:
    """Round with half-up semantics (Python's round() is half-to-even)."""
    quantum = Decimal(1).scaleb(-places)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def compute_mood_stats(entries: Sequence) -> MoodStats:
    """
    Compute aggregate statistics for the given entries.

    Ties for the most common mood go to the category encountered first when
    scanning `entries` in the order given. An empty input yields the
    zero-valued result.
    """
    if not entries:
        return MoodStats()

    total_entries = len(entries)
    intensity_sum = sum(entry.intensity for entry in entries)
    average_intensity = round_half_up(Decimal(intensity_sum) / Decimal(total_entries))

    # dict keeps first-seen order, which max() relies on for ties
    mood_distribution: Dict[str, int] = {}
    for entry in entries:
        mood_distribution[entry.mood_type] = mood_distribution.get(entry.mood_type, 0) + 1

    most_common_mood = max(mood_distribution, key=mood_distribution.get)

    recent = sorted(entries, key=lambda entry: entry.created_at, reverse=True)[:TREND_LENGTH]
    weekly_trend = [
        TrendPoint(date=entry.date, mood=entry.mood_type, intensity=entry.intensity)
        for entry in recent
    ]

    return MoodStats(
        total_entries=total_entries,
        average_intensity=average_intensity,
        most_common_mood=most_common_mood,
        mood_distribution=mood_distribution,
        weekly_trend=weekly_trend
    )


def compute_streak(entries: Sequence, today: date) -> int:
    """
    Count consecutive days with at least one entry, ending today or yesterday.

    Entries are deduplicated by date first, so several entries on the same
    day count once. Entries dated after `today` are ignored.
    """
    dates: List[date] = sorted(
        {entry.date for entry in entries if entry.date <= today},
        reverse=True
    )
    if not dates:
        return 0

    latest = dates[0]
    if (today - latest).days > 1:
        return 0  # Streak broken

    streak = 0
    cursor = latest
    for entry_date in dates:
        if (cursor - entry_date).days <= 1:
            streak += 1
            cursor = entry_date
        else:
            break

    return streak
