"""
Utility functions for the application.
"""
from typing import Iterable
from datetime import date, datetime, timezone

TITLE_MAX_LENGTH = 50


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return utcnow().date()


def derive_title(content: str) -> str:
    """Build a conversation title from a message, truncating long text with an ellipsis."""
    if len(content) > TITLE_MAX_LENGTH:
        return content[:TITLE_MAX_LENGTH] + "..."
    return content


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any of the keywords."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def unique(items: Iterable[str]) -> list:
    """Drop duplicates and blanks while keeping the first-seen order."""
    seen = []
    for item in items:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from backends that drop the offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
