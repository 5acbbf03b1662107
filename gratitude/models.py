"""Data models for gratitude entries, quotes and quote history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class GratitudeEntry:
    """A single persisted gratitude entry."""

    id: int
    entry_text: str
    created_date: date
    created_datetime: datetime
    mood_rating: int | None = None
    tags: str | None = None

    def preview(self, max_length: int = 50) -> str:
        """Return the entry text cut to max_length characters plus an ellipsis."""
        if len(self.entry_text) <= max_length:
            return self.entry_text
        return self.entry_text[:max_length] + "..."

    def tag_list(self) -> list[str]:
        """Split the free-text tags on commas, dropping blanks."""
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


@dataclass(frozen=True)
class Quote:
    """An inspirational quote. Equality ignores where it came from."""

    text: str
    author: str
    source: str = field(default="fallback", compare=False)


@dataclass
class QuoteRecord:
    """A row of the quote history audit table."""

    id: int
    quote_text: str
    author: str
    date_shown: date
    api_source: str | None
    created_datetime: datetime


@dataclass(frozen=True)
class JournalStats:
    total: int
    today: int
