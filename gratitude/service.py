"""Application facade tying the quote chain and the entry store together."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable

from gratitude.constants import ENTRY_CHARACTER_LIMIT, QUOTE_HISTORY_LIMIT
from gratitude.models import GratitudeEntry, JournalStats, Quote, QuoteRecord
from gratitude.quotes import QuoteService
from gratitude.storage import EntryStore
from gratitude.tasks import TaskRunner


class EntryValidationError(ValueError):
    """Raised when an entry is rejected before it reaches the store."""


def normalize_tags(tags: str | Iterable[str] | None) -> str | None:
    """Collapse comma-separated or listed tags into ``"a, b"``; None when empty."""
    if tags is None:
        return None
    parts = tags.split(",") if isinstance(tags, str) else list(tags)
    cleaned = [part.strip() for part in parts if part and part.strip()]
    return ", ".join(cleaned) if cleaned else None


class GratitudeJournal:
    """Entry points used by the presentation layer."""

    def __init__(
        self,
        store: EntryStore,
        quotes: QuoteService,
        runner: TaskRunner | None = None,
    ) -> None:
        self.store = store
        self.quotes = quotes
        self.runner = runner if runner is not None else TaskRunner()
        self._closed = False

    def initialize(self) -> None:
        self.store.initialize()

    def close(self) -> None:
        """Wait for background work, then close the store exactly once."""
        if self._closed:
            return
        self._closed = True
        self.runner.shutdown()
        self.quotes.close()
        self.store.close()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        return self.runner.submit(fn, *args, **kwargs)

    # ---- quotes ----
    def get_daily_quote(self) -> Quote:
        return self._remember(self.quotes.get_daily_quote())

    def get_random_quote(self) -> Quote:
        return self._remember(self.quotes.get_random_quote())

    def _remember(self, quote: Quote) -> Quote:
        # only quotes that actually came over the network are audited
        if quote.source != "fallback":
            self.store.record_quote_shown(quote.text, quote.author, quote.source)
        return quote

    def get_quote_history(self, limit: int = QUOTE_HISTORY_LIMIT) -> list[QuoteRecord]:
        return self.store.get_quote_history(limit)

    # ---- entries ----
    def save_entry(
        self,
        text: str,
        mood_rating: int | None = None,
        tags: str | Iterable[str] | None = None,
    ) -> int:
        text = (text or "").strip()
        if not text:
            raise EntryValidationError("Please write something you are grateful for.")
        if len(text) > ENTRY_CHARACTER_LIMIT:
            raise EntryValidationError(
                f"Entries are limited to {ENTRY_CHARACTER_LIMIT} characters."
            )
        if mood_rating is not None and mood_rating not in range(1, 6):
            raise EntryValidationError("Mood rating must be between 1 and 5.")
        return self.store.save_entry(text, mood_rating, normalize_tags(tags))

    def get_entries_for_date(self, day: date) -> list[GratitudeEntry]:
        return self.store.get_entries_for_date(day)

    def get_recent_entries(self, limit: int) -> list[GratitudeEntry]:
        return self.store.get_recent_entries(limit)

    def search_entries(self, term: str) -> list[GratitudeEntry]:
        return self.store.search_entries(term)

    def count_all(self) -> int:
        return self.store.count_all()

    def count_for_date(self, day: date | None = None) -> int:
        return self.store.count_for_date(day)

    def delete_entry(self, entry_id: int) -> bool:
        return self.store.delete_entry(entry_id)

    def get_stats(self) -> JournalStats:
        return JournalStats(total=self.store.count_all(), today=self.store.count_for_date())

    def export_entries(self, csv_path: Path) -> int:
        count = self.store.export_entries_to_csv(csv_path)
        logging.info("Exported %d gratitude entries to %s", count, csv_path)
        return count
