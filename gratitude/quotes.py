"""Quote acquisition: remote sources tried in order, then a built-in list."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import requests

from gratitude.constants import (
    FALLBACK_QUOTES,
    QUOTABLE_RANDOM_URL,
    QUOTE_REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
    ZENQUOTES_TODAY_URL,
)
from gratitude.models import Quote


def _text_field(record: Any, key: str) -> str | None:
    if not isinstance(record, dict):
        return None
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def parse_zenquotes(payload: Any) -> Quote | None:
    """Parse ``[{"q": text, "a": author, ...}]`` from the quote-of-the-day API."""
    if not isinstance(payload, list) or not payload:
        return None
    text = _text_field(payload[0], "q")
    author = _text_field(payload[0], "a")
    if text is None or author is None:
        return None
    return Quote(text, author, source="zenquotes")


def parse_quotable(payload: Any) -> Quote | None:
    """Parse ``{"content": text, "author": author, ...}`` from the random quote API."""
    text = _text_field(payload, "content")
    author = _text_field(payload, "author")
    if text is None or author is None:
        return None
    return Quote(text, author, source="quotable")


@dataclass(frozen=True)
class QuoteSource:
    """A remote endpoint and the parser that turns its JSON into a Quote."""

    name: str
    url: str
    parse: Callable[[Any], Quote | None]


ZENQUOTES_TODAY = QuoteSource("zenquotes", ZENQUOTES_TODAY_URL, parse_zenquotes)
QUOTABLE_RANDOM = QuoteSource("quotable", QUOTABLE_RANDOM_URL, parse_quotable)


class QuoteService:
    """Fetches quotes, falling back through sources until one answers.

    Neither public entry point raises: every remote failure is logged and
    the next source is tried, ending with the built-in quote list.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        rng: random.Random | None = None,
        timeout: float = QUOTE_REQUEST_TIMEOUT_SECONDS,
        daily_sources: Sequence[QuoteSource] = (ZENQUOTES_TODAY, QUOTABLE_RANDOM),
        random_sources: Sequence[QuoteSource] = (QUOTABLE_RANDOM,),
        fallback_quotes: Sequence[Quote] = FALLBACK_QUOTES,
    ) -> None:
        if not fallback_quotes:
            raise ValueError("At least one fallback quote is required")
        self._session = session if session is not None else requests.Session()
        self._rng = rng if rng is not None else random.Random()
        self._timeout = timeout
        self.daily_sources = tuple(daily_sources)
        self.random_sources = tuple(random_sources)
        self.fallback_quotes = tuple(fallback_quotes)

    def get_daily_quote(self) -> Quote:
        """Quote of the day, else a random remote quote, else a built-in one."""
        return self._first_available(self.daily_sources)

    def get_random_quote(self) -> Quote:
        """A random remote quote, else a built-in one."""
        return self._first_available(self.random_sources)

    def fallback_quote(self) -> Quote:
        return self._rng.choice(self.fallback_quotes)

    def fetch(self, source: QuoteSource) -> Quote | None:
        """Make a single attempt against one source; None when it is unavailable."""
        try:
            response = self._session.get(
                source.url,
                headers={"User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logging.warning("Quote source %s unreachable: %s", source.name, exc)
            return None

        if response.status_code != 200:
            logging.warning(
                "Quote source %s returned HTTP %s", source.name, response.status_code
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logging.warning("Quote source %s returned invalid JSON", source.name)
            return None

        quote = source.parse(payload)
        if quote is None:
            logging.warning("Quote source %s returned an unexpected payload", source.name)
        return quote

    def _first_available(self, sources: Sequence[QuoteSource]) -> Quote:
        for source in sources:
            quote = self.fetch(source)
            if quote is not None:
                return quote
        logging.info("All quote sources unavailable; using a built-in quote.")
        return self.fallback_quote()

    def close(self) -> None:
        self._session.close()
