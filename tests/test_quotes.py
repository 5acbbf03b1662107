"""Tests for the quote source fallback chain."""

from __future__ import annotations

import random

import pytest
import requests
from conftest import FakeResponse, FakeSession

from gratitude.constants import (
    FALLBACK_QUOTES,
    QUOTABLE_RANDOM_URL,
    USER_AGENT,
    ZENQUOTES_TODAY_URL,
)
from gratitude.models import Quote
from gratitude.quotes import (
    QUOTABLE_RANDOM,
    QuoteService,
    QuoteSource,
    parse_quotable,
    parse_zenquotes,
)

ZEN_OK = FakeResponse(payload=[{"q": "Act as if.", "a": "William James", "h": "<p/>"}])
QUOTABLE_OK = FakeResponse(payload={"content": "Keep moving.", "author": "Someone"})
SERVER_ERROR = FakeResponse(status_code=500)


def make_service(routes: dict) -> tuple[QuoteService, FakeSession]:
    session = FakeSession(routes)
    return QuoteService(session=session, rng=random.Random(7)), session


def test_daily_quote_from_primary_source():
    """The quote-of-the-day source answers first when it is healthy."""
    service, session = make_service(
        {ZENQUOTES_TODAY_URL: ZEN_OK, QUOTABLE_RANDOM_URL: QUOTABLE_OK}
    )

    quote = service.get_daily_quote()
    assert quote == Quote("Act as if.", "William James")
    assert quote.source == "zenquotes"
    assert [url for url, _ in session.calls] == [ZENQUOTES_TODAY_URL]


def test_daily_quote_falls_back_to_random_source():
    """A failing primary source hands over to the random source."""
    service, session = make_service(
        {ZENQUOTES_TODAY_URL: SERVER_ERROR, QUOTABLE_RANDOM_URL: QUOTABLE_OK}
    )

    quote = service.get_daily_quote()
    assert quote == Quote("Keep moving.", "Someone")
    assert quote.source == "quotable"
    assert [url for url, _ in session.calls] == [ZENQUOTES_TODAY_URL, QUOTABLE_RANDOM_URL]


@pytest.mark.parametrize(
    "failure",
    [
        SERVER_ERROR,
        FakeResponse(status_code=404),
        requests.exceptions.Timeout("read timed out"),
        requests.exceptions.ConnectionError("no route to host"),
        FakeResponse(body="<html>maintenance</html>"),
        FakeResponse(payload=[]),
        FakeResponse(payload={"q": "not a list", "a": "x"}),
        FakeResponse(payload=[{"q": "missing author"}]),
        FakeResponse(payload=[{"q": "", "a": "Empty text"}]),
    ],
)
def test_primary_failures_fall_through(failure):
    """Every kind of primary failure falls through to the next source."""
    service, _ = make_service(
        {ZENQUOTES_TODAY_URL: failure, QUOTABLE_RANDOM_URL: QUOTABLE_OK}
    )
    assert service.get_daily_quote() == Quote("Keep moving.", "Someone")


def test_daily_quote_uses_fallback_when_all_sources_fail():
    """With no source answering, a built-in quote is returned."""
    service, session = make_service(
        {
            ZENQUOTES_TODAY_URL: requests.exceptions.Timeout("slow"),
            QUOTABLE_RANDOM_URL: SERVER_ERROR,
        }
    )

    quote = service.get_daily_quote()
    assert quote in FALLBACK_QUOTES
    assert quote.text and quote.author
    assert quote.source == "fallback"
    assert len(session.calls) == 2


def test_random_quote_skips_primary_source():
    """The random path never calls the quote-of-the-day source."""
    service, session = make_service(
        {ZENQUOTES_TODAY_URL: ZEN_OK, QUOTABLE_RANDOM_URL: QUOTABLE_OK}
    )

    assert service.get_random_quote() == Quote("Keep moving.", "Someone")
    assert [url for url, _ in session.calls] == [QUOTABLE_RANDOM_URL]


def test_random_quote_with_server_errors_uses_builtin_list():
    """Server errors on the random path end at the built-in list."""
    service, _ = make_service(
        {ZENQUOTES_TODAY_URL: SERVER_ERROR, QUOTABLE_RANDOM_URL: SERVER_ERROR}
    )

    quote = service.get_random_quote()
    assert quote in FALLBACK_QUOTES
    assert quote.author


def test_random_source_missing_fields_uses_builtin_list():
    """A random payload without an author is discarded."""
    service, _ = make_service(
        {QUOTABLE_RANDOM_URL: FakeResponse(payload={"content": "No author here"})}
    )
    assert service.get_random_quote() in FALLBACK_QUOTES


def test_requests_send_user_agent_and_timeout():
    """Each request carries the user agent and a timeout."""
    service, session = make_service({ZENQUOTES_TODAY_URL: ZEN_OK})
    service.get_daily_quote()

    _, kwargs = session.calls[0]
    assert kwargs["timeout"] == 10
    assert kwargs["headers"]["User-Agent"] == USER_AGENT


def test_injected_session_headers_are_left_alone():
    """A caller's session keeps its own default headers."""
    session = FakeSession({ZENQUOTES_TODAY_URL: ZEN_OK})
    session.headers["User-Agent"] = "SharedClient/2.0"

    service = QuoteService(session=session)
    service.get_daily_quote()

    assert session.headers == {"User-Agent": "SharedClient/2.0"}
    _, kwargs = session.calls[0]
    assert kwargs["headers"]["User-Agent"] == USER_AGENT


def test_fallback_list_is_fixed():
    """The built-in list holds eleven complete quotes."""
    assert len(FALLBACK_QUOTES) == 11
    assert isinstance(FALLBACK_QUOTES, tuple)
    assert all(quote.text and quote.author for quote in FALLBACK_QUOTES)


def test_fallback_selection_covers_the_list():
    """Random selection eventually reaches every built-in quote."""
    service, _ = make_service({})
    seen = {service.fallback_quote() for _ in range(500)}
    assert seen == set(FALLBACK_QUOTES)


def test_parsers_reject_wrong_shapes():
    """Parsers return None for payloads of the wrong shape."""
    assert parse_zenquotes({"q": "x", "a": "y"}) is None
    assert parse_zenquotes(["not a dict"]) is None
    assert parse_quotable([{"content": "x", "author": "y"}]) is None
    assert parse_quotable({"content": "x", "author": 42}) is None
    assert parse_quotable({"content": " Trim me ", "author": "A"}) == Quote("Trim me", "A")


def test_close_closes_session():
    """Closing the service closes its HTTP session."""
    service, session = make_service({})
    service.close()
    assert session.closed


def test_empty_fallback_list_is_refused():
    """A service cannot be built without fallback quotes."""
    with pytest.raises(ValueError):
        QuoteService(session=FakeSession(), fallback_quotes=())


def test_source_chains_are_configurable():
    """Daily and random chains can be replaced with other sources."""
    mirror = QuoteSource("mirror", "https://mirror.example/today", parse_zenquotes)
    session = FakeSession({mirror.url: ZEN_OK})
    service = QuoteService(
        session=session,
        daily_sources=(mirror, QUOTABLE_RANDOM),
        random_sources=(mirror,),
    )

    assert service.get_daily_quote() == Quote("Act as if.", "William James")
    assert service.get_random_quote() == Quote("Act as if.", "William James")
    assert [url for url, _ in session.calls] == [mirror.url, mirror.url]
