"""Shared fixtures: a controllable clock, an on-disk store and a fake HTTP session."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
import requests

from gratitude.storage import EntryStore


class FakeClock:
    """Clock returning a settable time that advances a little on every call."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now

    def jump_to(self, moment: datetime) -> None:
        self.now = moment


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: object = None, body: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self._body = body

    def json(self) -> object:
        if self._body is not None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self._body, 0)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; maps URL to a response or an exception."""

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.routes = routes or {}
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append((url, kwargs))
        outcome = self.routes.get(url, FakeResponse(status_code=404))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 8, 0, 0))


@pytest.fixture
def store(tmp_path, clock):
    entry_store = EntryStore(tmp_path / "dailygratitude.db", clock=clock)
    entry_store.initialize()
    yield entry_store
    entry_store.close()
