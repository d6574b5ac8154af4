"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.main import app
from app.rhythms.models import Entry, RhythmDefinition


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession used in endpoint tests.

    Queries against the rhythms table return `rhythms`; everything else
    returns `entries`. Executed SQL and params are kept in `calls`.
    """

    def __init__(
        self,
        rhythms: list[dict[str, Any]] | None = None,
        entries: list[dict[str, Any]] | None = None,
    ):
        self.rhythms = rhythms or []
        self.entries = entries or []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def execute(self, stmt, params=None):
        sql = str(stmt)
        self.calls.append((sql, params or {}))
        if "FROM rhythms" in sql:
            return FakeResult(self.rhythms)
        return FakeResult(self.entries)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return an empty FakeSession (fill rhythms/entries in tests as needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def utc(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_entry(
    ts: datetime,
    duration_seconds: int | None = 600,
    count: int | None = None,
    name: str = "meditation",
    category: str | None = "mindfulness",
    subcategory: str | None = "sitting",
    type: str | None = "timed",
    entry_id: str | None = None,
) -> Entry:
    return Entry(
        id=entry_id,
        timestamp=ts,
        duration_seconds=duration_seconds,
        count=count,
        type=type,
        category=category,
        subcategory=subcategory,
        name=name,
    )


def make_rhythm(**overrides) -> RhythmDefinition:
    """Duration rhythm (6 min/day) matching mindfulness entries by default."""
    fields: dict[str, Any] = dict(
        id="r1",
        user_id="u1",
        name="Meditate",
        goal_type="duration",
        match_category="mindfulness",
        duration_threshold_seconds=360,
    )
    fields.update(overrides)
    return RhythmDefinition(**fields)


def make_rhythm_row(**overrides) -> dict[str, Any]:
    """Full rhythms-table row as the connector selects it."""
    row: dict[str, Any] = {
        "id": "r1",
        "user_id": "u1",
        "name": "Meditate",
        "goal_type": "duration",
        "goal_unit": None,
        "chain_type": None,
        "match_type": None,
        "match_category": "mindfulness",
        "match_subcategory": None,
        "match_name": None,
        "duration_threshold_seconds": 360,
        "count_threshold": None,
        "weekly_target_minutes": None,
        "monthly_target_minutes": None,
    }
    row.update(overrides)
    return row


def make_entry_row(
    ts: datetime,
    duration_seconds: int | None = 600,
    count: int | None = None,
    entry_id: str = "e1",
) -> dict[str, Any]:
    """entries-table row as the connector selects it."""
    return {
        "id": entry_id,
        "timestamp": ts,
        "duration_seconds": duration_seconds,
        "count": count,
        "type": "timed",
        "category": "mindfulness",
        "subcategory": "sitting",
        "name": "meditation",
    }
