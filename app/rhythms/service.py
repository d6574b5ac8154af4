"""Rhythm reads — fetch from the store, then run the pure engine.

All I/O happens here before the engine is called. Missing rhythms raise
RhythmNotFoundError; malformed ones raise connector.RhythmConfigError.
"""

from __future__ import annotations

from datetime import MAXYEAR, date, datetime, time, timedelta, timezone, tzinfo

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.rhythms import connector, engine
from app.rhythms.days import local_date, resolve_tz
from app.rhythms.models import ChainStat, DayStatus, Entry, RhythmDefinition, RhythmProgress


class RhythmNotFoundError(LookupError):
    pass


def _to_utc(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc)


def _local_midnight_utc(d: date, tz: tzinfo) -> datetime:
    """UTC instant of local midnight, clamped to the datetime range at either end."""
    try:
        return _to_utc(datetime.combine(d, time.min, tzinfo=tz))
    except OverflowError:
        bound = datetime.max if d.year == MAXYEAR else datetime.min
        return bound.replace(tzinfo=timezone.utc)


def _day_after_utc(d: date, tz: tzinfo) -> datetime:
    """Exclusive UTC upper bound for local day d."""
    if d == date.max:
        return datetime.max.replace(tzinfo=timezone.utc)
    return _local_midnight_utc(d + timedelta(days=1), tz)


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


async def _load_rhythm(session: AsyncSession, user_id: str, rhythm_id: str) -> RhythmDefinition:
    rhythm = await connector.fetch_rhythm(session, user_id, rhythm_id)
    if rhythm is None:
        raise RhythmNotFoundError(rhythm_id)
    return rhythm


async def _load_history(
    session: AsyncSession,
    user_id: str,
    rhythm: RhythmDefinition,
    zone: tzinfo,
    now: datetime,
) -> list[Entry]:
    """All matched entries up to the end of today (local)."""
    end = _day_after_utc(local_date(now, zone), zone)
    return await connector.fetch_entries(session, user_id, rhythm, None, end)


async def get_day_statuses(
    session: AsyncSession,
    user_id: str,
    rhythm_id: str,
    start: date,
    end: date,
    tz_name: str = "UTC",
    now: datetime | None = None,
) -> list[DayStatus]:
    rhythm = await _load_rhythm(session, user_id, rhythm_id)
    if start > end:
        return []
    zone = resolve_tz(tz_name)
    entries = await connector.fetch_entries(
        session,
        user_id,
        rhythm,
        _local_midnight_utc(start, zone),
        _day_after_utc(end, zone),
    )
    return engine.day_statuses(entries, rhythm, start, end, zone, _now(now))


async def get_chain_stats(
    session: AsyncSession,
    user_id: str,
    rhythm_id: str,
    tz_name: str = "UTC",
    now: datetime | None = None,
) -> list[ChainStat]:
    rhythm = await _load_rhythm(session, user_id, rhythm_id)
    zone = resolve_tz(tz_name)
    now = _now(now)
    entries = await _load_history(session, user_id, rhythm, zone, now)
    return engine.chain_stats(entries, rhythm, zone, now)


async def get_nudge(
    session: AsyncSession,
    user_id: str,
    rhythm_id: str,
    tz_name: str = "UTC",
    now: datetime | None = None,
) -> str | None:
    rhythm = await _load_rhythm(session, user_id, rhythm_id)
    zone = resolve_tz(tz_name)
    now = _now(now)
    entries = await _load_history(session, user_id, rhythm, zone, now)
    return engine.nudge(entries, rhythm, zone, now)


async def get_progress(
    session: AsyncSession,
    user_id: str,
    rhythm_id: str,
    tz_name: str = "UTC",
    now: datetime | None = None,
    window_days: int | None = None,
) -> RhythmProgress:
    rhythm = await _load_rhythm(session, user_id, rhythm_id)
    zone = resolve_tz(tz_name)
    now = _now(now)
    entries = await _load_history(session, user_id, rhythm, zone, now)
    return engine.progress(
        entries,
        rhythm,
        zone,
        now,
        window_days=window_days or settings.progress_window_days,
    )
