"""Day bucketing and the completion rule.

Pure stateless functions. Day boundaries are local calendar dates in the
caller's timezone, never fixed 24h offsets from an instant, so DST weeks
bucket correctly.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, Iterator
from zoneinfo import ZoneInfo

from app.rhythms.models import DayStatus, Entry, GoalType, RhythmDefinition

logger = logging.getLogger(__name__)


def resolve_tz(tz: str | tzinfo) -> tzinfo:
    """Accept an IANA name or a tzinfo. Unknown names raise ZoneInfoNotFoundError."""
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def local_date(ts: datetime, tz: tzinfo) -> date:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date in [start, end]. Empty when start > end."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def is_complete(day: DayStatus, rhythm: RhythmDefinition) -> bool:
    """Completion rule for a single day.

    - future days are never complete
    - an empty day is complete only against a zero threshold
    - otherwise the day's seconds (duration rhythms) or count (count rhythms)
      must reach the threshold
    """
    if day.is_future:
        return False
    if day.entry_count == 0:
        return rhythm.threshold == 0
    if rhythm.goal_type == GoalType.count:
        return day.total_count >= rhythm.threshold
    return day.total_seconds >= rhythm.threshold


def bucket_days(
    entries: Iterable[Entry],
    start: date,
    end: date,
    tz: str | tzinfo,
    now: datetime,
    rhythm: RhythmDefinition | None = None,
) -> dict[date, DayStatus]:
    """Group entries into one DayStatus per local day in [start, end].

    Entries may arrive unsorted; entries outside the range are dropped.
    Every day in the range is present, zeroed when nothing matched. Days
    after today (in `tz`) are marked future but still carry whatever
    aggregates landed on them. When `rhythm` is given, is_complete is filled
    in. start > end yields an empty mapping.
    """
    zone = resolve_tz(tz)
    today = local_date(now, zone)

    days: dict[date, DayStatus] = {
        d: DayStatus(date=d, is_future=d > today) for d in iter_dates(start, end)
    }
    if not days:
        return days

    skipped = 0
    for entry in entries:
        day = days.get(local_date(entry.timestamp, zone))
        if day is None:
            skipped += 1
            continue
        day.total_seconds += entry.duration_seconds or 0
        day.total_count += entry.count or 0
        day.entry_count += 1

    if skipped:
        logger.debug("bucket_days: %d entries outside %s..%s", skipped, start, end)

    if rhythm is not None:
        for day in days.values():
            day.is_complete = is_complete(day, rhythm)

    return days
