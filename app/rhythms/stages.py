"""Personal-best check, rhythm totals and journey stage."""

from __future__ import annotations

from datetime import tzinfo
from typing import Sequence

from app.config import settings
from app.rhythms.chains import month_start, week_start
from app.rhythms.days import local_date, resolve_tz
from app.rhythms.models import ChainStat, DayStatus, Entry, JourneyStage, RhythmTotals


def is_personal_best(stat: ChainStat) -> bool:
    """True when the current chain ties or beats the longest. A zero chain never is."""
    return stat.current > 0 and stat.current >= stat.longest


def calculate_totals(
    entries: Sequence[Entry],
    days: Sequence[DayStatus],
    tz: str | tzinfo,
) -> RhythmTotals:
    """Cumulative totals over all matched entries.

    weeks_active / months_active count distinct Monday weeks and calendar
    months holding at least one complete day.
    """
    zone = resolve_tz(tz)
    total_seconds = sum(e.duration_seconds or 0 for e in entries)
    complete = [d.date for d in days if d.is_complete]
    return RhythmTotals(
        total_sessions=len(entries),
        total_seconds=total_seconds,
        total_count=sum(e.count or 0 for e in entries),
        total_hours=round(total_seconds / 3600, 2),
        first_entry_date=min((local_date(e.timestamp, zone) for e in entries), default=None),
        weeks_active=len({week_start(d) for d in complete}),
        months_active=len({month_start(d) for d in complete}),
    )


def journey_stage(totals: RhythmTotals) -> JourneyStage:
    """Step function over weeks active. Display copy only."""
    if totals.total_sessions == 0:
        return JourneyStage.starting
    if totals.weeks_active >= settings.journey_being_weeks:
        return JourneyStage.being
    if totals.weeks_active >= settings.journey_becoming_weeks:
        return JourneyStage.becoming
    if totals.weeks_active >= settings.journey_building_weeks:
        return JourneyStage.building
    return JourneyStage.starting
