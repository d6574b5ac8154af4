"""Rhythm engine — pure composition of bucketer, chains, stages and copy.

Every function here is a deterministic function of (entries, rhythm, tz,
now). Nothing is cached and nothing is read from the clock; `now` is always
passed in.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Sequence

from app.rhythms.chains import calculate_chains, current_period
from app.rhythms.days import bucket_days, local_date, resolve_tz
from app.rhythms.matcher import filter_entries
from app.rhythms.models import (
    ChainStat,
    ChainType,
    DayStatus,
    Entry,
    RhythmDefinition,
    RhythmProgress,
)
from app.rhythms.presentation import chain_summary, encouragement, nudge_message
from app.rhythms.stages import calculate_totals, is_personal_best, journey_stage

logger = logging.getLogger(__name__)

# Chain type used for nudges when a rhythm shows every type
DEFAULT_CHAIN_TYPE = ChainType.weekly_low


def primary_chain_type(rhythm: RhythmDefinition) -> ChainType:
    return rhythm.chain_type or DEFAULT_CHAIN_TYPE


def day_statuses(
    entries: Sequence[Entry],
    rhythm: RhythmDefinition,
    start: date,
    end: date,
    tz: str | tzinfo,
    now: datetime,
) -> list[DayStatus]:
    """One DayStatus per local day in [start, end], completion filled in."""
    matched = filter_entries(entries, rhythm)
    return list(bucket_days(matched, start, end, tz, now, rhythm).values())


def history_days(
    entries: Sequence[Entry],
    rhythm: RhythmDefinition,
    tz: str | tzinfo,
    now: datetime,
) -> list[DayStatus]:
    """Days from the first matched entry through today.

    With no entries (or only future ones) this is just today.
    """
    zone = resolve_tz(tz)
    today = local_date(now, zone)
    matched = filter_entries(entries, rhythm)
    first = min((local_date(e.timestamp, zone) for e in matched), default=today)
    return list(bucket_days(matched, min(first, today), today, zone, now, rhythm).values())


def chain_stats(
    entries: Sequence[Entry],
    rhythm: RhythmDefinition,
    tz: str | tzinfo,
    now: datetime,
) -> list[ChainStat]:
    """One ChainStat for a designated chain type, else one per applicable type."""
    zone = resolve_tz(tz)
    days = history_days(entries, rhythm, zone, now)
    return calculate_chains(days, rhythm, local_date(now, zone))


def nudge(
    entries: Sequence[Entry],
    rhythm: RhythmDefinition,
    tz: str | tzinfo,
    now: datetime,
) -> str | None:
    zone = resolve_tz(tz)
    today = local_date(now, zone)
    days = history_days(entries, rhythm, zone, now)
    chain_type = primary_chain_type(rhythm)
    stat = next(s for s in calculate_chains(days, rhythm, today) if s.type == chain_type)
    return nudge_message(stat, current_period(days, rhythm, chain_type, today), rhythm)


def progress(
    entries: Sequence[Entry],
    rhythm: RhythmDefinition,
    tz: str | tzinfo,
    now: datetime,
    window_days: int = 365,
) -> RhythmProgress:
    """Everything the rhythm detail screen shows, from one pass over history."""
    zone = resolve_tz(tz)
    today = local_date(now, zone)
    matched = [e for e in filter_entries(entries, rhythm) if local_date(e.timestamp, zone) <= today]

    history = history_days(matched, rhythm, zone, now)
    stats = calculate_chains(history, rhythm, today)
    chain_type = primary_chain_type(rhythm)
    period = current_period(history, rhythm, chain_type, today)
    primary = next(s for s in stats if s.type == chain_type)

    totals = calculate_totals(matched, history, zone)
    stage = journey_stage(totals)

    window_start = today - timedelta(days=max(window_days, 1) - 1)
    window = bucket_days(matched, window_start, today, zone, now, rhythm)

    logger.debug(
        "Rhythm %s: %d entries, %d history days, stage=%s",
        rhythm.id,
        len(matched),
        len(history),
        stage.value,
    )

    return RhythmProgress(
        rhythm_id=rhythm.id,
        timezone=str(zone),
        generated_at=now,
        chains=[chain_summary(s, rhythm) for s in stats],
        current_period=period,
        days=list(window.values()),
        totals=totals,
        journey_stage=stage,
        encouragement=encouragement(stage),
        nudge=nudge_message(primary, period, rhythm),
        personal_best=is_personal_best(primary),
    )
