"""Chain calculator — the five chain types over one DayStatus sequence.

Every chain type runs the same single pass over its periods (days, Monday
weeks or calendar months):

- a qualifying period extends the running chain
- a non-qualifying period resets it only once the period has elapsed
- the in-progress period (the one holding today) never breaks a chain, but
  extends it as soon as it qualifies

`longest` is the maximum running value seen; `current` is the running value
after the last period that is not in the future. Future days contribute
nothing, whatever data they carry.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Iterable, Sequence

from app.rhythms.chain_config import (
    best_possible_tier,
    get_chain_config,
    tier_for_days_completed,
)
from app.rhythms.models import (
    ChainStat,
    ChainType,
    ChainUnit,
    DayStatus,
    GoalType,
    PeriodProgress,
    PeriodStatus,
    RhythmDefinition,
)


# ---------------------------------------------------------------------------
# Period boundaries
# ---------------------------------------------------------------------------

def week_start(d: date) -> date:
    """Monday of d's week."""
    return d - timedelta(days=d.weekday())


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    _, last = calendar.monthrange(d.year, d.month)
    return d.replace(day=last)


def period_bounds(d: date, unit: ChainUnit) -> tuple[date, date]:
    """Inclusive [start, end] of the period of `unit` containing d."""
    if unit == ChainUnit.days:
        return d, d
    if unit == ChainUnit.weeks:
        start = week_start(d)
        if (date.max - start).days < 6:
            # the calendar ends mid-week
            return start, date.max
        return start, start + timedelta(days=6)
    return month_start(d), month_end(d)


def period_key(start: date, unit: ChainUnit) -> str:
    if unit == ChainUnit.months:
        return start.strftime("%Y-%m")
    return start.isoformat()


# ---------------------------------------------------------------------------
# Amounts and qualification
# ---------------------------------------------------------------------------

def period_amount(period: PeriodStatus | PeriodProgress, rhythm: RhythmDefinition) -> int:
    """Summed amount in the rhythm's unit: seconds for duration, count for count."""
    if rhythm.goal_type == GoalType.count:
        return period.total_count
    return period.total_seconds


def target_amount(target: int | None, rhythm: RhythmDefinition) -> int | None:
    """Period target in the same unit as period_amount.

    Duration rhythms configure minutes, compared against seconds. Count
    rhythms read the configured value as a count.
    """
    if target is None:
        return None
    if rhythm.goal_type == GoalType.count:
        return target
    return target * 60


def chain_target(chain_type: ChainType, rhythm: RhythmDefinition) -> int | None:
    """Period target for the target-based chain types, None for the others."""
    if chain_type == ChainType.weekly_target:
        return target_amount(rhythm.weekly_target_minutes, rhythm)
    if chain_type == ChainType.monthly_target:
        return target_amount(rhythm.monthly_target_minutes, rhythm)
    return None


def _min_days_rule(chain_type: ChainType) -> Callable[[PeriodStatus | PeriodProgress, RhythmDefinition], bool]:
    min_days = get_chain_config(chain_type).min_days_per_period or 0

    def qualifies(period: PeriodStatus | PeriodProgress, rhythm: RhythmDefinition) -> bool:
        return period.complete_days >= min_days

    return qualifies


def _target_rule(chain_type: ChainType) -> Callable[[PeriodStatus | PeriodProgress, RhythmDefinition], bool]:
    def qualifies(period: PeriodStatus | PeriodProgress, rhythm: RhythmDefinition) -> bool:
        target = chain_target(chain_type, rhythm)
        if target is None:
            return False
        return period_amount(period, rhythm) >= target

    return qualifies


QUALIFIERS: dict[ChainType, Callable[[PeriodStatus | PeriodProgress, RhythmDefinition], bool]] = {
    ChainType.daily: _min_days_rule(ChainType.daily),
    ChainType.weekly_high: _min_days_rule(ChainType.weekly_high),
    ChainType.weekly_low: _min_days_rule(ChainType.weekly_low),
    ChainType.weekly_target: _target_rule(ChainType.weekly_target),
    ChainType.monthly_target: _target_rule(ChainType.monthly_target),
}


def applicable_chain_types(rhythm: RhythmDefinition) -> list[ChainType]:
    """Chain types the rhythm can be evaluated against.

    A rhythm with a designated chain type gets just that one. Otherwise all
    day-count types, plus each target type whose target is configured.
    """
    if rhythm.chain_type is not None:
        return [rhythm.chain_type]
    types = [ChainType.daily, ChainType.weekly_high, ChainType.weekly_low]
    if rhythm.weekly_target_minutes is not None:
        types.append(ChainType.weekly_target)
    if rhythm.monthly_target_minutes is not None:
        types.append(ChainType.monthly_target)
    return types


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Bucket:
    start: date
    end: date
    days: list[DayStatus] = field(default_factory=list)


def _group(days: Iterable[DayStatus], unit: ChainUnit) -> list[_Bucket]:
    """Group ascending days into consecutive periods of `unit`."""
    buckets: list[_Bucket] = []
    for day in days:
        start, end = period_bounds(day.date, unit)
        if not buckets or buckets[-1].start != start:
            buckets.append(_Bucket(start=start, end=end))
        buckets[-1].days.append(day)
    return buckets


def _summarize(bucket: _Bucket, unit: ChainUnit, today: date) -> PeriodStatus:
    return PeriodStatus(
        key=period_key(bucket.start, unit),
        start=bucket.start,
        end=bucket.end,
        complete_days=sum(1 for d in bucket.days if d.is_complete),
        total_seconds=sum(d.total_seconds for d in bucket.days),
        total_count=sum(d.total_count for d in bucket.days),
        elapsed=bucket.end < today,
    )


def period_statuses(
    days: Sequence[DayStatus],
    rhythm: RhythmDefinition,
    chain_type: ChainType,
    today: date,
) -> list[PeriodStatus]:
    """Per-period breakdown with the running chain value after each period.

    `days` must be ascending by date. A hole between two periods (a missing
    stretch of days) counts as elapsed and empty, so it resets the chain.
    """
    unit = get_chain_config(chain_type).unit
    qualifies = QUALIFIERS[chain_type]
    past = [d for d in days if not d.is_future and d.date <= today]

    periods: list[PeriodStatus] = []
    run = 0
    previous_end: date | None = None
    for bucket in _group(past, unit):
        if previous_end is not None and bucket.start > previous_end + timedelta(days=1):
            run = 0
        period = _summarize(bucket, unit, today)
        period.qualifies = qualifies(period, rhythm)
        if period.qualifies:
            run += 1
        elif period.elapsed:
            run = 0
        period.chain = run
        periods.append(period)
        previous_end = bucket.end
    return periods


def calculate_chain(
    days: Sequence[DayStatus],
    rhythm: RhythmDefinition,
    chain_type: ChainType,
    today: date,
) -> ChainStat:
    """Current and longest chain for one chain type."""
    periods = period_statuses(days, rhythm, chain_type, today)
    return ChainStat(
        type=chain_type,
        current=periods[-1].chain if periods else 0,
        longest=max((p.chain for p in periods), default=0),
        unit=get_chain_config(chain_type).unit,
    )


def calculate_chains(
    days: Sequence[DayStatus],
    rhythm: RhythmDefinition,
    today: date,
) -> list[ChainStat]:
    return [calculate_chain(days, rhythm, t, today) for t in applicable_chain_types(rhythm)]


# ---------------------------------------------------------------------------
# In-progress period
# ---------------------------------------------------------------------------

def current_period(
    days: Sequence[DayStatus],
    rhythm: RhythmDefinition,
    chain_type: ChainType,
    today: date,
) -> PeriodProgress:
    """Progress through the period that holds today.

    days_remaining counts the days after today, plus today itself when today
    can still change the outcome: always for target chains, and only while
    today is incomplete for day-count chains.
    """
    cfg = get_chain_config(chain_type)
    start, end = period_bounds(today, cfg.unit)
    in_period = [d for d in days if start <= d.date <= today and not d.is_future]
    today_complete = any(d.is_complete for d in in_period if d.date == today)

    progress = PeriodProgress(
        chain_type=chain_type,
        start=start,
        end=end,
        complete_days=sum(1 for d in in_period if d.is_complete),
        total_seconds=sum(d.total_seconds for d in in_period),
        total_count=sum(d.total_count for d in in_period),
    )

    days_after_today = (end - today).days
    if cfg.min_days_per_period is None:
        progress.days_remaining = days_after_today + 1
    else:
        progress.days_remaining = days_after_today + (0 if today_complete else 1)

    progress.qualifies = QUALIFIERS[chain_type](progress, rhythm)

    if cfg.unit == ChainUnit.weeks and cfg.min_days_per_period is not None:
        progress.achieved_tier = tier_for_days_completed(progress.complete_days)
        progress.best_possible_tier = best_possible_tier(progress.complete_days, progress.days_remaining)

    return progress
