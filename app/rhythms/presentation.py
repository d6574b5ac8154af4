"""Display copy for chains — formatting, nudges, encouragement.

Consumed by the calendar, heatmap and chain-tab renderers; holds no chain
logic of its own.
"""

from __future__ import annotations

import math

from app.rhythms.chain_config import get_chain_config
from app.rhythms.chains import chain_target, period_amount
from app.rhythms.models import (
    ChainStat,
    ChainSummary,
    ChainType,
    ChainUnit,
    GoalType,
    JourneyStage,
    PeriodProgress,
    RhythmDefinition,
)
from app.rhythms.stages import is_personal_best

EMPTY_VALUE = "—"

PERIOD_PHRASE: dict[ChainUnit, str] = {
    ChainUnit.days: "today",
    ChainUnit.weeks: "this week",
    ChainUnit.months: "this month",
}

ENCOURAGEMENTS: dict[JourneyStage, str] = {
    JourneyStage.starting: "Every journey begins with a single step",
    JourneyStage.building: "A practice is forming",
    JourneyStage.becoming: "This is who you are now",
    JourneyStage.being: "It's simply part of your life",
}


def _unit_for(value: int, unit: str) -> str:
    if value == 1 and unit.endswith("s"):
        return unit[:-1]
    return unit


def pluralize(value: int, unit: str) -> str:
    """'1 week', '3 weeks'. Units are given in plural form."""
    return f"{value} {_unit_for(value, unit)}"


def more(value: int, unit: str) -> str:
    """'2 more days', '1 more minute'."""
    return f"{value} more {_unit_for(value, unit)}"


def format_chain_value(value: int, unit: ChainUnit | str) -> str:
    if value == 0:
        return EMPTY_VALUE
    unit_name = unit.value if isinstance(unit, ChainUnit) else unit
    return pluralize(value, unit_name)


def describe_chain(chain_type: ChainType, rhythm: RhythmDefinition) -> str:
    cfg = get_chain_config(chain_type)
    target = {
        ChainType.weekly_target: (rhythm.weekly_target_minutes, "week"),
        ChainType.monthly_target: (rhythm.monthly_target_minutes, "month"),
    }.get(chain_type)
    if target is None or target[0] is None:
        return cfg.description
    value, per = target
    return f"{pluralize(value, _amount_unit(rhythm))} per {per}"


def chain_summary(stat: ChainStat, rhythm: RhythmDefinition) -> ChainSummary:
    return ChainSummary(
        stat=stat,
        label=get_chain_config(stat.type).label,
        description=describe_chain(stat.type, rhythm),
        display=format_chain_value(stat.current, stat.unit),
        personal_best=is_personal_best(stat),
    )


def encouragement(stage: JourneyStage) -> str:
    return ENCOURAGEMENTS[stage]


# ---------------------------------------------------------------------------
# Nudges
# ---------------------------------------------------------------------------

def _amount_unit(rhythm: RhythmDefinition) -> str:
    if rhythm.goal_type == GoalType.count:
        return rhythm.goal_unit or "reps"
    return "minutes"


def _amount_gap(gap: int, rhythm: RhythmDefinition) -> str:
    """Remaining amount as display text; seconds round up to whole minutes."""
    if rhythm.goal_type == GoalType.duration:
        gap = math.ceil(gap / 60)
    return more(gap, _amount_unit(rhythm))


def nudge_message(
    stat: ChainStat,
    progress: PeriodProgress,
    rhythm: RhythmDefinition,
) -> str | None:
    """Prompt for closing the gap on the in-progress period.

    None when the period is already secured, or when the gap can no longer
    be closed in the days left.
    """
    if progress.qualifies or progress.days_remaining <= 0:
        return None

    cfg = get_chain_config(stat.type)
    goal = "extend your chain" if stat.current > 0 else "start a new chain"
    when = PERIOD_PHRASE[cfg.unit]

    if stat.type == ChainType.daily:
        gap = rhythm.threshold - period_amount(progress, rhythm)
        if gap <= 0:
            return None
        return f"{_amount_gap(gap, rhythm)} {when} to {goal}"

    if cfg.min_days_per_period is not None:
        days_needed = cfg.min_days_per_period - progress.complete_days
        if days_needed <= 0 or days_needed > progress.days_remaining:
            return None
        return f"{more(days_needed, 'days')} {when} to {goal}"

    target = chain_target(stat.type, rhythm)
    if target is None:
        return None
    gap = target - period_amount(progress, rhythm)
    if gap <= 0:
        return None
    return f"{_amount_gap(gap, rhythm)} {when} to {goal}"
