"""Rhythm contract — Pydantic v2 models."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class ChainType(str, Enum):
    daily = "daily"
    weekly_high = "weekly_high"
    weekly_low = "weekly_low"
    weekly_target = "weekly_target"
    monthly_target = "monthly_target"


class ChainUnit(str, Enum):
    days = "days"
    weeks = "weeks"
    months = "months"


class GoalType(str, Enum):
    duration = "duration"
    count = "count"


class JourneyStage(str, Enum):
    starting = "starting"
    building = "building"
    becoming = "becoming"
    being = "being"


class Tier(str, Enum):
    daily = "daily"
    most_days = "most_days"
    few_times = "few_times"
    weekly = "weekly"
    starting = "starting"


class Entry(BaseModel):
    """A single logged activity, as read from the entry store."""

    id: str | None = None
    timestamp: datetime
    duration_seconds: int | None = None
    count: int | None = None
    type: str | None = None
    category: str | None = None
    subcategory: str | None = None
    name: str = ""

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class RhythmDefinition(BaseModel):
    """A user's recurring-activity rule.

    Validation rejects definitions the engine cannot evaluate: the threshold
    for the tracked goal type must be set, and a designated target chain
    must carry its target.
    """

    id: str
    user_id: str | None = None
    name: str = ""
    goal_type: GoalType = GoalType.duration
    goal_unit: str | None = None
    chain_type: ChainType | None = None

    match_type: str | None = None
    match_category: str | None = None
    match_subcategory: str | None = None
    match_name: str | None = None

    duration_threshold_seconds: int | None = Field(default=None, ge=0)
    count_threshold: int | None = Field(default=None, ge=0)
    weekly_target_minutes: int | None = Field(default=None, ge=0)
    monthly_target_minutes: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_thresholds(self) -> RhythmDefinition:
        if self.goal_type == GoalType.duration and self.duration_threshold_seconds is None:
            raise ValueError("duration rhythm requires duration_threshold_seconds")
        if self.goal_type == GoalType.count and self.count_threshold is None:
            raise ValueError("count rhythm requires count_threshold")
        if self.chain_type == ChainType.weekly_target and self.weekly_target_minutes is None:
            raise ValueError("weekly_target chain requires weekly_target_minutes")
        if self.chain_type == ChainType.monthly_target and self.monthly_target_minutes is None:
            raise ValueError("monthly_target chain requires monthly_target_minutes")
        return self

    @property
    def threshold(self) -> int:
        """Daily completion threshold in the rhythm's own unit (seconds or count)."""
        if self.goal_type == GoalType.count:
            return self.count_threshold or 0
        return self.duration_threshold_seconds or 0


class DayStatus(BaseModel):
    date: dt.date
    total_seconds: int = 0
    total_count: int = 0
    entry_count: int = 0
    is_complete: bool = False
    is_future: bool = False


class ChainStat(BaseModel):
    type: ChainType
    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)
    unit: ChainUnit


class PeriodStatus(BaseModel):
    """One scanned period (day, week or month) and the chain value after it."""

    key: str
    start: date
    end: date
    complete_days: int = 0
    total_seconds: int = 0
    total_count: int = 0
    qualifies: bool = False
    elapsed: bool = True
    chain: int = 0


class PeriodProgress(BaseModel):
    """The in-progress period of a chain type, as seen from today."""

    chain_type: ChainType
    start: date
    end: date
    complete_days: int = 0
    total_seconds: int = 0
    total_count: int = 0
    days_remaining: int = 0
    qualifies: bool = False
    achieved_tier: Tier | None = None
    best_possible_tier: Tier | None = None


class RhythmTotals(BaseModel):
    total_sessions: int = 0
    total_seconds: int = 0
    total_count: int = 0
    total_hours: float = 0.0
    first_entry_date: date | None = None
    weeks_active: int = 0
    months_active: int = 0


class ChainSummary(BaseModel):
    """ChainStat plus display copy, one per tab."""

    stat: ChainStat
    label: str
    description: str
    display: str
    personal_best: bool = False


class RhythmProgress(BaseModel):
    """Top-level progress response for one rhythm — always constructible."""

    rhythm_id: str
    timezone: str = "UTC"
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    chains: list[ChainSummary] = Field(default_factory=list)
    current_period: PeriodProgress | None = None
    days: list[DayStatus] = Field(default_factory=list)
    totals: RhythmTotals = Field(default_factory=RhythmTotals)
    journey_stage: JourneyStage = JourneyStage.starting
    encouragement: str = ""
    nudge: str | None = None
    personal_best: bool = False
