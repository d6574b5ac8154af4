"""Static chain type and weekly tier definitions — configuration only."""

from __future__ import annotations

from dataclasses import dataclass

from app.config import settings
from app.rhythms.models import ChainType, ChainUnit, Tier


@dataclass(frozen=True, slots=True)
class ChainConfig:
    type: ChainType
    label: str
    short_label: str
    description: str
    unit: ChainUnit
    min_days_per_period: int | None = None  # None for target-based chains


CHAIN_CONFIGS: dict[ChainType, ChainConfig] = {
    ChainType.daily: ChainConfig(
        type=ChainType.daily,
        label="Daily Chain",
        short_label="Daily",
        description="Every day",
        unit=ChainUnit.days,
        min_days_per_period=1,
    ),
    ChainType.weekly_high: ChainConfig(
        type=ChainType.weekly_high,
        label="Weekly (High)",
        short_label=f"{settings.weekly_high_min_days}×/wk",
        description=f"{settings.weekly_high_min_days}+ days per week",
        unit=ChainUnit.weeks,
        min_days_per_period=settings.weekly_high_min_days,
    ),
    ChainType.weekly_low: ChainConfig(
        type=ChainType.weekly_low,
        label="Weekly (Regular)",
        short_label=f"{settings.weekly_low_min_days}×/wk",
        description=f"{settings.weekly_low_min_days}+ days per week",
        unit=ChainUnit.weeks,
        min_days_per_period=settings.weekly_low_min_days,
    ),
    ChainType.weekly_target: ChainConfig(
        type=ChainType.weekly_target,
        label="Weekly Target",
        short_label="Wk Goal",
        description="Minutes per week",
        unit=ChainUnit.weeks,
    ),
    ChainType.monthly_target: ChainConfig(
        type=ChainType.monthly_target,
        label="Monthly Target",
        short_label="Mo Goal",
        description="Minutes per month",
        unit=ChainUnit.months,
    ),
}


def get_chain_config(chain_type: ChainType) -> ChainConfig:
    return CHAIN_CONFIGS[chain_type]


def list_chain_configs() -> list[ChainConfig]:
    return list(CHAIN_CONFIGS.values())


# ---------------------------------------------------------------------------
# Weekly frequency tiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TierConfig:
    name: Tier
    label: str
    short_label: str
    min_days: int
    max_days: int


TIERS: dict[Tier, TierConfig] = {
    Tier.daily: TierConfig(Tier.daily, "Every Day", "Daily", 7, 7),
    Tier.most_days: TierConfig(Tier.most_days, "Most Days", "5-6×", 5, 6),
    Tier.few_times: TierConfig(Tier.few_times, "Several Times", "3-4×", 3, 4),
    Tier.weekly: TierConfig(Tier.weekly, "At Least Once", "1-2×", 1, 2),
    Tier.starting: TierConfig(Tier.starting, "Starting", "—", 0, 0),
}


def tier_for_days_completed(days_completed: int) -> Tier:
    for cfg in TIERS.values():
        if days_completed >= cfg.min_days:
            return cfg.name
    return Tier.starting


def best_possible_tier(days_completed: int, days_remaining: int) -> Tier:
    """Best tier still reachable this week."""
    return tier_for_days_completed(days_completed + days_remaining)
