"""Tests for chain formatting, nudges and display copy."""

from datetime import date

from app.rhythms.models import (
    ChainStat,
    ChainType,
    ChainUnit,
    JourneyStage,
    PeriodProgress,
)
from app.rhythms.presentation import (
    chain_summary,
    describe_chain,
    encouragement,
    format_chain_value,
    nudge_message,
)

from tests.conftest import make_rhythm


def _stat(chain_type: ChainType, current: int = 0, longest: int = 0) -> ChainStat:
    units = {
        ChainType.daily: ChainUnit.days,
        ChainType.monthly_target: ChainUnit.months,
    }
    return ChainStat(type=chain_type, current=current, longest=longest, unit=units.get(chain_type, ChainUnit.weeks))


def _progress(chain_type: ChainType, **overrides) -> PeriodProgress:
    fields = dict(chain_type=chain_type, start=date(2026, 2, 9), end=date(2026, 2, 15))
    fields.update(overrides)
    return PeriodProgress(**fields)


class TestFormatChainValue:
    def test_zero(self):
        assert format_chain_value(0, ChainUnit.weeks) == "—"

    def test_singular(self):
        assert format_chain_value(1, ChainUnit.weeks) == "1 week"
        assert format_chain_value(1, ChainUnit.days) == "1 day"
        assert format_chain_value(1, ChainUnit.months) == "1 month"

    def test_plural(self):
        assert format_chain_value(5, ChainUnit.days) == "5 days"
        assert format_chain_value(3, "months") == "3 months"

    def test_other_units(self):
        assert format_chain_value(1, "minutes") == "1 minute"
        assert format_chain_value(200, "reps") == "200 reps"


class TestNudgeWeeklyDays:
    def test_gap_this_week(self):
        rhythm = make_rhythm(chain_type="weekly_low")
        msg = nudge_message(_stat(ChainType.weekly_low, 5, 5), _progress(ChainType.weekly_low, complete_days=1, days_remaining=5), rhythm)
        assert msg == "2 more days this week to extend your chain"

    def test_singular_day(self):
        rhythm = make_rhythm(chain_type="weekly_low")
        msg = nudge_message(_stat(ChainType.weekly_low), _progress(ChainType.weekly_low, complete_days=2, days_remaining=3), rhythm)
        assert msg == "1 more day this week to start a new chain"

    def test_secured_period(self):
        rhythm = make_rhythm(chain_type="weekly_low")
        progress = _progress(ChainType.weekly_low, complete_days=3, days_remaining=4, qualifies=True)
        assert nudge_message(_stat(ChainType.weekly_low, 6, 6), progress, rhythm) is None

    def test_out_of_reach(self):
        rhythm = make_rhythm(chain_type="weekly_high")
        progress = _progress(ChainType.weekly_high, complete_days=1, days_remaining=1)
        assert nudge_message(_stat(ChainType.weekly_high, 2, 4), progress, rhythm) is None


class TestNudgeDaily:
    def test_minutes_left_today(self):
        rhythm = make_rhythm(chain_type="daily", duration_threshold_seconds=600)
        progress = _progress(ChainType.daily, start=date(2026, 2, 11), end=date(2026, 2, 11), total_seconds=240, days_remaining=1)
        assert nudge_message(_stat(ChainType.daily, 3, 8), progress, rhythm) == "6 more minutes today to extend your chain"

    def test_partial_minute_rounds_up(self):
        rhythm = make_rhythm(chain_type="daily", duration_threshold_seconds=360)
        progress = _progress(ChainType.daily, start=date(2026, 2, 11), end=date(2026, 2, 11), total_seconds=301, days_remaining=1)
        assert nudge_message(_stat(ChainType.daily), progress, rhythm) == "1 more minute today to start a new chain"

    def test_count_rhythm(self):
        rhythm = make_rhythm(chain_type="daily", goal_type="count", count_threshold=50, duration_threshold_seconds=None, goal_unit="push-ups")
        progress = _progress(ChainType.daily, start=date(2026, 2, 11), end=date(2026, 2, 11), total_count=20, days_remaining=1)
        assert nudge_message(_stat(ChainType.daily, 1, 1), progress, rhythm) == "30 more push-ups today to extend your chain"

    def test_done_today(self):
        rhythm = make_rhythm(chain_type="daily")
        progress = _progress(ChainType.daily, total_seconds=600, complete_days=1, qualifies=True)
        assert nudge_message(_stat(ChainType.daily, 4, 4), progress, rhythm) is None


class TestNudgeTargets:
    def test_weekly_minutes(self):
        rhythm = make_rhythm(chain_type="weekly_target", weekly_target_minutes=60)
        progress = _progress(ChainType.weekly_target, total_seconds=45 * 60, days_remaining=3)
        assert nudge_message(_stat(ChainType.weekly_target), progress, rhythm) == "15 more minutes this week to start a new chain"

    def test_monthly_minutes(self):
        rhythm = make_rhythm(chain_type="monthly_target", monthly_target_minutes=600)
        progress = _progress(
            ChainType.monthly_target,
            start=date(2026, 2, 1),
            end=date(2026, 2, 28),
            total_seconds=500 * 60,
            days_remaining=10,
        )
        assert nudge_message(_stat(ChainType.monthly_target, 2, 2), progress, rhythm) == "100 more minutes this month to extend your chain"

    def test_count_target(self):
        rhythm = make_rhythm(
            chain_type="weekly_target",
            goal_type="count",
            count_threshold=10,
            duration_threshold_seconds=None,
            weekly_target_minutes=200,
        )
        progress = _progress(ChainType.weekly_target, total_count=150, days_remaining=2)
        assert nudge_message(_stat(ChainType.weekly_target, 1, 1), progress, rhythm) == "50 more reps this week to extend your chain"

    def test_no_days_left(self):
        rhythm = make_rhythm(chain_type="weekly_target", weekly_target_minutes=60)
        progress = _progress(ChainType.weekly_target, total_seconds=0, days_remaining=0)
        assert nudge_message(_stat(ChainType.weekly_target), progress, rhythm) is None


class TestDisplayCopy:
    def test_describe_target_chain(self):
        rhythm = make_rhythm(weekly_target_minutes=90)
        assert describe_chain(ChainType.weekly_target, rhythm) == "90 minutes per week"

    def test_describe_day_chain(self):
        assert describe_chain(ChainType.weekly_low, make_rhythm()) == "3+ days per week"

    def test_chain_summary(self):
        summary = chain_summary(_stat(ChainType.weekly_low, 3, 3), make_rhythm())
        assert summary.label == "Weekly (Regular)"
        assert summary.display == "3 weeks"
        assert summary.personal_best

    def test_encouragement_for_every_stage(self):
        for stage in JourneyStage:
            assert encouragement(stage)
