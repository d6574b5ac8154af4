"""Tests for personal best, totals and journey stage."""

from datetime import date

import pytest

from app.config import settings
from app.rhythms.days import bucket_days
from app.rhythms.models import ChainStat, ChainType, ChainUnit, JourneyStage, RhythmTotals
from app.rhythms.stages import calculate_totals, is_personal_best, journey_stage

from tests.conftest import make_entry, make_rhythm, utc


def _stat(current: int, longest: int) -> ChainStat:
    return ChainStat(type=ChainType.weekly_low, current=current, longest=longest, unit=ChainUnit.weeks)


class TestPersonalBest:
    def test_tie(self):
        assert is_personal_best(_stat(4, 4))

    def test_behind(self):
        assert not is_personal_best(_stat(2, 4))

    def test_zero_chain(self):
        assert not is_personal_best(_stat(0, 0))

    def test_zero_chain_with_history(self):
        assert not is_personal_best(_stat(0, 3))


class TestCalculateTotals:
    def test_empty(self):
        totals = calculate_totals([], [], "UTC")
        assert totals == RhythmTotals()

    def test_totals(self):
        rhythm = make_rhythm()
        entries = [
            make_entry(utc(2026, 2, 10), duration_seconds=1800, count=5),
            make_entry(utc(2026, 1, 5), duration_seconds=1800, count=None),
            make_entry(utc(2026, 1, 6), duration_seconds=60),  # below threshold
            make_entry(utc(2026, 1, 30), duration_seconds=600),
        ]
        days = list(bucket_days(entries, date(2026, 1, 5), date(2026, 2, 10), "UTC", utc(2026, 2, 10), rhythm).values())
        totals = calculate_totals(entries, days, "UTC")
        assert totals.total_sessions == 4
        assert totals.total_seconds == 4260
        assert totals.total_count == 5
        assert totals.total_hours == 1.18
        assert totals.first_entry_date == date(2026, 1, 5)
        # complete days: Jan 5, Jan 30, Feb 10 → three weeks, two months
        assert totals.weeks_active == 3
        assert totals.months_active == 2

    def test_first_entry_date_is_local(self):
        entries = [make_entry(utc(2026, 1, 5, 3))]
        totals = calculate_totals(entries, [], "America/New_York")
        assert totals.first_entry_date == date(2026, 1, 4)


class TestJourneyStage:
    @pytest.mark.parametrize(
        "weeks_active, expected",
        [
            (0, JourneyStage.starting),
            (1, JourneyStage.starting),
            (settings.journey_building_weeks, JourneyStage.building),
            (settings.journey_becoming_weeks, JourneyStage.becoming),
            (settings.journey_being_weeks - 1, JourneyStage.becoming),
            (settings.journey_being_weeks, JourneyStage.being),
            (100, JourneyStage.being),
        ],
    )
    def test_thresholds(self, weeks_active, expected):
        assert journey_stage(RhythmTotals(total_sessions=10, weeks_active=weeks_active)) == expected

    def test_no_sessions_is_starting(self):
        assert journey_stage(RhythmTotals()) == JourneyStage.starting

    def test_thresholds_are_configurable(self, monkeypatch):
        monkeypatch.setattr(settings, "journey_building_weeks", 1)
        assert journey_stage(RhythmTotals(total_sessions=1, weeks_active=1)) == JourneyStage.building
