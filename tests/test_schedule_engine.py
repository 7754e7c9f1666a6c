"""Unit tests for schedule_engine.py RecurrenceEngine.

Covers:
- Stepping for every frequency class
- End-of-month clamping (28/29/30) and leap years
- Weekly wraparound with several selected days, biweekly cadence
- Nth / last weekday monthly patterns
- Catch-up resolution, end conditions and the generation gate
- Occurrence previews and RRULE export (cross-checked with dateutil.rrule)
- "Today" defaults of the module-level functions
"""

from datetime import date, datetime, timedelta
from itertools import islice
from zoneinfo import ZoneInfo

from dateutil.rrule import rrulestr
from freezegun import freeze_time
import pytest

from taskrecur import const
from taskrecur.engines.schedule_engine import (
    RecurrenceEngine,
    next_occurrence,
    should_generate_next,
    step_once,
)
from taskrecur.schedules import (
    BiweeklySchedule,
    DailySchedule,
    DayOfMonth,
    DayOfWeek,
    MonthlySchedule,
    QuarterlySchedule,
    Schedule,
    WeeklySchedule,
    YearlySchedule,
)
from taskrecur.utils import dt_utils

MON, TUE, WED, THU, FRI, SAT, SUN = 1, 2, 3, 4, 5, 6, 0


def naive_next(schedule: Schedule, current: date, reference: date) -> date:
    """Resolve by plain repeated stepping (no fast-forward)."""
    candidate = step_once(schedule, current)
    while candidate <= reference:
        candidate = step_once(schedule, candidate)
    return candidate


# =============================================================================
# Stepping: daily / yearly
# =============================================================================


class TestDailyStepping:
    """Test daily stepping."""

    def test_interval_one(self) -> None:
        """Daily interval 1 advances one day."""
        assert step_once(DailySchedule(), date(2024, 1, 15)) == date(2024, 1, 16)

    def test_interval_three(self) -> None:
        """Daily interval 3 advances three days."""
        schedule = DailySchedule(interval=3)
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 1, 18)

    def test_crosses_year_boundary(self) -> None:
        """Dec 31 + 1 day crosses into the next year."""
        assert step_once(DailySchedule(), date(2024, 12, 31)) == date(2025, 1, 1)

    def test_crosses_month_boundary(self) -> None:
        """Jan 30 + 3 days lands in February."""
        schedule = DailySchedule(interval=3)
        assert step_once(schedule, date(2026, 1, 30)) == date(2026, 2, 2)


class TestYearlyStepping:
    """Test yearly stepping and Feb 29 clamping."""

    def test_interval_one(self) -> None:
        """Yearly keeps month and day."""
        assert step_once(YearlySchedule(), date(2024, 1, 15)) == date(2025, 1, 15)

    def test_interval_two(self) -> None:
        """Yearly interval 2 skips a year."""
        schedule = YearlySchedule(interval=2)
        assert step_once(schedule, date(2024, 1, 15)) == date(2026, 1, 15)

    def test_feb29_clamps_to_feb28(self) -> None:
        """Feb 29 2024 + 1 year clamps to Feb 28 2025."""
        assert step_once(YearlySchedule(), date(2024, 2, 29)) == date(2025, 2, 28)

    def test_feb29_to_leap_year(self) -> None:
        """Feb 29 + 4 years stays on Feb 29."""
        schedule = YearlySchedule(interval=4)
        assert step_once(schedule, date(2024, 2, 29)) == date(2028, 2, 29)


# =============================================================================
# Stepping: weekly / biweekly
# =============================================================================


class TestWeeklyStepping:
    """Test weekly stepping with and without selected days."""

    def test_without_days_keeps_weekday(self) -> None:
        """No selected days adds whole weeks."""
        assert step_once(WeeklySchedule(), date(2026, 1, 7)) == date(2026, 1, 14)

    def test_without_days_interval_two(self) -> None:
        """No selected days, interval 2 adds two weeks."""
        schedule = WeeklySchedule(interval=2)
        assert step_once(schedule, date(2026, 1, 7)) == date(2026, 1, 21)

    def test_single_day_same_weekday(self) -> None:
        """Monday-only from a Monday is the following Monday."""
        schedule = WeeklySchedule(days_of_week={MON})
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 1, 22)

    def test_next_selected_day_in_same_week(self) -> None:
        """Mon/Wed from Monday moves to Wednesday."""
        schedule = WeeklySchedule(days_of_week={MON, WED})
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 1, 17)

    def test_wraps_to_next_week(self) -> None:
        """Mon/Wed from Wednesday wraps to next Monday."""
        schedule = WeeklySchedule(days_of_week={MON, WED})
        assert step_once(schedule, date(2024, 1, 17)) == date(2024, 1, 22)

    def test_mon_wed_fri_sequence(self) -> None:
        """Mon/Wed/Fri walks Wed → Fri → Mon."""
        schedule = WeeklySchedule(days_of_week={MON, WED, FRI})
        wednesday = date(2026, 1, 7)

        friday = step_once(schedule, wednesday)
        monday = step_once(schedule, friday)

        assert friday == date(2026, 1, 9)
        assert monday == date(2026, 1, 12)

    def test_anchor_not_on_selected_day(self) -> None:
        """Tuesday anchor with Mon/Fri moves to Friday of the same week."""
        schedule = WeeklySchedule(days_of_week={MON, FRI})
        assert step_once(schedule, date(2026, 1, 6)) == date(2026, 1, 9)

    def test_sunday_only(self) -> None:
        """Sunday is the first day of the week (index 0)."""
        schedule = WeeklySchedule(days_of_week={SUN})
        assert step_once(schedule, date(2026, 1, 4)) == date(2026, 1, 11)

    def test_saturday_only(self) -> None:
        """Saturday is the last day of the week (index 6)."""
        schedule = WeeklySchedule(days_of_week={SAT})
        assert step_once(schedule, date(2026, 1, 3)) == date(2026, 1, 10)

    def test_interval_two_wraps_skipping_a_week(self) -> None:
        """Interval 2 skips one full week when wrapping."""
        schedule = WeeklySchedule(interval=2, days_of_week={MON})
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 1, 29)

    def test_interval_two_multi_day(self) -> None:
        """Interval 2 Mon/Wed from Wednesday lands on Monday two weeks on."""
        schedule = WeeklySchedule(interval=2, days_of_week={MON, WED})
        assert step_once(schedule, date(2026, 1, 7)) == date(2026, 1, 19)


class TestBiweeklyStepping:
    """Test biweekly cadence."""

    def test_without_days_adds_fourteen_days(self) -> None:
        """Biweekly without days adds 14 days."""
        assert step_once(BiweeklySchedule(), date(2026, 1, 7)) == date(2026, 1, 21)

    def test_interval_two_adds_four_weeks(self) -> None:
        """Biweekly interval 2 means every four weeks."""
        schedule = BiweeklySchedule(interval=2)
        assert step_once(schedule, date(2026, 1, 7)) == date(2026, 2, 4)

    def test_single_day(self) -> None:
        """Biweekly Monday from Monday is two weeks later."""
        schedule = BiweeklySchedule(days_of_week={MON})
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 1, 29)

    def test_matches_weekly_interval_two(self) -> None:
        """Biweekly interval 1 steps exactly like weekly interval 2."""
        biweekly = BiweeklySchedule(days_of_week={MON, WED})
        weekly = WeeklySchedule(interval=2, days_of_week={MON, WED})

        current = date(2026, 1, 5)
        for _ in range(20):
            assert step_once(biweekly, current) == step_once(weekly, current)
            current = step_once(biweekly, current)


# =============================================================================
# Stepping: monthly / quarterly
# =============================================================================


class TestMonthlyClamping:
    """Test monthly day-of-month stepping and clamping."""

    def test_day_fifteen(self) -> None:
        """Day 15 moves to the 15th of next month."""
        schedule = MonthlySchedule(pattern=DayOfMonth(15))
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 2, 15)

    def test_day_31_clamps_to_feb29_in_leap_year(self) -> None:
        """Day 31 lands on Feb 29 in a leap year."""
        schedule = MonthlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2024, 1, 31)) == date(2024, 2, 29)

    def test_day_31_clamps_to_feb28(self) -> None:
        """Day 31 lands on Feb 28 in a common year."""
        schedule = MonthlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2023, 1, 31)) == date(2023, 2, 28)

    def test_day_31_clamps_to_30(self) -> None:
        """Day 31 lands on the 30th in 30-day months."""
        schedule = MonthlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2026, 3, 31)) == date(2026, 4, 30)

    def test_day_30_clamps_in_february(self) -> None:
        """Day 30 lands on Feb 28."""
        schedule = MonthlySchedule(pattern=DayOfMonth(30))
        assert step_once(schedule, date(2026, 1, 30)) == date(2026, 2, 28)

    def test_pattern_day_restored_after_short_month(self) -> None:
        """Day 31 goes back to the 31st once the month is long enough."""
        schedule = MonthlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2026, 2, 28)) == date(2026, 3, 31)

    def test_pattern_day_differs_from_anchor(self) -> None:
        """Pattern day wins over the anchor's day number."""
        schedule = MonthlySchedule(pattern=DayOfMonth(15))
        assert step_once(schedule, date(2026, 1, 10)) == date(2026, 2, 15)

    def test_interval_three(self) -> None:
        """Monthly interval 3 jumps three months."""
        schedule = MonthlySchedule(interval=3, pattern=DayOfMonth(15))
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 4, 15)

    def test_interval_two_day_31(self) -> None:
        """Jan 31 every 2 months is Mar 31."""
        schedule = MonthlySchedule(interval=2, pattern=DayOfMonth(31))
        assert step_once(schedule, date(2026, 1, 31)) == date(2026, 3, 31)

    def test_without_pattern_uses_anchor_day(self) -> None:
        """No pattern follows the anchor's day, which drifts after clamping."""
        schedule = MonthlySchedule()

        february = step_once(schedule, date(2026, 1, 31))
        march = step_once(schedule, february)

        assert february == date(2026, 2, 28)
        assert march == date(2026, 3, 28)

    def test_crosses_year_boundary(self) -> None:
        """December + 1 month is January of next year."""
        schedule = MonthlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2025, 12, 31)) == date(2026, 1, 31)


class TestMonthlyNthWeekday:
    """Test nth / last weekday monthly patterns."""

    def test_second_tuesday(self) -> None:
        """2nd Tuesday of March 2026 is Mar 10."""
        schedule = MonthlySchedule(pattern=DayOfWeek(2, TUE))
        assert step_once(schedule, date(2026, 2, 10)) == date(2026, 3, 10)

    def test_last_friday(self) -> None:
        """Last Friday of March 2026 is Mar 27."""
        schedule = MonthlySchedule(pattern=DayOfWeek(-1, FRI))
        assert step_once(schedule, date(2026, 2, 27)) == date(2026, 3, 27)

    def test_first_monday(self) -> None:
        """1st Monday of March 2026 is Mar 2."""
        schedule = MonthlySchedule(pattern=DayOfWeek(1, MON))
        assert step_once(schedule, date(2026, 2, 2)) == date(2026, 3, 2)

    def test_last_tuesday_on_last_day(self) -> None:
        """Last Tuesday of March 2026 is the 31st itself."""
        schedule = MonthlySchedule(pattern=DayOfWeek(-1, TUE))
        assert step_once(schedule, date(2026, 2, 24)) == date(2026, 3, 31)

    def test_every_two_months(self) -> None:
        """2nd Monday every 2 months from January lands in March."""
        schedule = MonthlySchedule(interval=2, pattern=DayOfWeek(2, MON))
        assert step_once(schedule, date(2026, 1, 12)) == date(2026, 3, 9)


class TestQuarterlyStepping:
    """Test quarterly stepping."""

    def test_day_fifteen(self) -> None:
        """Quarterly on the 15th moves three months."""
        schedule = QuarterlySchedule(pattern=DayOfMonth(15))
        assert step_once(schedule, date(2024, 1, 15)) == date(2024, 4, 15)

    def test_end_of_quarter_clamps(self) -> None:
        """Jan 31 + 1 quarter clamps to Apr 30."""
        schedule = QuarterlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2024, 1, 31)) == date(2024, 4, 30)

    def test_clamps_into_february(self) -> None:
        """Nov 30 + 1 quarter clamps to Feb 28."""
        schedule = QuarterlySchedule(pattern=DayOfMonth(31))
        assert step_once(schedule, date(2025, 11, 30)) == date(2026, 2, 28)

    def test_last_friday(self) -> None:
        """Quarterly last Friday from January lands on the last Friday of April."""
        schedule = QuarterlySchedule(pattern=DayOfWeek(-1, FRI))
        assert step_once(schedule, date(2026, 1, 30)) == date(2026, 4, 24)

    def test_interval_two_is_six_months(self) -> None:
        """Quarterly interval 2 advances six months."""
        schedule = QuarterlySchedule(interval=2, pattern=DayOfMonth(15))
        assert step_once(schedule, date(2026, 1, 15)) == date(2026, 7, 15)


class TestStepMonotonicity:
    """Stepping always moves strictly forward."""

    @pytest.mark.parametrize(
        "schedule",
        [
            DailySchedule(),
            DailySchedule(interval=5),
            WeeklySchedule(),
            WeeklySchedule(days_of_week={SUN, SAT}),
            WeeklySchedule(interval=3, days_of_week={MON, THU}),
            BiweeklySchedule(days_of_week={TUE}),
            MonthlySchedule(),
            MonthlySchedule(pattern=DayOfMonth(31)),
            MonthlySchedule(pattern=DayOfWeek(1, SUN)),
            MonthlySchedule(pattern=DayOfWeek(-1, SAT)),
            QuarterlySchedule(pattern=DayOfWeek(4, WED)),
            YearlySchedule(),
        ],
    )
    def test_every_day_of_leap_year(self, schedule: Schedule) -> None:
        """step_once(d) > d for every day of 2024."""
        current = date(2024, 1, 1)
        while current.year == 2024:
            assert step_once(schedule, current) > current
            current += timedelta(days=1)


# =============================================================================
# Resolution
# =============================================================================


class TestNextOccurrence:
    """Test next-occurrence resolution with catch-up."""

    def test_completed_on_time(self) -> None:
        """Completed on its due date resolves to the next step."""
        engine = RecurrenceEngine(DailySchedule())
        assert engine.next_occurrence(date(2026, 1, 15), date(2026, 1, 15)) == date(
            2026, 1, 16
        )

    def test_completed_early_keeps_cadence(self) -> None:
        """Completing early does not pull the next date forward."""
        engine = RecurrenceEngine(DailySchedule())
        assert engine.next_occurrence(date(2026, 1, 20), date(2026, 1, 15)) == date(
            2026, 1, 21
        )

    def test_weekly_ten_weeks_late(self) -> None:
        """Weekly Monday completed 10 weeks late resolves after the reference."""
        engine = RecurrenceEngine(WeeklySchedule(days_of_week={MON}))
        result = engine.next_occurrence(date(2024, 1, 15), date(2024, 3, 25))
        assert result == date(2024, 4, 1)

    def test_weekly_late_midweek(self) -> None:
        """Weekly Monday completed on a Wednesday resolves to the next Monday."""
        engine = RecurrenceEngine(WeeklySchedule(days_of_week={MON}))
        result = engine.next_occurrence(date(2024, 1, 1), date(2024, 3, 13))
        assert result == date(2024, 3, 18)

    def test_daily_interval_catch_up_stays_on_cadence(self) -> None:
        """Every 3 days from Jan 1, completed Jan 10, resolves to Jan 13."""
        engine = RecurrenceEngine(DailySchedule(interval=3))
        result = engine.next_occurrence(date(2026, 1, 1), date(2026, 1, 10))
        assert result == date(2026, 1, 13)

    def test_monthly_catch_up_clamps(self) -> None:
        """Monthly on the 31st caught up into April lands on Apr 30."""
        engine = RecurrenceEngine(MonthlySchedule(pattern=DayOfMonth(31)))
        result = engine.next_occurrence(date(2026, 1, 31), date(2026, 4, 15))
        assert result == date(2026, 4, 30)

    @pytest.mark.parametrize(
        "schedule",
        [
            DailySchedule(interval=4),
            WeeklySchedule(days_of_week={TUE, THU}),
            WeeklySchedule(interval=2, days_of_week={TUE, THU}),
            BiweeklySchedule(days_of_week={SUN, FRI}),
            WeeklySchedule(interval=3),
        ],
    )
    def test_fast_forward_matches_plain_stepping(self, schedule: Schedule) -> None:
        """Whole-cycle jumps land on the same date as stepping one by one."""
        current = date(2026, 1, 6)
        engine = RecurrenceEngine(schedule)

        for reference in (date(2026, 1, 20), date(2026, 9, 30), date(2031, 6, 17)):
            assert engine.next_occurrence(current, reference) == naive_next(
                schedule, current, reference
            )

    def test_forward_guarantee(self) -> None:
        """The result is always strictly after the reference date."""
        schedules: list[Schedule] = [
            DailySchedule(interval=2),
            WeeklySchedule(days_of_week={MON, WED, FRI}),
            BiweeklySchedule(),
            MonthlySchedule(pattern=DayOfWeek(-1, FRI)),
            QuarterlySchedule(pattern=DayOfMonth(31)),
            YearlySchedule(),
        ]
        current = date(2024, 1, 15)
        for schedule in schedules:
            engine = RecurrenceEngine(schedule)
            for offset in (0, 1, 13, 45, 400, 1000):
                reference = current + timedelta(days=offset)
                result = engine.next_occurrence(current, reference)
                assert result is not None
                assert result > reference

    def test_deterministic(self) -> None:
        """Identical inputs give identical outputs."""
        schedule = WeeklySchedule(interval=2, days_of_week={MON, THU})
        first = next_occurrence(schedule, date(2026, 1, 5), date(2026, 5, 1))
        second = next_occurrence(schedule, date(2026, 1, 5), date(2026, 5, 1))
        assert first == second


class TestEndConditions:
    """Test end-date handling during resolution."""

    def test_reference_past_end_date(self) -> None:
        """A reference after the end date closes the series."""
        engine = RecurrenceEngine(DailySchedule(end_date=date(2024, 1, 20)))
        assert engine.next_occurrence(date(2024, 1, 15), date(2024, 1, 21)) is None

    def test_before_end_date(self) -> None:
        """Before the end date resolution proceeds normally."""
        engine = RecurrenceEngine(DailySchedule(end_date=date(2024, 1, 31)))
        assert engine.next_occurrence(date(2024, 1, 15), date(2024, 1, 15)) == date(
            2024, 1, 16
        )

    def test_end_date_is_inclusive(self) -> None:
        """A candidate equal to the end date is still returned."""
        engine = RecurrenceEngine(DailySchedule(end_date=date(2024, 1, 20)))
        assert engine.next_occurrence(date(2024, 1, 19), date(2024, 1, 19)) == date(
            2024, 1, 20
        )

    def test_candidate_exceeds_end_date(self) -> None:
        """Feb 15 is past a Jan 31 end date."""
        engine = RecurrenceEngine(
            MonthlySchedule(pattern=DayOfMonth(15), end_date=date(2024, 1, 31))
        )
        assert engine.next_occurrence(date(2024, 1, 15), date(2024, 1, 15)) is None

    def test_catch_up_past_end_date(self) -> None:
        """Catching up beyond the end date ends the series."""
        engine = RecurrenceEngine(
            WeeklySchedule(days_of_week={MON}, end_date=date(2026, 2, 1))
        )
        assert engine.next_occurrence(date(2026, 1, 5), date(2026, 1, 31)) is None

    def test_occurrence_cap_ignored_by_resolver(self) -> None:
        """The occurrence cap is the gate's job, not the resolver's."""
        engine = RecurrenceEngine(DailySchedule(end_after_occurrences=1))
        assert engine.next_occurrence(date(2026, 1, 1), date(2026, 1, 1)) == date(
            2026, 1, 2
        )


class TestShouldGenerateNext:
    """Test the series generation gate."""

    def test_no_limits(self) -> None:
        """Without limits the series always continues."""
        engine = RecurrenceEngine(DailySchedule())
        assert engine.should_generate_next(5, date(2026, 1, 1)) is True
        assert engine.should_generate_next(100, date(2026, 1, 1)) is True

    def test_occurrence_limit(self) -> None:
        """The series stops once the cap is reached."""
        engine = RecurrenceEngine(DailySchedule(end_after_occurrences=5))
        assert engine.should_generate_next(4, date(2026, 1, 1)) is True
        assert engine.should_generate_next(5, date(2026, 1, 1)) is False
        assert engine.should_generate_next(6, date(2026, 1, 1)) is False

    def test_end_date(self) -> None:
        """The series stops the day after the end date."""
        engine = RecurrenceEngine(DailySchedule(end_date=date(2026, 1, 20)))
        assert engine.should_generate_next(1, date(2026, 1, 20)) is True
        assert engine.should_generate_next(1, date(2026, 1, 21)) is False


class TestTodayDefaults:
    """Test the module-level functions' default reference date."""

    @freeze_time("2026-01-15 12:00:00", tz_offset=0)
    def test_next_occurrence_defaults_to_today(self) -> None:
        """Omitted reference date catches up to today."""
        result = next_occurrence(DailySchedule(), date(2026, 1, 1))
        assert result == date(2026, 1, 16)

    @freeze_time("2026-01-15 23:30:00", tz_offset=0)
    def test_today_uses_default_timezone(self) -> None:
        """'Today' follows the configured timezone, not UTC."""
        dt_utils.set_default_timezone(ZoneInfo("Pacific/Auckland"))
        result = next_occurrence(DailySchedule(), date(2026, 1, 1))
        assert result == date(2026, 1, 17)

    @freeze_time("2026-01-21 12:00:00", tz_offset=0)
    def test_should_generate_next_defaults_to_today(self) -> None:
        """Omitted today is read from the clock."""
        schedule = DailySchedule(end_date=date(2026, 1, 20))
        assert should_generate_next(schedule, 0) is False
        assert should_generate_next(schedule, 0, today=date(2026, 1, 19)) is True

    @freeze_time("2026-01-15 12:00:00", tz_offset=0)
    def test_explicit_reference_wins(self) -> None:
        """An explicit reference date ignores the clock."""
        result = next_occurrence(DailySchedule(), date(2025, 6, 1), date(2025, 6, 1))
        assert result == date(2025, 6, 2)


# =============================================================================
# Previews
# =============================================================================


class TestGetOccurrences:
    """Test occurrence previews."""

    def test_limit(self) -> None:
        """Returns the requested number of following dates."""
        engine = RecurrenceEngine(DailySchedule())
        assert engine.get_occurrences(date(2026, 1, 1), limit=3) == [
            date(2026, 1, 2),
            date(2026, 1, 3),
            date(2026, 1, 4),
        ]

    def test_occurrence_cap_counts_start(self) -> None:
        """A cap of 3 leaves two dates after the start."""
        engine = RecurrenceEngine(WeeklySchedule(end_after_occurrences=3))
        assert engine.get_occurrences(date(2026, 1, 7)) == [
            date(2026, 1, 14),
            date(2026, 1, 21),
        ]

    def test_cap_of_one(self) -> None:
        """A cap of 1 has nothing after the start."""
        engine = RecurrenceEngine(DailySchedule(end_after_occurrences=1))
        assert engine.get_occurrences(date(2026, 1, 1)) == []

    def test_end_date(self) -> None:
        """Stops at the end date, inclusive."""
        engine = RecurrenceEngine(DailySchedule(end_date=date(2026, 1, 5)))
        assert engine.get_occurrences(date(2026, 1, 1)) == [
            date(2026, 1, 2),
            date(2026, 1, 3),
            date(2026, 1, 4),
            date(2026, 1, 5),
        ]

    def test_safety_limit(self) -> None:
        """Open-ended series are capped at the preview maximum."""
        engine = RecurrenceEngine(DailySchedule())
        occurrences = engine.get_occurrences(date(2026, 1, 1), limit=100_000)
        assert len(occurrences) == const.MAX_OCCURRENCE_PREVIEW


# =============================================================================
# RRULE export
# =============================================================================


class TestRruleString:
    """Test RFC 5545 RRULE generation."""

    @pytest.mark.parametrize(
        ("schedule", "expected"),
        [
            (DailySchedule(interval=2), "FREQ=DAILY;INTERVAL=2"),
            (
                WeeklySchedule(days_of_week={WED, MON}),
                "FREQ=WEEKLY;INTERVAL=1;WKST=SU;BYDAY=MO,WE",
            ),
            (BiweeklySchedule(), "FREQ=WEEKLY;INTERVAL=2;WKST=SU"),
            (
                MonthlySchedule(pattern=DayOfWeek(2, TUE)),
                "FREQ=MONTHLY;INTERVAL=1;BYDAY=2TU",
            ),
            (
                MonthlySchedule(pattern=DayOfWeek(-1, FRI)),
                "FREQ=MONTHLY;INTERVAL=1;BYDAY=-1FR",
            ),
            (
                QuarterlySchedule(pattern=DayOfMonth(15)),
                "FREQ=MONTHLY;INTERVAL=3;BYMONTHDAY=15",
            ),
            (YearlySchedule(), "FREQ=YEARLY;INTERVAL=1"),
        ],
    )
    def test_rule(self, schedule: Schedule, expected: str) -> None:
        """Schedules map onto their RRULE form."""
        assert RecurrenceEngine(schedule).to_rrule_string() == expected

    def test_until(self) -> None:
        """End date becomes UNTIL."""
        schedule = DailySchedule(end_date=date(2026, 12, 31))
        assert (
            RecurrenceEngine(schedule).to_rrule_string()
            == "FREQ=DAILY;INTERVAL=1;UNTIL=20261231"
        )

    def test_count(self) -> None:
        """Occurrence cap becomes COUNT."""
        schedule = WeeklySchedule(end_after_occurrences=10)
        assert (
            RecurrenceEngine(schedule).to_rrule_string()
            == "FREQ=WEEKLY;INTERVAL=1;WKST=SU;COUNT=10"
        )

    @pytest.mark.parametrize(
        "schedule",
        [MonthlySchedule(pattern=DayOfMonth(31)), MonthlySchedule()],
    )
    def test_no_exact_equivalent(self, schedule: Schedule) -> None:
        """Clamped day numbers and anchor-day monthly rules export nothing."""
        assert RecurrenceEngine(schedule).to_rrule_string() == ""

    @pytest.mark.parametrize(
        ("schedule", "start"),
        [
            (BiweeklySchedule(days_of_week={MON, WED, FRI}), date(2026, 1, 5)),
            (WeeklySchedule(days_of_week={SUN, THU}), date(2026, 1, 4)),
            (MonthlySchedule(pattern=DayOfWeek(-1, FRI)), date(2026, 1, 30)),
            (QuarterlySchedule(pattern=DayOfWeek(2, TUE)), date(2026, 1, 13)),
            (MonthlySchedule(interval=2, pattern=DayOfMonth(15)), date(2026, 1, 15)),
            (DailySchedule(interval=9), date(2026, 1, 1)),
        ],
    )
    def test_matches_dateutil_rrule(self, schedule: Schedule, start: date) -> None:
        """The exported rule expands to the same dates the engine steps to."""
        engine = RecurrenceEngine(schedule)
        rule = rrulestr(
            engine.to_rrule_string(),
            dtstart=datetime(start.year, start.month, start.day),
        )

        expected = [d.date() for d in islice(rule, 25)]

        assert expected[0] == start
        assert engine.get_occurrences(start, limit=24) == expected[1:]
