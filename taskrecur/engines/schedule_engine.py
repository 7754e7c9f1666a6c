"""Schedule Engine for taskrecur.

Pure calendar-date recurrence for recurring task series:
- Stepping: advance a date by exactly one schedule-defined period
- Resolution: catch-up advancement past a reference date, then end checks
- Series control: occurrence-count and end-date generation gate
- Previews and RFC 5545 RRULE export

Month and year arithmetic uses `dateutil.relativedelta`, so Jan 31 + 1 month
is Feb 28 (Feb 29 in leap years) rather than a skipped month.

The engine never reads the clock. "Today" defaults are injected by the
module-level convenience functions at the bottom of this file.

IMPORTANT: This module must NOT import from managers/ to avoid circular
imports. Only import from const.py, schedules.py and utils/.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..schedules import (
    DailySchedule,
    DayOfMonth,
    DayOfWeek,
    MonthlySchedule,
    WeeklySchedule,
    YearlySchedule,
)
from ..utils.dt_utils import (
    add_months,
    add_years,
    dt_today_local,
    last_day_of_month,
    nth_weekday_of_month,
    sunday_weekday,
)

if TYPE_CHECKING:
    from ..schedules import Schedule


class RecurrenceEngine:
    """Recurrence calculations for a single schedule.

    The engine holds only the (immutable) schedule, so one instance can be
    shared freely between threads. Every method is a pure function of the
    schedule and its arguments.

    Handles all frequency classes:
    - DAILY: N days
    - WEEKLY / BIWEEKLY: N (or 2N) weeks, optionally on selected weekdays
    - MONTHLY / QUARTERLY: N (or 3N) months on a day number or nth weekday
    - YEARLY: N years
    """

    def __init__(self, schedule: Schedule) -> None:
        """Initialize the recurrence engine.

        Args:
            schedule: A validated schedule variant (see schedules.py).
        """
        self._schedule = schedule

    @property
    def schedule(self) -> Schedule:
        """The schedule this engine evaluates."""
        return self._schedule

    # =========================================================================
    # Stepping
    # =========================================================================

    def step_once(self, from_date: date) -> date:
        """Advance `from_date` by exactly one schedule-defined period.

        End conditions are ignored; that is the resolver's job. The result is
        always strictly after `from_date`.

        Args:
            from_date: Anchor date (usually the current occurrence's due date).

        Returns:
            The next date in the series after `from_date`.
        """
        schedule = self._schedule

        if isinstance(schedule, WeeklySchedule):
            return self._step_weekly(schedule, from_date)
        if isinstance(schedule, MonthlySchedule):
            return self._step_monthly(schedule, from_date)
        if isinstance(schedule, YearlySchedule):
            return add_years(from_date, schedule.interval)
        return from_date + timedelta(days=schedule.interval)

    # =========================================================================
    # Resolution
    # =========================================================================

    def next_occurrence(
        self, current_due_date: date, reference_date: date
    ) -> date | None:
        """Resolve the next occurrence strictly after `reference_date`.

        1. If the series has an end date and `reference_date` is past it, the
           series is closed: return None.
        2. Step once from `current_due_date`.
        3. Catch up: keep stepping while the candidate is on or before
           `reference_date` (task completed late).
        4. If catching up pushed the candidate past the end date, return None.

        Args:
            current_due_date: Due date of the occurrence just completed.
            reference_date: Calendar day of completion (the catch-up anchor).

        Returns:
            Next due date, or None when the series has ended.

        Examples:
            Daily, current=Jan 15, reference=Jan 15 → Jan 16
            Weekly Mon, current=2024-01-01, reference=2024-03-13 → 2024-03-18
            Daily until Jan 20, current=Jan 15, reference=Jan 21 → None
        """
        end_date = self._schedule.end_date
        if end_date is not None and reference_date > end_date:
            const.LOGGER.debug(
                "RecurrenceEngine: Reference %s is past end date %s",
                reference_date,
                end_date,
            )
            return None

        candidate = self.step_once(current_due_date)

        if candidate <= reference_date:
            candidate = self._fast_forward(candidate, reference_date)
            steps = 0
            while candidate <= reference_date:
                candidate = self.step_once(candidate)
                steps += 1
                if steps == const.MAX_DATE_CALCULATION_ITERATIONS:
                    const.LOGGER.warning(
                        "RecurrenceEngine: Catch-up from %s to %s exceeded %d steps",
                        current_due_date,
                        reference_date,
                        steps,
                    )
            const.LOGGER.debug(
                "RecurrenceEngine: Caught up %s → %s after %d extra step(s)",
                current_due_date,
                candidate,
                steps,
            )

        if end_date is not None and candidate > end_date:
            const.LOGGER.debug(
                "RecurrenceEngine: Candidate %s exceeds end date %s",
                candidate,
                end_date,
            )
            return None

        return candidate

    def should_generate_next(self, occurrences_so_far: int, today: date) -> bool:
        """Decide whether the series may produce another occurrence.

        Evaluated by the task lifecycle manager before `next_occurrence()`.

        Args:
            occurrences_so_far: Number of occurrences already generated.
            today: Caller-localized current date.

        Returns:
            False if the occurrence cap is reached or the end date has passed.
        """
        limit = self._schedule.end_after_occurrences
        if limit is not None and occurrences_so_far >= limit:
            return False

        end_date = self._schedule.end_date
        if end_date is not None and today > end_date:
            return False

        return True

    # =========================================================================
    # Previews
    # =========================================================================

    def get_occurrences(
        self, start: date, limit: int = const.MAX_OCCURRENCE_PREVIEW
    ) -> list[date]:
        """List the occurrences that follow `start`, in order.

        `start` is treated as an occurrence of the series, so an occurrence
        cap of N yields at most N - 1 following dates. Dates after the end
        date are never included.

        Args:
            start: Anchor occurrence (not included in the result).
            limit: Maximum number of dates to return (safety limit).

        Returns:
            List of following occurrence dates.
        """
        limit = min(limit, const.MAX_OCCURRENCE_PREVIEW)
        cap = self._schedule.end_after_occurrences
        if cap is not None:
            limit = min(limit, cap - 1)

        end_date = self._schedule.end_date
        occurrences: list[date] = []
        current = start
        while len(occurrences) < limit:
            current = self.step_once(current)
            if end_date is not None and current > end_date:
                break
            occurrences.append(current)

        return occurrences

    def to_rrule_string(self) -> str:
        """Generate RFC 5545 RRULE string for iCal export.

        Weekly rules use WKST=SU because selected weekdays are grouped into
        Sunday-started weeks.

        Returns:
            RRULE string (e.g., "FREQ=WEEKLY;INTERVAL=1;WKST=SU;BYDAY=MO,WE")
            or empty string if the rule has no exact RRULE equivalent (day
            numbers 29-31 clamp here but are skipped by RRULE, and monthly
            rules without a pattern depend on the anchor date).
        """
        schedule = self._schedule

        if isinstance(schedule, WeeklySchedule):
            base = f"FREQ=WEEKLY;INTERVAL={schedule.week_interval};WKST=SU"
            if schedule.days_of_week:
                days = ",".join(
                    const.RRULE_WEEKDAY_CODES[d] for d in sorted(schedule.days_of_week)
                )
                base = f"{base};BYDAY={days}"
        elif isinstance(schedule, MonthlySchedule):
            pattern = schedule.pattern
            base = f"FREQ=MONTHLY;INTERVAL={schedule.month_interval}"
            if isinstance(pattern, DayOfWeek):
                code = const.RRULE_WEEKDAY_CODES[pattern.weekday]
                base = f"{base};BYDAY={pattern.week_of_month}{code}"
            elif (
                isinstance(pattern, DayOfMonth)
                and pattern.day <= const.MAX_UNCLAMPED_DAY_OF_MONTH
            ):
                base = f"{base};BYMONTHDAY={pattern.day}"
            else:
                return ""
        elif isinstance(schedule, YearlySchedule):
            base = f"FREQ=YEARLY;INTERVAL={schedule.interval}"
        else:
            base = f"FREQ=DAILY;INTERVAL={schedule.interval}"

        if schedule.end_date is not None:
            return f"{base};UNTIL={schedule.end_date:%Y%m%d}"
        if schedule.end_after_occurrences is not None:
            return f"{base};COUNT={schedule.end_after_occurrences}"
        return base

    # =========================================================================
    # Private: frequency-specific stepping
    # =========================================================================

    def _step_weekly(self, schedule: WeeklySchedule, from_date: date) -> date:
        """Step a weekly/biweekly schedule.

        Without selected days, adds whole week intervals (same weekday).
        With selected days, moves to the next selected day later this week;
        past the last selected day, moves to the first selected day of the
        week that starts `week_interval - 1` weeks after next Sunday.
        """
        week_interval = schedule.week_interval
        if not schedule.days_of_week:
            return from_date + timedelta(weeks=week_interval)

        sorted_days = sorted(schedule.days_of_week)
        current_day = sunday_weekday(from_date)

        for day in sorted_days:
            if day > current_day:
                return from_date + timedelta(days=day - current_day)

        days_until_week_end = const.DAYS_PER_WEEK - current_day
        extra_weeks = week_interval - 1
        return from_date + timedelta(
            days=days_until_week_end
            + extra_weeks * const.DAYS_PER_WEEK
            + sorted_days[0]
        )

    def _step_monthly(self, schedule: MonthlySchedule, from_date: date) -> date:
        """Step a monthly/quarterly schedule.

        The target month is `from_date + month_interval` months; the day in
        that month comes from the pattern (clamped day number, or nth/last
        weekday). Without a pattern the anchor's own day number is used.
        """
        target = add_months(from_date, schedule.month_interval)
        pattern = schedule.pattern

        if isinstance(pattern, DayOfWeek):
            return nth_weekday_of_month(
                target.year, target.month, pattern.week_of_month, pattern.weekday
            )

        day = pattern.day if isinstance(pattern, DayOfMonth) else from_date.day
        actual_day = min(day, last_day_of_month(target.year, target.month))
        return target.replace(day=actual_day)

    # =========================================================================
    # Private: catch-up optimization
    # =========================================================================

    def _fixed_period_days(self) -> int | None:
        """Length in days of one full repetition cycle, if fixed.

        Daily schedules repeat every `interval` days. Weekly schedules repeat
        their selected-day pattern every `week_interval` weeks. Month- and
        year-based schedules have variable length.
        """
        schedule = self._schedule
        if isinstance(schedule, WeeklySchedule):
            return schedule.week_interval * const.DAYS_PER_WEEK
        if isinstance(schedule, DailySchedule):
            return schedule.interval
        return None

    def _fast_forward(self, candidate: date, reference_date: date) -> date:
        """Jump whole cycles towards `reference_date` without overshooting.

        `candidate` is always a date produced by stepping, so it sits on the
        cycle; adding whole cycles lands on the same dates that repeated
        stepping would visit. The result stays on or before `reference_date`
        and the resolver's loop finishes the catch-up.
        """
        period_days = self._fixed_period_days()
        if not period_days:
            return candidate

        num_periods = (reference_date - candidate).days // period_days
        if num_periods <= 0:
            return candidate
        return candidate + timedelta(days=num_periods * period_days)


# =============================================================================
# Module-level convenience functions
# =============================================================================


def step_once(schedule: Schedule, from_date: date) -> date:
    """Advance `from_date` by exactly one period of `schedule`."""
    return RecurrenceEngine(schedule).step_once(from_date)


def next_occurrence(
    schedule: Schedule,
    current_due_date: date,
    reference_date: date | None = None,
) -> date | None:
    """Calculate the next occurrence of a recurring series.

    Args:
        schedule: Validated schedule.
        current_due_date: Due date of the occurrence just completed.
        reference_date: Completion day used for catch-up. Defaults to today
            in the configured timezone (see dt_utils.set_default_timezone).
            Pass it explicitly for deterministic behavior.

    Returns:
        Next due date strictly after the reference date, or None if the
        series has ended.
    """
    reference = reference_date if reference_date is not None else dt_today_local()
    return RecurrenceEngine(schedule).next_occurrence(current_due_date, reference)


def should_generate_next(
    schedule: Schedule,
    occurrences_so_far: int,
    today: date | None = None,
) -> bool:
    """Check if a recurring series should generate more occurrences.

    Args:
        schedule: Validated schedule.
        occurrences_so_far: Number of occurrences already in the series.
        today: Current date. Defaults to today in the configured timezone.

    Returns:
        True if another occurrence may be generated.
    """
    current = today if today is not None else dt_today_local()
    return RecurrenceEngine(schedule).should_generate_next(occurrences_so_far, current)
