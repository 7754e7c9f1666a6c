"""Human-readable schedule phrases.

Renders a schedule rule (not a specific occurrence) as text for task cards
and pickers. A day-31 monthly rule is always "31st" even though the engine
lands on the 28th-30th in shorter months.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..schedules import DayOfMonth, DayOfWeek, MonthlySchedule, WeeklySchedule
from ..utils.dt_utils import dt_format_display

if TYPE_CHECKING:
    from ..schedules import MonthlyPattern, Schedule


def ordinal(n: int) -> str:
    """Return `n` with its English ordinal suffix (1st, 2nd, 11th, 23rd)."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def week_of_month_label(week_of_month: int) -> str:
    """Return "1st"-"4th" or "last" for a week-of-month value."""
    return const.WEEK_OF_MONTH_LABELS.get(week_of_month, ordinal(week_of_month))


def describe(schedule: Schedule) -> str:
    """Describe a schedule, including its end condition.

    Examples:
        DailySchedule(interval=3) → "Every 3 days"
        WeeklySchedule(days_of_week={1, 3}) → "Weekly on Mon, Wed"
        MonthlySchedule(pattern=DayOfMonth(15)) → "Monthly on the 15th"
        QuarterlySchedule(pattern=DayOfWeek(-1, 5)) → "Quarterly on the last Friday"
        DailySchedule(end_date=date(2026, 12, 31)) → "Every day until Dec 31, 2026"
        WeeklySchedule(end_after_occurrences=10) → "Weekly, 10 times"
    """
    description = _describe_rule(schedule)

    if schedule.end_date is not None:
        description += f" until {dt_format_display(schedule.end_date)}"
    elif schedule.end_after_occurrences is not None:
        description += f", {schedule.end_after_occurrences} times"

    return description


def recurring_label(schedule: Schedule) -> str:
    """Short badge label, e.g. "Weekly", "Every 3 days", "Monthly on last Fri".

    Unlike `describe()`, weekday lists and end conditions are left out; only
    an nth-weekday monthly pattern is appended, in short form.
    """
    frequency = schedule.frequency
    label = const.FREQUENCY_LABELS[frequency]

    if isinstance(schedule, WeeklySchedule):
        if schedule.week_interval > schedule.week_multiplier:
            label = f"Every {schedule.week_interval} weeks"
    elif schedule.interval > 1:
        label = f"Every {schedule.interval} {const.FREQUENCY_UNIT_PLURALS[frequency]}"

    if isinstance(schedule, MonthlySchedule) and isinstance(schedule.pattern, DayOfWeek):
        pattern = schedule.pattern
        label += (
            f" on {week_of_month_label(pattern.week_of_month)}"
            f" {const.WEEKDAY_SHORT_NAMES[pattern.weekday]}"
        )

    return label


def _describe_rule(schedule: Schedule) -> str:
    frequency = schedule.frequency
    interval = schedule.interval

    if isinstance(schedule, WeeklySchedule):
        # Biweekly phrases count real weeks: interval 2 is every 4 weeks
        weeks = schedule.week_interval
        base = "Weekly" if weeks == 1 else f"Every {weeks} weeks"
        if schedule.days_of_week:
            days = ", ".join(
                const.WEEKDAY_SHORT_NAMES[d] for d in sorted(schedule.days_of_week)
            )
            return f"{base} on {days}"
        return base

    if isinstance(schedule, MonthlySchedule):
        base = (
            const.FREQUENCY_LABELS[frequency]
            if interval == 1
            else f"Every {interval} {const.FREQUENCY_UNIT_PLURALS[frequency]}"
        )
        pattern_desc = _describe_pattern(schedule.pattern)
        if pattern_desc:
            return f"{base} on the {pattern_desc}"
        return base

    if frequency == const.FREQUENCY_DAILY:
        return "Every day" if interval == 1 else f"Every {interval} days"

    return (
        const.FREQUENCY_LABELS[frequency]
        if interval == 1
        else f"Every {interval} {const.FREQUENCY_UNIT_PLURALS[frequency]}"
    )


def _describe_pattern(pattern: MonthlyPattern | None) -> str | None:
    """Return "15th" or "2nd Friday" / "last Tuesday", or None."""
    if isinstance(pattern, DayOfWeek):
        return (
            f"{week_of_month_label(pattern.week_of_month)}"
            f" {const.WEEKDAY_NAMES[pattern.weekday]}"
        )
    if isinstance(pattern, DayOfMonth):
        return ordinal(pattern.day)
    return None
