# File: schedules.py
"""Typed recurrence schedules.

A schedule is one of six frozen dataclasses, one per frequency class. Each
variant carries only the fields that apply to it, so a weekly schedule with a
day-of-month (or a daily schedule with weekdays) cannot be expressed.

    DailySchedule       interval
    WeeklySchedule      interval, days_of_week
    BiweeklySchedule    interval, days_of_week   (every 2 x interval weeks)
    MonthlySchedule     interval, pattern
    QuarterlySchedule   interval, pattern        (every 3 x interval months)
    YearlySchedule      interval

All variants share the end conditions `end_date` and `end_after_occurrences`.

Construction validates field values and raises InvalidScheduleError, so the
engine only ever sees well-formed schedules. Use
`helpers.schedule_helpers.build_schedule()` to build one from stored data.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, TypeAlias

from . import const


class InvalidScheduleError(ValueError):
    """Raised when schedule data violates a structural rule.

    Attributes:
        path: Name of the offending field (stored key or attribute), or None
              when the error is not tied to a single field
        reason: Human-readable description of the violation
    """

    def __init__(self, reason: str, path: str | None = None) -> None:
        """Initialize InvalidScheduleError.

        Args:
            reason: Human-readable description of the violation
            path: Name of the offending field, if any
        """
        self.reason = reason
        self.path = path
        message = f"{reason} @ {path}" if path else reason
        super().__init__(f"Invalid schedule: {message}")


def _require(condition: bool, reason: str, path: str) -> None:
    if not condition:
        raise InvalidScheduleError(reason, path)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_weekday(value: int, path: str) -> None:
    _require(
        _is_int(value)
        and const.WEEKDAY_SUNDAY <= value <= const.WEEKDAY_SATURDAY,
        "weekday must be an integer 0 (Sunday) to 6 (Saturday)",
        path,
    )


# =============================================================================
# Monthly patterns
# =============================================================================


@dataclass(frozen=True)
class DayOfMonth:
    """Fixed day number; clamped to the last day of shorter months."""

    day: int

    def __post_init__(self) -> None:
        _require(
            _is_int(self.day)
            and const.MIN_DAY_OF_MONTH <= self.day <= const.MAX_DAY_OF_MONTH,
            "day of month must be 1-31",
            "day",
        )


@dataclass(frozen=True)
class DayOfWeek:
    """Ordinal weekday, e.g. 2nd Tuesday (2, 2) or last Friday (-1, 5)."""

    week_of_month: int
    weekday: int

    def __post_init__(self) -> None:
        _require(
            _is_int(self.week_of_month)
            and self.week_of_month in const.WEEK_OF_MONTH_OPTIONS,
            "week of month must be 1-4 or -1 (last)",
            "week_of_month",
        )
        _validate_weekday(self.weekday, "weekday")


MonthlyPattern: TypeAlias = DayOfMonth | DayOfWeek


# =============================================================================
# Schedule variants
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class _ScheduleBase:
    """Fields shared by every frequency class."""

    frequency: ClassVar[str]

    interval: int = 1
    end_date: date | None = None
    end_after_occurrences: int | None = None

    def __post_init__(self) -> None:
        _require(
            _is_int(self.interval) and self.interval >= const.MIN_INTERVAL,
            "interval must be a positive integer",
            "interval",
        )
        _require(
            self.end_date is None or isinstance(self.end_date, date),
            "end date must be a calendar date",
            "end_date",
        )
        _require(
            self.end_after_occurrences is None
            or (
                _is_int(self.end_after_occurrences)
                and self.end_after_occurrences >= const.MIN_END_AFTER_OCCURRENCES
            ),
            "occurrence limit must be a positive integer",
            "end_after_occurrences",
        )


@dataclass(frozen=True, kw_only=True)
class DailySchedule(_ScheduleBase):
    """Every `interval` days."""

    frequency: ClassVar[str] = const.FREQUENCY_DAILY


@dataclass(frozen=True, kw_only=True)
class WeeklySchedule(_ScheduleBase):
    """Every `interval` weeks on the selected Sunday-based weekdays.

    An empty `days_of_week` means "same weekday as the anchor date".
    """

    frequency: ClassVar[str] = const.FREQUENCY_WEEKLY
    week_multiplier: ClassVar[int] = 1

    days_of_week: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.days_of_week, frozenset):
            _require(
                isinstance(self.days_of_week, Iterable),
                "days of week must be a collection of weekday indices",
                "days_of_week",
            )
            object.__setattr__(self, "days_of_week", frozenset(self.days_of_week))
        for day in self.days_of_week:
            _validate_weekday(day, "days_of_week")

    @property
    def week_interval(self) -> int:
        """Number of weeks between selected-day cycles."""
        return self.interval * self.week_multiplier


@dataclass(frozen=True, kw_only=True)
class BiweeklySchedule(WeeklySchedule):
    """Every 2 x `interval` weeks on the selected weekdays."""

    frequency: ClassVar[str] = const.FREQUENCY_BIWEEKLY
    week_multiplier: ClassVar[int] = const.WEEKS_PER_BIWEEK


@dataclass(frozen=True, kw_only=True)
class MonthlySchedule(_ScheduleBase):
    """Every `interval` months on a day-of-month or nth-weekday pattern.

    A missing `pattern` means "same day number as the anchor date".
    """

    frequency: ClassVar[str] = const.FREQUENCY_MONTHLY
    month_multiplier: ClassVar[int] = 1

    pattern: MonthlyPattern | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        _require(
            self.pattern is None or isinstance(self.pattern, (DayOfMonth, DayOfWeek)),
            "pattern must be DayOfMonth or DayOfWeek",
            "pattern",
        )

    @property
    def month_interval(self) -> int:
        """Number of months advanced per step."""
        return self.interval * self.month_multiplier


@dataclass(frozen=True, kw_only=True)
class QuarterlySchedule(MonthlySchedule):
    """Every 3 x `interval` months on a day-of-month or nth-weekday pattern."""

    frequency: ClassVar[str] = const.FREQUENCY_QUARTERLY
    month_multiplier: ClassVar[int] = const.MONTHS_PER_QUARTER


@dataclass(frozen=True, kw_only=True)
class YearlySchedule(_ScheduleBase):
    """Every `interval` years on the anchor's month and day."""

    frequency: ClassVar[str] = const.FREQUENCY_YEARLY


Schedule: TypeAlias = (
    DailySchedule
    | WeeklySchedule
    | BiweeklySchedule
    | MonthlySchedule
    | QuarterlySchedule
    | YearlySchedule
)

SCHEDULE_TYPES: dict[str, type[_ScheduleBase]] = {
    const.FREQUENCY_DAILY: DailySchedule,
    const.FREQUENCY_WEEKLY: WeeklySchedule,
    const.FREQUENCY_BIWEEKLY: BiweeklySchedule,
    const.FREQUENCY_MONTHLY: MonthlySchedule,
    const.FREQUENCY_QUARTERLY: QuarterlySchedule,
    const.FREQUENCY_YEARLY: YearlySchedule,
}
