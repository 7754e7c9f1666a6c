# File: helpers/schedule_helpers.py
"""Stored schedule validation and conversion.

Schedules are persisted with their task as camelCase dicts (ScheduleData).
This module is the boundary between that loosely-typed form and the typed
schedule variants in schedules.py:

- `SCHEDULE_DATA_SCHEMA` validates stored/user-submitted data (voluptuous)
- `build_schedule()` validates and converts a dict into a typed schedule
- `validate_schedule_data()` is the non-raising variant (None on failure)
- `build_schedule_data()` serializes a typed schedule back to a dict

Malformed data is rejected here, with InvalidScheduleError, so the engine
never has to handle it.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const
from ..schedules import (
    SCHEDULE_TYPES,
    DayOfMonth,
    DayOfWeek,
    InvalidScheduleError,
    MonthlySchedule,
    WeeklySchedule,
)
from ..utils.dt_utils import dt_parse_date

if TYPE_CHECKING:
    from ..schedules import MonthlyPattern, Schedule
    from ..type_defs import ScheduleData

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# =============================================================================
# INPUT VALIDATION HELPERS
# =============================================================================


def validate_iso_date_string(value: Any) -> str:
    """Validate a "YYYY-MM-DD" calendar date string.

    Raises:
        vol.Invalid: If the format is wrong or the date does not exist
    """
    if not isinstance(value, str) or not _ISO_DATE_PATTERN.match(value):
        raise vol.Invalid("Must be YYYY-MM-DD format")
    if dt_parse_date(value) is None:
        raise vol.Invalid(f"Invalid calendar date: '{value}'")
    return value


def _validate_day_of_week_pattern(data: dict[str, Any]) -> dict[str, Any]:
    """Require week of month and weekday for the day-of-week pattern."""
    if data.get(const.DATA_SCHEDULE_MONTHLY_PATTERN) != const.MONTHLY_PATTERN_DAY_OF_WEEK:
        return data
    if (
        data.get(const.DATA_SCHEDULE_WEEK_OF_MONTH) is None
        or data.get(const.DATA_SCHEDULE_MONTHLY_DAY_OF_WEEK) is None
    ):
        raise vol.Invalid(
            "Week of month and day of week required for day-of-week monthly pattern",
            path=[const.DATA_SCHEDULE_WEEK_OF_MONTH],
        )
    return data


def _validate_exclusive_end_conditions(data: dict[str, Any]) -> dict[str, Any]:
    """Reject schedules with both an end date and an occurrence limit."""
    if (
        data.get(const.DATA_SCHEDULE_END_DATE)
        and data.get(const.DATA_SCHEDULE_END_AFTER_OCCURRENCES)
    ):
        raise vol.Invalid(
            "Cannot set both end date and occurrence limit",
            path=[const.DATA_SCHEDULE_END_DATE],
        )
    return data


_WEEKDAY = vol.All(int, vol.Range(min=const.WEEKDAY_SUNDAY, max=const.WEEKDAY_SATURDAY))

SCHEDULE_DATA_SCHEMA = vol.Schema(
    vol.All(
        vol.Schema(
            {
                vol.Required(const.DATA_SCHEDULE_FREQUENCY): vol.In(
                    const.FREQUENCY_OPTIONS
                ),
                vol.Required(const.DATA_SCHEDULE_INTERVAL): vol.All(
                    int, vol.Range(min=const.MIN_INTERVAL, max=const.MAX_INTERVAL)
                ),
                vol.Optional(const.DATA_SCHEDULE_DAYS_OF_WEEK): [_WEEKDAY],
                vol.Optional(const.DATA_SCHEDULE_DAY_OF_MONTH): vol.All(
                    int,
                    vol.Range(min=const.MIN_DAY_OF_MONTH, max=const.MAX_DAY_OF_MONTH),
                ),
                vol.Optional(const.DATA_SCHEDULE_MONTHLY_PATTERN): vol.In(
                    const.MONTHLY_PATTERN_OPTIONS
                ),
                vol.Optional(const.DATA_SCHEDULE_WEEK_OF_MONTH): vol.All(
                    int,
                    vol.In(
                        const.WEEK_OF_MONTH_OPTIONS,
                        msg="Must be 1-4 or -1 (last)",
                    ),
                ),
                vol.Optional(const.DATA_SCHEDULE_MONTHLY_DAY_OF_WEEK): _WEEKDAY,
                vol.Optional(const.DATA_SCHEDULE_END_DATE): validate_iso_date_string,
                vol.Optional(const.DATA_SCHEDULE_END_AFTER_OCCURRENCES): vol.All(
                    int,
                    vol.Range(
                        min=const.MIN_END_AFTER_OCCURRENCES,
                        max=const.MAX_END_AFTER_OCCURRENCES,
                    ),
                ),
            },
            extra=vol.REMOVE_EXTRA,
        ),
        _validate_day_of_week_pattern,
        _validate_exclusive_end_conditions,
    )
)


# =============================================================================
# STORED DATA → TYPED SCHEDULE
# =============================================================================


def build_schedule(data: ScheduleData | dict[str, Any]) -> Schedule:
    """Validate stored schedule data and build the typed schedule variant.

    Keys that do not apply to the frequency (e.g. `dayOfMonth` on a weekly
    schedule) are dropped; the typed variant has nowhere to put them.

    Args:
        data: Stored schedule dict (camelCase keys)

    Returns:
        Typed schedule variant

    Raises:
        InvalidScheduleError: If the data fails validation
    """
    try:
        validated: dict[str, Any] = SCHEDULE_DATA_SCHEMA(dict(data))
    except vol.Invalid as err:
        path = ".".join(str(part) for part in err.path) or None
        raise InvalidScheduleError(err.error_message, path) from err

    frequency = validated[const.DATA_SCHEDULE_FREQUENCY]
    schedule_cls = SCHEDULE_TYPES[frequency]

    end_date_str = validated.get(const.DATA_SCHEDULE_END_DATE)
    kwargs: dict[str, Any] = {
        "interval": validated[const.DATA_SCHEDULE_INTERVAL],
        "end_date": dt_parse_date(end_date_str) if end_date_str else None,
        "end_after_occurrences": validated.get(
            const.DATA_SCHEDULE_END_AFTER_OCCURRENCES
        ),
    }

    if issubclass(schedule_cls, WeeklySchedule):
        kwargs["days_of_week"] = frozenset(
            validated.get(const.DATA_SCHEDULE_DAYS_OF_WEEK, [])
        )
    elif issubclass(schedule_cls, MonthlySchedule):
        kwargs["pattern"] = _build_monthly_pattern(validated)

    return schedule_cls(**kwargs)  # type: ignore[return-value]


def validate_schedule_data(data: Any) -> Schedule | None:
    """Build a typed schedule, or return None if the data is invalid."""
    if not isinstance(data, dict):
        return None
    try:
        return build_schedule(data)
    except InvalidScheduleError as err:
        const.LOGGER.debug("Schedule data rejected: %s", err)
        return None


def _build_monthly_pattern(validated: dict[str, Any]) -> MonthlyPattern | None:
    """Pick the monthly pattern from validated stored data.

    The day-of-week pattern wins when selected; otherwise a stored
    `dayOfMonth` is used; with neither, the engine falls back to the anchor
    date's own day number.
    """
    if (
        validated.get(const.DATA_SCHEDULE_MONTHLY_PATTERN)
        == const.MONTHLY_PATTERN_DAY_OF_WEEK
    ):
        return DayOfWeek(
            week_of_month=validated[const.DATA_SCHEDULE_WEEK_OF_MONTH],
            weekday=validated[const.DATA_SCHEDULE_MONTHLY_DAY_OF_WEEK],
        )
    day_of_month = validated.get(const.DATA_SCHEDULE_DAY_OF_MONTH)
    if day_of_month is not None:
        return DayOfMonth(day=day_of_month)
    return None


# =============================================================================
# TYPED SCHEDULE → STORED DATA
# =============================================================================


def build_schedule_data(schedule: Schedule) -> ScheduleData:
    """Serialize a typed schedule to its stored dict form.

    Only keys relevant to the schedule's frequency are written.
    """
    data: dict[str, Any] = {
        const.DATA_SCHEDULE_FREQUENCY: schedule.frequency,
        const.DATA_SCHEDULE_INTERVAL: schedule.interval,
    }

    if isinstance(schedule, WeeklySchedule) and schedule.days_of_week:
        data[const.DATA_SCHEDULE_DAYS_OF_WEEK] = sorted(schedule.days_of_week)
    elif isinstance(schedule, MonthlySchedule):
        pattern = schedule.pattern
        if isinstance(pattern, DayOfWeek):
            data[const.DATA_SCHEDULE_MONTHLY_PATTERN] = const.MONTHLY_PATTERN_DAY_OF_WEEK
            data[const.DATA_SCHEDULE_WEEK_OF_MONTH] = pattern.week_of_month
            data[const.DATA_SCHEDULE_MONTHLY_DAY_OF_WEEK] = pattern.weekday
        elif isinstance(pattern, DayOfMonth):
            data[const.DATA_SCHEDULE_MONTHLY_PATTERN] = (
                const.MONTHLY_PATTERN_DAY_OF_MONTH
            )
            data[const.DATA_SCHEDULE_DAY_OF_MONTH] = pattern.day

    if schedule.end_date is not None:
        data[const.DATA_SCHEDULE_END_DATE] = schedule.end_date.isoformat()
    if schedule.end_after_occurrences is not None:
        data[const.DATA_SCHEDULE_END_AFTER_OCCURRENCES] = (
            schedule.end_after_occurrences
        )

    return data  # type: ignore[return-value]
