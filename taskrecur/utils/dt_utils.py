# File: utils/dt_utils.py
"""Calendar date utilities for taskrecur.

Pure Python calendar functions operating on `datetime.date` values. Nothing
here reads stored data or knows about schedules; the engine composes these.

Weekday convention: stored data and every public function here use a
Sunday-based weekday index (0=Sunday ... 6=Saturday). Python's own
`date.weekday()` is Monday-based, so always go through `sunday_weekday()`.

Functions:
    - set_default_timezone / get_default_timezone: Timezone used for "today"
    - dt_today_local: Today's date in the configured timezone
    - dt_parse_date: Parse ISO "YYYY-MM-DD" strings
    - dt_format_display: Format a date as "Dec 31, 2026"
    - sunday_weekday: Sunday-based weekday index of a date
    - last_day_of_month: Number of days in a month
    - add_months: Month arithmetic with end-of-month clamping
    - add_years: Year arithmetic with Feb 29 clamping
    - nth_weekday_of_month: nth (or last) given weekday in a month
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

DAYS_PER_WEEK = 7
WEEK_OF_MONTH_LAST = -1

# English month abbreviations; strftime("%b") follows the process locale
MONTH_SHORT_NAMES = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone used to resolve "today".

    Call this once at application startup with the tenant's timezone so that
    the default reference date matches the user's calendar day.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    This is the only clock read in the package. Engines never call it; the
    public convenience functions use it to inject a default reference date.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.

    Example:
        datetime.date(2026, 10, 19)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


# ==============================================================================
# Parsing / Formatting
# ==============================================================================


def dt_parse_date(date_input: str | date | None) -> date | None:
    """Safely parse an ISO date string ("YYYY-MM-DD") into a `datetime.date`.

    `datetime` inputs are reduced to their date part; `date` inputs pass
    through unchanged.

    Args:
        date_input: Date string, date, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if date_input is None:
        return None
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not isinstance(date_input, str):
        return None

    try:
        return date.fromisoformat(date_input.strip())
    except ValueError:
        _LOGGER.debug("dt_parse_date: could not parse %r", date_input)
        return None


def dt_format_display(value: date) -> str:
    """Format a date as "Dec 31, 2026": English month, unpadded day, any locale."""
    return f"{MONTH_SHORT_NAMES[value.month - 1]} {value.day}, {value.year}"


# ==============================================================================
# Calendar Arithmetic
# ==============================================================================


def sunday_weekday(value: date) -> int:
    """Return the Sunday-based weekday index (0=Sunday ... 6=Saturday).

    Example:
        sunday_weekday(date(2026, 3, 1)) → 0  # Sunday
        sunday_weekday(date(2026, 3, 2)) → 1  # Monday
    """
    return (value.weekday() + 1) % DAYS_PER_WEEK


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in the given month (28-31)."""
    return monthrange(year, month)[1]


def add_months(value: date, months: int) -> date:
    """Add months to a date, clamping the day to the target month's length.

    Uses relativedelta so Jan 31 + 1 month = Feb 28 (or Feb 29 in a leap
    year) rather than overflowing into March.

    Examples:
        add_months(date(2026, 1, 31), 1) → date(2026, 2, 28)
        add_months(date(2024, 1, 31), 1) → date(2024, 2, 29)
        add_months(date(2026, 1, 31), 3) → date(2026, 4, 30)
    """
    return value + relativedelta(months=months)


def add_years(value: date, years: int) -> date:
    """Add years to a date, clamping Feb 29 to Feb 28 in non-leap years."""
    return value + relativedelta(years=years)


def nth_weekday_of_month(
    year: int, month: int, week_of_month: int, weekday: int
) -> date:
    """Return the nth (or last) occurrence of a weekday in a month.

    For `week_of_month >= 1`, finds the first matching weekday in the month
    and adds `week_of_month - 1` weeks. For `WEEK_OF_MONTH_LAST` (-1), starts
    at the last day of the month and walks backwards until the weekday
    matches.

    Args:
        year: Full year
        month: Month 1-12
        week_of_month: 1-4 for nth occurrence, -1 for last
        weekday: Sunday-based weekday (0=Sunday ... 6=Saturday)

    Returns:
        The matching date. Values 1-4 always fall inside the month because
        every month has at least 28 days.

    Examples:
        nth_weekday_of_month(2026, 3, 2, 2) → date(2026, 3, 10)   # 2nd Tuesday
        nth_weekday_of_month(2026, 3, -1, 5) → date(2026, 3, 27)  # last Friday
    """
    if week_of_month == WEEK_OF_MONTH_LAST:
        current = date(year, month, last_day_of_month(year, month))
        while sunday_weekday(current) != weekday:
            current -= timedelta(days=1)
        return current

    current = date(year, month, 1)
    while sunday_weekday(current) != weekday:
        current += timedelta(days=1)
    return current + timedelta(weeks=week_of_month - 1)
