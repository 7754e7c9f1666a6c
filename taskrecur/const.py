# File: const.py
"""Constants for the taskrecur recurrence engine.

This file centralizes stored schedule keys, frequency names, limits and
labels used by the engine, the describer and the lifecycle manager.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Frequencies
# ------------------------------------------------------------------------------------------------
FREQUENCY_BIWEEKLY = "biweekly"
FREQUENCY_DAILY = "daily"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_QUARTERLY = "quarterly"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_YEARLY = "yearly"

FREQUENCY_OPTIONS = [
    FREQUENCY_DAILY,
    FREQUENCY_WEEKLY,
    FREQUENCY_BIWEEKLY,
    FREQUENCY_MONTHLY,
    FREQUENCY_QUARTERLY,
    FREQUENCY_YEARLY,
]

# Monthly patterns (stored values)
MONTHLY_PATTERN_DAY_OF_MONTH = "dayOfMonth"
MONTHLY_PATTERN_DAY_OF_WEEK = "dayOfWeek"

MONTHLY_PATTERN_OPTIONS = [
    MONTHLY_PATTERN_DAY_OF_MONTH,
    MONTHLY_PATTERN_DAY_OF_WEEK,
]

# Multipliers applied to the interval
WEEKS_PER_BIWEEK = 2
MONTHS_PER_QUARTER = 3
DAYS_PER_WEEK = 7

# Week of month: 1-4 for nth occurrence, -1 for last
WEEK_OF_MONTH_LAST = -1
WEEK_OF_MONTH_OPTIONS = [1, 2, 3, 4, WEEK_OF_MONTH_LAST]

# Weekday indices are Sunday-based in stored data (0=Sunday ... 6=Saturday)
WEEKDAY_SUNDAY = 0
WEEKDAY_SATURDAY = 6

# ------------------------------------------------------------------------------------------------
# Stored schedule keys
# ------------------------------------------------------------------------------------------------
DATA_SCHEDULE_FREQUENCY = "frequency"
DATA_SCHEDULE_INTERVAL = "interval"
DATA_SCHEDULE_DAYS_OF_WEEK = "daysOfWeek"
DATA_SCHEDULE_DAY_OF_MONTH = "dayOfMonth"
DATA_SCHEDULE_MONTHLY_PATTERN = "monthlyPattern"
DATA_SCHEDULE_WEEK_OF_MONTH = "weekOfMonth"
DATA_SCHEDULE_MONTHLY_DAY_OF_WEEK = "monthlyDayOfWeek"
DATA_SCHEDULE_END_DATE = "endDate"
DATA_SCHEDULE_END_AFTER_OCCURRENCES = "endAfterOccurrences"

# ------------------------------------------------------------------------------------------------
# Stored task keys (lifecycle manager)
# ------------------------------------------------------------------------------------------------
DATA_TASK_ID = "id"
DATA_TASK_BOARD_ID = "board_id"
DATA_TASK_PARENT_TASK_ID = "parent_task_id"
DATA_TASK_TITLE = "title"
DATA_TASK_DESCRIPTION = "description"
DATA_TASK_STATUS = "status"
DATA_TASK_SECTION = "section"
DATA_TASK_DUE_DATE = "due_date"
DATA_TASK_DATE_FLEXIBILITY = "date_flexibility"
DATA_TASK_RECURRING_CONFIG = "recurring_config"
DATA_TASK_RECURRING_GROUP_ID = "recurring_group_id"
DATA_TASK_POSITION = "position"
DATA_TASK_CREATED_BY = "created_by"
DATA_TASK_ASSIGNEE_IDS = "assignee_ids"

# Date flexibility values carried forward unchanged
DATE_FLEXIBILITY_NOT_SET = "not_set"
DATE_FLEXIBILITY_FLEXIBLE = "flexible"
DATE_FLEXIBILITY_SEMI_FLEXIBLE = "semi_flexible"
DATE_FLEXIBILITY_NOT_FLEXIBLE = "not_flexible"

DATE_FLEXIBILITY_OPTIONS = [
    DATE_FLEXIBILITY_NOT_SET,
    DATE_FLEXIBILITY_FLEXIBLE,
    DATE_FLEXIBILITY_SEMI_FLEXIBLE,
    DATE_FLEXIBILITY_NOT_FLEXIBLE,
]

# Status used when a board has no status options configured
DEFAULT_TASK_STATUS = "todo"

# ------------------------------------------------------------------------------------------------
# Limits
# ------------------------------------------------------------------------------------------------
MIN_INTERVAL = 1
MAX_INTERVAL = 99
MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
MIN_END_AFTER_OCCURRENCES = 1
MAX_END_AFTER_OCCURRENCES = 999

# Day-of-month values every month has; larger values are clamped
MAX_UNCLAMPED_DAY_OF_MONTH = 28

# Safety limit for catch-up and preview loops
MAX_DATE_CALCULATION_ITERATIONS = 10000
MAX_OCCURRENCE_PREVIEW = 500

# ------------------------------------------------------------------------------------------------
# Generation result reasons
# ------------------------------------------------------------------------------------------------
REASON_CREATED = "created"
REASON_SERIES_ENDED = "Recurring series has ended"
REASON_END_DATE_PASSED = "No next occurrence (end date passed)"
REASON_ALREADY_GENERATED = "Next occurrence already generated for this due date"

# ------------------------------------------------------------------------------------------------
# Labels
# ------------------------------------------------------------------------------------------------
WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
WEEKDAY_SHORT_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# RFC 5545 weekday codes (Sunday-based index)
RRULE_WEEKDAY_CODES = ["SU", "MO", "TU", "WE", "TH", "FR", "SA"]

FREQUENCY_LABELS = {
    FREQUENCY_DAILY: "Daily",
    FREQUENCY_WEEKLY: "Weekly",
    FREQUENCY_BIWEEKLY: "Biweekly",
    FREQUENCY_MONTHLY: "Monthly",
    FREQUENCY_QUARTERLY: "Quarterly",
    FREQUENCY_YEARLY: "Yearly",
}

# Plural unit used in "Every N <unit>" phrases
FREQUENCY_UNIT_PLURALS = {
    FREQUENCY_DAILY: "days",
    FREQUENCY_WEEKLY: "weeks",
    FREQUENCY_BIWEEKLY: "weeks",
    FREQUENCY_MONTHLY: "months",
    FREQUENCY_QUARTERLY: "quarters",
    FREQUENCY_YEARLY: "years",
}

WEEK_OF_MONTH_LABELS = {
    1: "1st",
    2: "2nd",
    3: "3rd",
    4: "4th",
    WEEK_OF_MONTH_LAST: "last",
}
