# File: __init__.py
"""Recurrence engine for recurring tasks.

Computes the next due date of a recurring task series from a schedule
(daily, weekly, biweekly, monthly, quarterly or yearly, with optional end
conditions), decides whether a series should keep generating, and renders
schedules as human-readable text.

Key Features:
- Pure calendar-date engine with end-of-month clamping and catch-up.
- Boundary validation of stored schedule dicts.
- Next-occurrence generation on task completion with idempotent creation.
"""

from __future__ import annotations

from .engines.schedule_engine import (
    RecurrenceEngine,
    next_occurrence,
    should_generate_next,
    step_once,
)
from .helpers.description_helpers import describe, recurring_label
from .helpers.schedule_helpers import (
    build_schedule,
    build_schedule_data,
    validate_schedule_data,
)
from .managers.recurring_task_manager import GenerationResult, RecurringTaskManager
from .schedules import (
    BiweeklySchedule,
    DailySchedule,
    DayOfMonth,
    DayOfWeek,
    InvalidScheduleError,
    MonthlySchedule,
    QuarterlySchedule,
    Schedule,
    WeeklySchedule,
    YearlySchedule,
)
from .store import DuplicateOccurrenceError, InMemoryTaskStore, TaskStore

__all__ = [
    "BiweeklySchedule",
    "DailySchedule",
    "DayOfMonth",
    "DayOfWeek",
    "DuplicateOccurrenceError",
    "GenerationResult",
    "InMemoryTaskStore",
    "InvalidScheduleError",
    "MonthlySchedule",
    "QuarterlySchedule",
    "RecurrenceEngine",
    "RecurringTaskManager",
    "Schedule",
    "TaskStore",
    "WeeklySchedule",
    "YearlySchedule",
    "build_schedule",
    "build_schedule_data",
    "describe",
    "next_occurrence",
    "recurring_label",
    "should_generate_next",
    "step_once",
    "validate_schedule_data",
]
