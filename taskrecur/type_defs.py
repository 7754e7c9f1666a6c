# File: type_defs.py
"""Type definitions for taskrecur stored data structures.

TypedDicts describe the dict shapes that cross the package boundary: the
stored schedule config (camelCase keys, as persisted with the task), the
task records the lifecycle manager reads and writes, and the completion
event that triggers next-occurrence generation.

The typed schedule itself lives in schedules.py; these dicts are only the
serialized form.

IMPORTANT: This file must NOT import from engines/, managers/ or helpers/ to
avoid circular dependencies. Only import from typing (type machinery).
"""

from __future__ import annotations

from datetime import date
from typing import NotRequired, TypedDict

# =============================================================================
# Stored schedule
# =============================================================================

# Keys use the functional syntax because the stored format is camelCase.
ScheduleData = TypedDict(
    "ScheduleData",
    {
        "frequency": str,  # FREQUENCY_* constant
        "interval": int,  # 1-99
        "daysOfWeek": NotRequired[list[int]],  # Sunday-based weekday indices
        "dayOfMonth": NotRequired[int],  # 1-31
        "monthlyPattern": NotRequired[str],  # MONTHLY_PATTERN_* constant
        "weekOfMonth": NotRequired[int],  # 1-4 or -1 (last)
        "monthlyDayOfWeek": NotRequired[int],  # Sunday-based weekday index
        "endDate": NotRequired[str],  # ISO date "YYYY-MM-DD"
        "endAfterOccurrences": NotRequired[int],  # 1-999
    },
)


# =============================================================================
# Tasks
# =============================================================================


class TaskData(TypedDict, total=False):
    """A task record as held by a TaskStore."""

    id: str
    board_id: str
    parent_task_id: str | None
    title: str
    description: str | None
    status: str
    section: str | None
    due_date: date | None
    date_flexibility: str  # DATE_FLEXIBILITY_* constant
    recurring_config: ScheduleData | None
    recurring_group_id: str | None
    position: int
    created_by: str | None
    assignee_ids: list[str]


class RecurringCompletion(TypedDict):
    """Payload emitted when a recurring task is marked complete.

    `completed_due_date` is the stored due date of the occurrence that was
    completed; `completion_date` is the caller-localized calendar day on
    which it was completed and anchors the catch-up decision.
    """

    task_id: str
    board_id: str
    recurring_group_id: str
    recurring_config: ScheduleData
    completed_due_date: date
    completion_date: date
    completed_by_user_id: str | None
    title: str
    description: str | None
    section: str | None
    date_flexibility: str
    assignee_ids: list[str]
