"""Recurring Task Manager - next-occurrence generation on task completion.

When a recurring task is completed, the manager decides whether its series
continues and, if so, creates the next task:

1. Count the occurrences already generated for the recurring group
2. Gate on the occurrence cap / end date (RecurrenceEngine.should_generate_next)
3. Resolve the next due date with catch-up (RecurrenceEngine.next_occurrence)
4. Create the next task, keyed by "{group}:{completed_due_date}" so a retried
   completion event cannot create a second copy
5. Clone the completed task's subtasks, keeping their due-date offsets

ARCHITECTURE:
- RecurringTaskManager = "The Job" (workflow orchestration, talks to the store)
- RecurrenceEngine = Pure date logic (no I/O, no clock)
- TaskStore = Persistence (idempotency-key uniqueness lives here)

A retried or concurrent delivery of the same event never creates a second
next task; it finishes whatever subtask cloning is still missing instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const
from ..engines.schedule_engine import RecurrenceEngine
from ..helpers.schedule_helpers import build_schedule
from ..store import DuplicateOccurrenceError

if TYPE_CHECKING:
    from datetime import date

    from ..store import TaskStore
    from ..type_defs import RecurringCompletion, TaskData


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of handling one recurring task completion.

    Attributes:
        created: Whether a next task was created
        task_id: ID of the next task, also when an earlier delivery created it
                 (None when the series ended)
        next_due_date: Due date of that task (None when the series ended)
        reason: REASON_* constant describing the outcome
        cloned_subtask_count: Number of subtasks copied by this call
    """

    created: bool
    reason: str
    task_id: str | None = None
    next_due_date: date | None = None
    cloned_subtask_count: int = 0


def occurrence_idempotency_key(recurring_group_id: str, completed_due: date) -> str:
    """Build the key that identifies "the occurrence after `completed_due`"."""
    return f"{recurring_group_id}:{completed_due.isoformat()}"


class RecurringTaskManager:
    """Creates the next task of a recurring series when one is completed.

    Args:
        store: Task persistence implementing the TaskStore protocol
    """

    def __init__(self, store: TaskStore) -> None:
        """Initialize manager.

        Args:
            store: Task persistence implementing the TaskStore protocol
        """
        self._store = store

    def handle_completion(self, event: RecurringCompletion) -> GenerationResult:
        """Generate the next occurrence for a completed recurring task.

        A redelivered event finds the task created by the first delivery
        through its idempotency key and only finishes any subtask cloning
        that delivery did not complete.

        Args:
            event: Completion payload for the task that was just completed

        Returns:
            GenerationResult describing what happened

        Raises:
            InvalidScheduleError: If the event's recurring config is malformed
        """
        schedule = build_schedule(event["recurring_config"])
        engine = RecurrenceEngine(schedule)
        group_id = event["recurring_group_id"]
        completed_due = event["completed_due_date"]
        completion_date = event["completion_date"]
        idempotency_key = occurrence_idempotency_key(group_id, completed_due)

        # Checked before the gate: the first delivery's task counts toward the cap
        existing = self._store.task_for_key(idempotency_key)
        if existing is not None:
            return self._resume_generated(event, existing, idempotency_key)

        occurrences_so_far = self._store.count_group(group_id)
        if not engine.should_generate_next(occurrences_so_far, completion_date):
            const.LOGGER.info(
                "Recurring group %s: series ended after %d occurrence(s)",
                group_id,
                occurrences_so_far,
            )
            return GenerationResult(created=False, reason=const.REASON_SERIES_ENDED)

        next_due = engine.next_occurrence(completed_due, completion_date)
        if next_due is None:
            const.LOGGER.info(
                "Recurring group %s: no occurrence after %s (end date passed)",
                group_id,
                completion_date,
            )
            return GenerationResult(created=False, reason=const.REASON_END_DATE_PASSED)

        status = self._default_status(event["board_id"])
        try:
            new_task = self._store.create_task(
                self._build_next_task(event, next_due, status),
                idempotency_key=idempotency_key,
            )
        except DuplicateOccurrenceError:
            existing = self._store.task_for_key(idempotency_key)
            if existing is None:
                raise
            return self._resume_generated(event, existing, idempotency_key)

        new_task_id = new_task[const.DATA_TASK_ID]
        cloned = self._clone_subtasks(
            event, new_task_id, next_due, status, idempotency_key
        )

        const.LOGGER.info(
            "Recurring group %s: created task %s due %s (%d subtask(s))",
            group_id,
            new_task_id,
            next_due,
            cloned,
        )
        return GenerationResult(
            created=True,
            reason=const.REASON_CREATED,
            task_id=new_task_id,
            next_due_date=next_due,
            cloned_subtask_count=cloned,
        )

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _resume_generated(
        self, event: RecurringCompletion, existing: TaskData, idempotency_key: str
    ) -> GenerationResult:
        """Finish cloning onto a next occurrence created by an earlier delivery."""
        existing_id = existing[const.DATA_TASK_ID]
        existing_due = existing.get(const.DATA_TASK_DUE_DATE)
        const.LOGGER.warning(
            "Recurring group %s: next occurrence already generated as %s",
            event["recurring_group_id"],
            existing_id,
        )

        cloned = self._clone_subtasks(
            event,
            existing_id,
            existing_due,
            existing.get(const.DATA_TASK_STATUS)
            or self._default_status(event["board_id"]),
            idempotency_key,
        )
        if cloned:
            const.LOGGER.info(
                "Recurring group %s: cloned %d remaining subtask(s) onto %s",
                event["recurring_group_id"],
                cloned,
                existing_id,
            )
        return GenerationResult(
            created=False,
            reason=const.REASON_ALREADY_GENERATED,
            task_id=existing_id,
            next_due_date=existing_due,
            cloned_subtask_count=cloned,
        )

    def _default_status(self, board_id: str) -> str:
        """First status option of the board, or the built-in default."""
        statuses = self._store.board_statuses(board_id)
        return statuses[0] if statuses else const.DEFAULT_TASK_STATUS

    def _build_next_task(
        self, event: RecurringCompletion, next_due: date, status: str
    ) -> TaskData:
        board_id = event["board_id"]
        return {
            const.DATA_TASK_BOARD_ID: board_id,
            const.DATA_TASK_PARENT_TASK_ID: None,
            const.DATA_TASK_TITLE: event["title"],
            const.DATA_TASK_DESCRIPTION: event["description"],
            const.DATA_TASK_STATUS: status,
            const.DATA_TASK_SECTION: event["section"],
            const.DATA_TASK_DUE_DATE: next_due,
            const.DATA_TASK_DATE_FLEXIBILITY: _date_flexibility(
                event["date_flexibility"]
            ),
            const.DATA_TASK_RECURRING_CONFIG: event["recurring_config"],
            const.DATA_TASK_RECURRING_GROUP_ID: event["recurring_group_id"],
            const.DATA_TASK_POSITION: self._store.next_position(board_id),
            const.DATA_TASK_CREATED_BY: event["completed_by_user_id"],
            const.DATA_TASK_ASSIGNEE_IDS: list(event["assignee_ids"]),
        }  # type: ignore[misc]

    def _clone_subtasks(
        self,
        event: RecurringCompletion,
        new_parent_id: str,
        parent_due: date | None,
        status: str,
        idempotency_key: str,
    ) -> int:
        """Copy the completed task's subtasks onto the new parent.

        A subtask due N days after (or before) the completed parent's due date
        is due N days after (or before) the new parent's due date. Subtasks
        without a due date stay without one.

        Each clone is keyed by "{idempotency_key}:{subtask_id}", so subtasks
        already cloned by an earlier attempt are skipped.

        Returns:
            Number of subtasks cloned by this call
        """
        completed_due = event["completed_due_date"]
        cloned = 0

        for subtask in self._store.list_subtasks(event["task_id"]):
            subtask_due = subtask.get(const.DATA_TASK_DUE_DATE)
            new_due: date | None = None
            if subtask_due is not None and parent_due is not None:
                new_due = parent_due + (subtask_due - completed_due)

            try:
                self._store.create_task(
                    {
                        const.DATA_TASK_BOARD_ID: event["board_id"],
                        const.DATA_TASK_PARENT_TASK_ID: new_parent_id,
                        const.DATA_TASK_TITLE: subtask.get(const.DATA_TASK_TITLE, ""),
                        const.DATA_TASK_DESCRIPTION: subtask.get(
                            const.DATA_TASK_DESCRIPTION
                        ),
                        const.DATA_TASK_STATUS: status,
                        const.DATA_TASK_SECTION: subtask.get(const.DATA_TASK_SECTION),
                        const.DATA_TASK_DUE_DATE: new_due,
                        const.DATA_TASK_DATE_FLEXIBILITY: _date_flexibility(
                            subtask.get(const.DATA_TASK_DATE_FLEXIBILITY)
                        ),
                        const.DATA_TASK_POSITION: subtask.get(
                            const.DATA_TASK_POSITION, 0
                        ),
                        const.DATA_TASK_CREATED_BY: event["completed_by_user_id"],
                        const.DATA_TASK_ASSIGNEE_IDS: list(
                            subtask.get(const.DATA_TASK_ASSIGNEE_IDS, [])
                        ),
                    },  # type: ignore[misc]
                    idempotency_key=f"{idempotency_key}:{subtask[const.DATA_TASK_ID]}",
                )
            except DuplicateOccurrenceError:
                continue
            cloned += 1

        return cloned


def _date_flexibility(value: str | None) -> str:
    """Return a known DATE_FLEXIBILITY_* value, defaulting to not set."""
    if value in const.DATE_FLEXIBILITY_OPTIONS:
        return value  # type: ignore[return-value]
    if value is not None:
        const.LOGGER.debug("Unknown date flexibility %r, using not set", value)
    return const.DATE_FLEXIBILITY_NOT_SET
