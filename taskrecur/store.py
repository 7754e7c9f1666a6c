# File: store.py
"""Task storage interface for the recurring task lifecycle manager.

`TaskStore` is the narrow persistence surface the manager needs. Real
deployments back it with their database; `InMemoryTaskStore` implements it
in memory for tests and embedding.

A store MUST reject a second task created with the same idempotency key by
raising DuplicateOccurrenceError. That uniqueness is what guarantees at most
one next occurrence per completed occurrence when a completion event is
retried or delivered twice.
"""

from __future__ import annotations

import copy
import threading
from typing import TYPE_CHECKING, Protocol
import uuid

from . import const

if TYPE_CHECKING:
    from .type_defs import TaskData


class DuplicateOccurrenceError(Exception):
    """Raised when a task with the same idempotency key already exists.

    Attributes:
        idempotency_key: The key that was already used
        existing_task_id: ID of the task created with that key
    """

    def __init__(self, idempotency_key: str, existing_task_id: str) -> None:
        """Initialize DuplicateOccurrenceError.

        Args:
            idempotency_key: The key that was already used
            existing_task_id: ID of the task created with that key
        """
        self.idempotency_key = idempotency_key
        self.existing_task_id = existing_task_id
        super().__init__(
            f"Task already created for idempotency key {idempotency_key}: "
            f"existing_task_id={existing_task_id}"
        )


class TaskStore(Protocol):
    """Persistence operations used by RecurringTaskManager."""

    def count_group(self, recurring_group_id: str) -> int:
        """Return the number of tasks in a recurring group."""
        ...

    def board_statuses(self, board_id: str) -> list[str]:
        """Return the board's status option IDs, in display order."""
        ...

    def next_position(self, board_id: str) -> int:
        """Return the position after the last top-level task on a board."""
        ...

    def list_subtasks(self, parent_task_id: str) -> list[TaskData]:
        """Return a task's subtasks ordered by position."""
        ...

    def task_for_key(self, idempotency_key: str) -> TaskData | None:
        """Return the task created with `idempotency_key`, or None."""
        ...

    def create_task(
        self, data: TaskData, idempotency_key: str | None = None
    ) -> TaskData:
        """Insert a task and return it with its new ID.

        Raises:
            DuplicateOccurrenceError: If `idempotency_key` was already used
        """
        ...


class InMemoryTaskStore:
    """Dict-backed TaskStore.

    Tasks are keyed by internal ID. Returned records are copies, so callers
    cannot mutate stored state by accident. A single lock guards all state;
    the idempotency-key check, the insert and the key registration happen
    under it as one step, so concurrent handlers cannot both create a task
    for the same key.
    """

    def __init__(self, board_statuses: dict[str, list[str]] | None = None) -> None:
        """Initialize the store.

        Args:
            board_statuses: Optional status option IDs per board ID.
        """
        self._lock = threading.Lock()
        self._tasks: dict[str, TaskData] = {}
        self._board_statuses: dict[str, list[str]] = dict(board_statuses or {})
        self._idempotency_keys: dict[str, str] = {}

    # -------------------------------------------------------------------------------------
    # TaskStore protocol
    # -------------------------------------------------------------------------------------

    def count_group(self, recurring_group_id: str) -> int:
        with self._lock:
            return sum(
                1
                for task in self._tasks.values()
                if task.get(const.DATA_TASK_RECURRING_GROUP_ID) == recurring_group_id
            )

    def board_statuses(self, board_id: str) -> list[str]:
        with self._lock:
            return list(self._board_statuses.get(board_id, []))

    def next_position(self, board_id: str) -> int:
        with self._lock:
            positions = [
                task.get(const.DATA_TASK_POSITION, 0)
                for task in self._tasks.values()
                if task.get(const.DATA_TASK_BOARD_ID) == board_id
            ]
        return max(positions, default=-1) + 1

    def list_subtasks(self, parent_task_id: str) -> list[TaskData]:
        with self._lock:
            subtasks = [
                copy.deepcopy(task)
                for task in self._tasks.values()
                if task.get(const.DATA_TASK_PARENT_TASK_ID) == parent_task_id
            ]
        return sorted(subtasks, key=lambda t: t.get(const.DATA_TASK_POSITION, 0))

    def task_for_key(self, idempotency_key: str) -> TaskData | None:
        with self._lock:
            task_id = self._idempotency_keys.get(idempotency_key)
            if task_id is None:
                return None
            return copy.deepcopy(self._tasks[task_id])

    def create_task(
        self, data: TaskData, idempotency_key: str | None = None
    ) -> TaskData:
        with self._lock:
            if idempotency_key is not None and idempotency_key in self._idempotency_keys:
                raise DuplicateOccurrenceError(
                    idempotency_key, self._idempotency_keys[idempotency_key]
                )

            task: TaskData = copy.deepcopy(data)
            task_id = task.get(const.DATA_TASK_ID) or uuid.uuid4().hex
            task[const.DATA_TASK_ID] = task_id
            task.setdefault(const.DATA_TASK_ASSIGNEE_IDS, [])
            self._tasks[task_id] = task

            if idempotency_key is not None:
                self._idempotency_keys[idempotency_key] = task_id

            const.LOGGER.debug("InMemoryTaskStore: Created task %s", task_id)
            return copy.deepcopy(task)

    # -------------------------------------------------------------------------------------
    # Extras (not part of the protocol)
    # -------------------------------------------------------------------------------------

    def set_board_statuses(self, board_id: str, statuses: list[str]) -> None:
        """Configure a board's status option IDs."""
        with self._lock:
            self._board_statuses[board_id] = list(statuses)

    def get_task(self, task_id: str) -> TaskData | None:
        """Return a copy of a task, or None if unknown."""
        with self._lock:
            task = self._tasks.get(task_id)
            return copy.deepcopy(task) if task is not None else None

    @property
    def tasks(self) -> list[TaskData]:
        """Copies of all stored tasks, in insertion order."""
        with self._lock:
            return [copy.deepcopy(task) for task in self._tasks.values()]
