"""Shared fixtures for taskrecur tests."""

from collections.abc import Iterator
from zoneinfo import ZoneInfo

import pytest

from taskrecur.store import InMemoryTaskStore
from taskrecur.utils import dt_utils

BOARD_ID = "board-1"
BOARD_STATUSES = ["backlog", "in_progress", "done"]


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Restore the UTC default timezone after each test."""
    yield
    dt_utils.set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    """Return an in-memory store with one configured board."""
    return InMemoryTaskStore(board_statuses={BOARD_ID: list(BOARD_STATUSES)})
