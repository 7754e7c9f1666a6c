"""Manager modules for taskrecur.

Managers orchestrate workflows and talk to storage; the pure date logic
they delegate to lives in engines/.
"""

from .recurring_task_manager import (
    GenerationResult,
    RecurringTaskManager,
    occurrence_idempotency_key,
)

__all__ = [
    "GenerationResult",
    "RecurringTaskManager",
    "occurrence_idempotency_key",
]
