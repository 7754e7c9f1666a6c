"""Engine modules for taskrecur.

Contains pure computation engines:
- schedule_engine: Recurrence stepping, next-occurrence resolution, previews
  and RRULE generation
"""

# Use relative imports within package to avoid mypy module resolution issues
from .schedule_engine import (
    RecurrenceEngine,
    next_occurrence,
    should_generate_next,
    step_once,
)

__all__ = [
    "RecurrenceEngine",
    "next_occurrence",
    "should_generate_next",
    "step_once",
]
