# File: helpers/__init__.py
"""Boundary and presentation helpers for taskrecur.

Submodules:
    - schedule_helpers: Stored schedule validation (voluptuous) and conversion
    - description_helpers: Human-readable schedule phrases and short labels

Usage:
    from . import schedule_helpers
    from .description_helpers import describe
"""

from . import description_helpers, schedule_helpers

__all__ = [
    "description_helpers",
    "schedule_helpers",
]
