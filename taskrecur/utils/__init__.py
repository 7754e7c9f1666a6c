# File: utils/__init__.py
"""Pure Python utilities for taskrecur.

Submodules:
    - dt_utils: Calendar date parsing, formatting and month/weekday arithmetic

Usage:
    from . import dt_utils
    from .dt_utils import add_months
"""

from . import dt_utils

__all__ = ["dt_utils"]
