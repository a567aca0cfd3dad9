# File: utils/__init__.py
"""Pure Python utilities for Activity Tracker.

This module contains pure functions with no I/O. The only clock read in the
project is dt_utils.dt_now_utc().

Submodules:
    - dt_utils: Date/time conversion, calendar boundaries, formatting
    - math_utils: Means and consecutive differences

Usage:
    from . import dt_utils
    from .math_utils import calculate_mean
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
