# File: helpers/__init__.py
"""Presentation-side helper functions for Activity Tracker.

These helpers consume engine output and shape it for display. They are
read-only and never modify the activities passed to them.

Submodules:
    - activity_helpers: List filtering, urgency ordering, calendar day counts
    - display_helpers: Status labels/colors and human-readable text

Usage:
    from . import display_helpers
    from .activity_helpers import filter_activities
"""

from . import activity_helpers, display_helpers

__all__ = ["activity_helpers", "display_helpers"]
