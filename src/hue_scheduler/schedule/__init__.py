"""
Schedule linearizer.

Features:
- Conflict-free partition of the day from overlapping scene windows
- Later-starting windows override broader ones for their span
- Wrap-past-midnight windows split at midnight
- One timeline per physical target (sorted light-id key)
"""

from .models import ScheduledScene
from .linearizer import linearize, split_wrapping
from .resolver import TargetKey, active_scenes, build_timelines, target_key

__all__ = [
    "ScheduledScene",
    "TargetKey",
    "active_scenes",
    "build_timelines",
    "linearize",
    "split_wrapping",
    "target_key",
]
