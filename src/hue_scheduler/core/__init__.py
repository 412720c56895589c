"""
Core components of the scheduler.

This package contains:
- bus: Event Bus implementation
- models: Bridge snapshot dataclasses (Light, Scene, Group)
"""

from hue_scheduler.core.bus import Event, EventBus, EventFilter
from hue_scheduler.core.models import Group, Light, Scene

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Group",
    "Light",
    "Scene",
]
