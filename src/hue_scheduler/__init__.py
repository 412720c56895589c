"""
hue-scheduler: time-of-day scene scheduling for wall-switched lights.

This library decides which bridge scene should be active for a set of
lights when their wall switch is turned on:
- Time windows parsed from scene names ("Evening (18:23h-sunset)")
- Overlapping windows linearized into one winner per minute
- Reachability flips debounced into scene activations and group shutoffs
"""

from hue_scheduler.core import Event, EventBus, EventFilter, Group, Light, Scene
from hue_scheduler.timerange import TimeRange, TimeRangeParser, matches
from hue_scheduler.schedule import ScheduledScene, active_scenes, linearize
from hue_scheduler.activation import ActivationDecider, ReachabilityTracker
from hue_scheduler.adapter import BridgeAdapter, BridgeError, MockBridgeAdapter
from hue_scheduler.scheduler import CycleResult, HueScheduler

__version__ = "0.3.0"

__all__ = [
    "ActivationDecider",
    "BridgeAdapter",
    "BridgeError",
    "CycleResult",
    "Event",
    "EventBus",
    "EventFilter",
    "Group",
    "HueScheduler",
    "Light",
    "MockBridgeAdapter",
    "ReachabilityTracker",
    "Scene",
    "ScheduledScene",
    "TimeRange",
    "TimeRangeParser",
    "active_scenes",
    "linearize",
    "matches",
]
