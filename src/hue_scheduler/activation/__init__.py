"""
Reachability tracking and activation decisions.

Features:
- Per-light reachability with bootstrap-safe first observation
- Trailing reachability window measured from the flip time
- Exempt (always-on) lights marked by a name suffix
- Flip times cleared once a scene fires, so it cannot fire twice
- Group shutoff when a wall switch cut every switched light
"""

from .models import (
    ActivateScene,
    Decision,
    DeviceState,
    ReachabilityChange,
    TrackerUpdate,
    TurnOffGroup,
)
from .tracker import ReachabilityTracker
from .engine import DEFAULT_EXEMPT_MARKER, ActivationDecider

__all__ = [
    "ActivationDecider",
    "ActivateScene",
    "DEFAULT_EXEMPT_MARKER",
    "Decision",
    "DeviceState",
    "ReachabilityChange",
    "ReachabilityTracker",
    "TrackerUpdate",
    "TurnOffGroup",
]
