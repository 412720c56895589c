"""Reachability tracker.

A light that is cut by its wall switch drops off the bridge and becomes
reachable again when power returns. The tracker records those flips per
light so the decider can tell "just switched on" from "has been on".

Licensed under MIT License
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable

from hue_scheduler.core.models import Light

from .models import DeviceState, ReachabilityChange, TrackerUpdate

_LOGGER = logging.getLogger(__name__)


class ReachabilityTracker:
    """Map of light ID to last known reachability and flip time.

    Owned by a single poll loop; not safe for concurrent mutation.
    """

    def __init__(self) -> None:
        self._states: dict[str, DeviceState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, light_id: object) -> bool:
        return light_id in self._states

    def get(self, light_id: str) -> DeviceState | None:
        return self._states.get(light_id)

    def update(self, lights: Iterable[Light], now: datetime) -> TrackerUpdate:
        """Record a light snapshot.

        First observations are bootstrap transitions: the state is stored
        without a flip time so process start cannot trigger any scene.

        Args:
            lights: Lights to track (exempt lights already filtered out).
            now: Time of the snapshot.

        Returns:
            TrackerUpdate listing flips and first observations.
        """
        changes: list[ReachabilityChange] = []
        bootstrapped: list[str] = []

        for light in lights:
            previous = self._states.get(light.id)

            if previous is None:
                self._states[light.id] = DeviceState(reachable=light.reachable)
                bootstrapped.append(light.id)
                continue

            if previous.reachable == light.reachable:
                continue

            if light.reachable:
                _LOGGER.info(f'Light "{light.name}" is reachable again')
            else:
                _LOGGER.info(f'Light "{light.name}" is not reachable anymore')

            self._states[light.id] = DeviceState(reachable=light.reachable, changed_at=now)
            changes.append(ReachabilityChange(light.id, light.name, light.reachable))

        if bootstrapped:
            _LOGGER.info(f"Initialized reachability for {len(bootstrapped)} light(s)")

        return TrackerUpdate(changes=changes, bootstrapped=bootstrapped)

    def recently_reachable(self, now: datetime, window: timedelta) -> set[str]:
        """Lights that became reachable less than ``window`` before ``now``."""
        return {
            light_id
            for light_id, state in self._states.items()
            if state.reachable and state.changed_at is not None and now - state.changed_at < window
        }

    def clear(self, light_ids: Iterable[str]) -> None:
        """Forget the flip time of lights so the same flip cannot fire twice."""
        for light_id in light_ids:
            state = self._states.get(light_id)
            if state is not None and state.changed_at is not None:
                self._states[light_id] = DeviceState(reachable=state.reachable)

    def dump_state(self) -> dict[str, Any]:
        """Serialize runtime state for diagnostics."""
        return {
            light_id: {
                "reachable": state.reachable,
                "changed_at": state.changed_at.isoformat() if state.changed_at else None,
            }
            for light_id, state in self._states.items()
        }
