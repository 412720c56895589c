"""The activation decider.

Combines the tracker's reachability, the schedule for "now" and the bridge
topology into on/off commands. It issues no bridge calls itself.

Licensed under MIT License
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from hue_scheduler.core.models import Group, Light, Scene
from hue_scheduler.schedule import active_scenes
from hue_scheduler.timerange import TimeRangeParser

from .models import ActivateScene, Decision, TrackerUpdate, TurnOffGroup
from .tracker import ReachabilityTracker

_LOGGER = logging.getLogger(__name__)

DEFAULT_EXEMPT_MARKER = "(att)"


class ActivationDecider:
    """Decides which scenes to recall and which groups to switch off."""

    def __init__(
        self,
        tracker: ReachabilityTracker,
        reachability_window: timedelta,
        exempt_marker: str = DEFAULT_EXEMPT_MARKER,
    ) -> None:
        """Initialize the decider.

        Args:
            tracker: Reachability store, mutated when a scene fires.
            reachability_window: How long a flip to reachable stays eligible.
            exempt_marker: Name suffix of lights that are not wall-switched.
        """
        self.tracker = tracker
        self.reachability_window = reachability_window
        self.exempt_marker = exempt_marker

    def is_exempt(self, light: Light) -> bool:
        """Always-on lights are never reachability-checked."""
        return light.name.endswith(self.exempt_marker)

    def observe(self, lights: Iterable[Light], now: datetime) -> TrackerUpdate:
        """Feed the non-exempt lights of a snapshot to the tracker."""
        return self.tracker.update((light for light in lights if not self.is_exempt(light)), now)

    def eligible_scenes(
        self,
        scenes: Iterable[Scene],
        lights: Sequence[Light],
        now: datetime,
    ) -> list[Scene]:
        """Scenes whose every light is exempt or freshly reachable.

        At least one light must be freshly reachable; a scene made only of
        exempt lights never fires on its own.
        """
        light_index = {light.id: light for light in lights}
        exempt_ids = {light.id for light in lights if self.is_exempt(light)}
        triggers = self.tracker.recently_reachable(now, self.reachability_window)

        eligible: list[Scene] = []
        for scene in scenes:
            if not scene.light_ids:
                continue

            missing = [light_id for light_id in scene.light_ids if light_id not in light_index]
            if missing:
                _LOGGER.warning(
                    f"Scene {scene.id} ({scene.name}) references unknown lights {missing}, skipping"
                )
                continue

            if not any(light_id in triggers for light_id in scene.light_ids):
                continue

            if all(light_id in exempt_ids or light_id in triggers for light_id in scene.light_ids):
                eligible.append(scene)

        return eligible

    def decide(
        self,
        lights: Sequence[Light],
        scenes: Sequence[Scene],
        groups: Sequence[Group],
        changed: frozenset[str],
        parser: TimeRangeParser,
        now: datetime,
        minute_of_day: int,
    ) -> Decision:
        """Compute the commands for one poll cycle.

        Args:
            lights: Current light snapshot.
            scenes: Current scene snapshot.
            groups: Current group snapshot.
            changed: IDs of lights whose reachability flipped this cycle.
            parser: Parser holding this cycle's variables (sunrise, sunset).
            now: Current time, for the reachability window.
            minute_of_day: Current minute of day in the home timezone.

        Returns:
            Decision with scene activations and group shutoffs.
        """
        activations = self._decide_activations(
            lights, scenes, groups, parser, now, minute_of_day
        )
        shutoffs = self._decide_shutoffs(lights, groups, changed)

        return Decision(activations=activations, shutoffs=shutoffs)

    def _decide_activations(
        self,
        lights: Sequence[Light],
        scenes: Sequence[Scene],
        groups: Sequence[Group],
        parser: TimeRangeParser,
        now: datetime,
        minute_of_day: int,
    ) -> list[ActivateScene]:
        scene_index = {scene.id: scene for scene in scenes}
        group_ids = {group.id for group in groups}

        eligible = self.eligible_scenes(scenes, lights, now)
        if not eligible:
            return []

        _LOGGER.debug(f"{len(eligible)} scene(s) eligible: {[s.id for s in eligible]}")

        activations: list[ActivateScene] = []
        for winner in active_scenes(eligible, parser, minute_of_day):
            scene = scene_index[winner.scene_id]

            if scene.group_id is None or scene.group_id not in group_ids:
                _LOGGER.warning(
                    f"Scene {scene.id} ({scene.name}) has no known group "
                    f"({scene.group_id}), skipping"
                )
                continue

            # The flip that fired this scene must not fire again next cycle
            self.tracker.clear(scene.light_ids)

            _LOGGER.info(f"Activating scene {scene.name} on group {scene.group_id}")
            activations.append(ActivateScene(scene_id=scene.id, group_id=scene.group_id))

        return activations

    def _decide_shutoffs(
        self,
        lights: Sequence[Light],
        groups: Sequence[Group],
        changed: frozenset[str],
    ) -> list[TurnOffGroup]:
        if not changed:
            return []

        exempt_ids = {light.id for light in lights if self.is_exempt(light)}

        shutoffs: list[TurnOffGroup] = []
        for group in groups:
            switched = [light_id for light_id in group.light_ids if light_id not in exempt_ids]
            if not switched:
                continue

            if all(light_id in changed and self._is_unreachable(light_id) for light_id in switched):
                _LOGGER.info(f"All lights are unreachable, turning off group: {group.name}")
                shutoffs.append(TurnOffGroup(group_id=group.id, name=group.name))

        return shutoffs

    def _is_unreachable(self, light_id: str) -> bool:
        state = self.tracker.get(light_id)
        return state is not None and not state.reachable
