"""
Resolve which scene is scheduled right now for each physical target.

Scenes controlling the same set of lights compete for that target; scenes
controlling different sets are independent.
"""

import logging
from typing import Iterable

from hue_scheduler.core.models import Scene
from hue_scheduler.timerange import TimeRangeParser

from .linearizer import linearize, split_wrapping
from .models import ScheduledScene

logger = logging.getLogger(__name__)

TargetKey = tuple[str, ...]


def target_key(light_ids: Iterable[str]) -> TargetKey:
    """Canonical key for a set of lights (order-insensitive)."""
    return tuple(sorted(set(light_ids)))


def build_timelines(
    scenes: Iterable[Scene],
    parser: TimeRangeParser,
) -> dict[TargetKey, list[ScheduledScene]]:
    """
    Linearize the windows of all scenes, one timeline per target.

    Args:
        scenes: Candidate scenes
        parser: Parser with the cycle's variables defined

    Returns:
        Mapping of target key to its partition of the day
    """
    candidates: dict[TargetKey, list[ScheduledScene]] = {}

    for scene in scenes:
        if not scene.light_ids:
            logger.debug(f"Scene {scene.id} ({scene.name}) has no lights, ignoring")
            continue

        ranges = parser.parse(scene.name)
        if not ranges:
            continue

        key = target_key(scene.light_ids)
        for time_range in ranges:
            candidates.setdefault(key, []).extend(split_wrapping(scene.id, time_range))

    return {key: linearize(schedules) for key, schedules in candidates.items()}


def active_scenes(
    scenes: Iterable[Scene],
    parser: TimeRangeParser,
    now: int,
) -> list[ScheduledScene]:
    """
    Get the winning scene for "now" on every target.

    Args:
        scenes: Candidate scenes
        parser: Parser with the cycle's variables defined
        now: Current minute of day

    Returns:
        At most one entry per target, the one whose window contains ``now``
    """
    winners: list[ScheduledScene] = []

    for key, timeline in build_timelines(scenes, parser).items():
        for entry in timeline:
            if entry.contains(now):
                logger.debug(f"Scene {entry.scene_id} is scheduled for lights {list(key)}")
                winners.append(entry)
                break

    return winners
