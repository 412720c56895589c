"""The schedule linearizer.

Scenes are authored independently and their windows overlap freely. The
linearizer turns such a set into a time-ordered partition where every
covered minute belongs to exactly one scene: the covering window that
started last wins. For equal starts, the piece cut from the window authored
later in the day wins (the after-midnight part of "22h-6h" beats a window
starting at 0h), and remaining ties go to the candidate encountered later.
This lets a narrow window carve an exception out of a broad one without
a priority marker in the scene name.

Licensed under MIT License
"""

import logging
from typing import Iterable

from hue_scheduler.timerange import MINUTES_PER_DAY, TimeRange

from .models import ScheduledScene

_LOGGER = logging.getLogger(__name__)

_UNBOUNDED = float("inf")


def split_wrapping(scene_id: str, time_range: TimeRange) -> list[ScheduledScene]:
    """Convert a window into normal linearizer input.

    A wrapping window becomes a piece up to midnight and a piece after it.
    The after-midnight piece remembers where its window started, so it
    outranks a window that merely starts at midnight. Zero-width pieces are
    dropped.

    Args:
        scene_id: Scene the window belongs to.
        time_range: Parsed window.

    Returns:
        Zero, one or two ScheduledScene values.
    """
    if time_range.is_wrapping:
        pieces = [
            ScheduledScene(scene_id, time_range.start, MINUTES_PER_DAY),
            ScheduledScene(scene_id, 0, time_range.end, window_start=time_range.start),
        ]
    else:
        pieces = [ScheduledScene(scene_id, time_range.start, time_range.end)]

    return [piece for piece in pieces if piece.start < piece.end]


def _emit(result: list[ScheduledScene], scene_id: str, start: int, end: int) -> None:
    """Append a settled entry, merging it into an adjacent entry of the same scene."""
    if start >= end:
        return

    if result and result[-1].scene_id == scene_id and result[-1].end == start:
        result[-1] = ScheduledScene(scene_id, result[-1].start, end)
        return

    result.append(ScheduledScene(scene_id, start, end))


def _settle(
    stack: list[ScheduledScene],
    result: list[ScheduledScene],
    cursor: int,
    until: float,
) -> int:
    """Settle the timeline from ``cursor`` up to ``until``.

    The top of the stack is the open candidate with the latest start, so it
    owns the timeline until it ends or ``until`` is reached. Candidates that
    ended before the cursor are popped as they surface.

    Returns:
        The new cursor.
    """
    while stack and cursor < until:
        top = stack[-1]
        if top.end <= cursor:
            stack.pop()
            continue

        end = int(min(top.end, until))
        _emit(result, top.scene_id, cursor, end)
        cursor = end

    return cursor


def linearize(schedules: Iterable[ScheduledScene]) -> list[ScheduledScene]:
    """Reduce overlapping windows to a non-overlapping partition.

    Sweeps the candidates in start order with an explicit stack of open
    candidates. Before a candidate is pushed, the part of the timeline up to
    its start is settled from the stack. Once every candidate is pushed, the
    stack is unwound from the most recently pushed entry, each one resuming
    where the previous one ended.

    Args:
        schedules: Unordered candidates with normal windows.

    Returns:
        Start-ordered entries; no overlaps, no zero-width entries, adjacent
        entries of the same scene merged. Gaps mean no scene is active.
    """
    ordered = sorted(schedules, key=lambda schedule: schedule.priority)
    if not ordered:
        return []

    stack: list[ScheduledScene] = []
    result: list[ScheduledScene] = []
    cursor = ordered[0].start

    for candidate in ordered:
        if candidate.start >= candidate.end:
            _LOGGER.debug(f"Ignoring zero-width window for scene {candidate.scene_id}")
            continue

        _settle(stack, result, cursor, candidate.start)
        cursor = candidate.start
        stack.append(candidate)

    _settle(stack, result, cursor, _UNBOUNDED)

    return result
