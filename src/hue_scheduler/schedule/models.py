"""Data models for the schedule linearizer.

Licensed under MIT License
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScheduledScene:
    """A scene bound to one normal (non-wrapping) window.

    Used both as linearizer input and as a partition entry in its output.

    Attributes:
        scene_id: Bridge scene ID.
        start: First minute of the window.
        end: First minute after the window.
        window_start: Start of the authored window this piece was cut from,
            when that differs from ``start`` (the after-midnight piece of a
            wrapping window). Not part of equality.
    """

    scene_id: str
    start: int
    end: int
    window_start: int | None = field(default=None, compare=False, repr=False)

    @property
    def priority(self) -> tuple[int, int]:
        """Sort key: later start wins, then later authored start."""
        origin = self.start if self.window_start is None else self.window_start
        return self.start, origin

    def contains(self, value: int) -> bool:
        """Half-open containment check."""
        return self.start <= value < self.end
