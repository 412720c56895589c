"""Data models for reachability tracking and activation decisions.

All state classes are frozen (immutable); the tracker replaces entries
instead of mutating them.

Licensed under MIT License
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class DeviceState:
    """Last known reachability of a light.

    Attributes:
        reachable: Last observed reachability.
        changed_at: When reachability last flipped. None on first observation
            and after a scene using this light was triggered.
    """

    reachable: bool
    changed_at: datetime | None = None


@dataclass(frozen=True)
class ReachabilityChange:
    """A reachability flip observed in one poll cycle."""

    light_id: str
    name: str
    reachable: bool


@dataclass(frozen=True)
class TrackerUpdate:
    """Result of feeding one light snapshot to the tracker.

    Attributes:
        changes: Lights whose reachability flipped since the last snapshot.
        bootstrapped: Lights seen for the first time (recorded, not changed).
    """

    changes: list[ReachabilityChange] = field(default_factory=list)
    bootstrapped: list[str] = field(default_factory=list)

    @property
    def changed_ids(self) -> frozenset[str]:
        return frozenset(change.light_id for change in self.changes)


@dataclass(frozen=True)
class ActivateScene:
    """Recall ``scene_id`` on ``group_id``."""

    scene_id: str
    group_id: str


@dataclass(frozen=True)
class TurnOffGroup:
    """Switch every light of ``group_id`` off."""

    group_id: str
    name: str = ""


@dataclass(frozen=True)
class Decision:
    """Commands produced by one poll cycle."""

    activations: list[ActivateScene] = field(default_factory=list)
    shutoffs: list[TurnOffGroup] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.activations and not self.shutoffs
