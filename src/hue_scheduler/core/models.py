"""
Bridge snapshot models.

A poll cycle works on plain snapshots of the bridge's lights, scenes and
groups. They are rebuilt every cycle and never mutated.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Light:
    """
    A light as reported by the bridge.

    Attributes:
        id: Bridge light ID
        name: Display name (may carry the exempt marker, e.g. "Lamp (att)")
        reachable: Whether the bridge can currently talk to the light
        on: Last reported power state
    """

    id: str
    name: str
    reachable: bool
    on: bool = False


@dataclass(frozen=True)
class Scene:
    """
    A scene stored on the bridge.

    The time window lives in the name, e.g. "Evening (18:23h-sunset)".

    Attributes:
        id: Bridge scene ID
        name: Display name carrying the time window(s)
        group_id: Group the scene is recalled on (None for light scenes)
        light_ids: Lights the scene controls
    """

    id: str
    name: str
    group_id: str | None = None
    light_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Group:
    """A named set of lights addressable with one command."""

    id: str
    name: str
    light_ids: tuple[str, ...] = field(default_factory=tuple)
