"""
Bridge adapter interface for the scheduler.

The adapter provides an abstraction layer between the scheduling core and
the lighting bridge. The core only ever sees plain snapshots (Light, Scene,
Group) and only ever asks for two kinds of commands: recall a scene on a
group, or switch a group's power.

Design Principle:
    Transport details (URLs, auth, retries, payload shapes) stay in the
    concrete adapter. Any failure is raised as BridgeError so the poll loop
    can abort the current cycle and try again on the next one.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hue_scheduler.core.models import Group, Light, Scene


class BridgeError(Exception):
    """A bridge call failed (network, HTTP status, or bridge-reported error)."""


class BridgeAdapter(ABC):
    """
    Abstract interface for bridge operations.

    This interface is intentionally minimal:
    - get_lights / get_scenes / get_groups: Snapshots for one poll cycle
    - activate_scene: Recall a scene on its group
    - set_group_power: Switch a whole group on or off
    """

    @abstractmethod
    def get_lights(self) -> List[Light]:
        """
        Get all lights known to the bridge.

        Returns:
            Light snapshot

        Raises:
            BridgeError: If the bridge could not be queried
        """
        pass

    @abstractmethod
    def get_scenes(self) -> List[Scene]:
        """
        Get all scenes stored on the bridge.

        Raises:
            BridgeError: If the bridge could not be queried
        """
        pass

    @abstractmethod
    def get_groups(self) -> List[Group]:
        """
        Get all groups defined on the bridge.

        Raises:
            BridgeError: If the bridge could not be queried
        """
        pass

    @abstractmethod
    def activate_scene(self, group_id: str, scene_id: str) -> None:
        """
        Recall a scene on a group.

        Args:
            group_id: Group to address
            scene_id: Scene to recall

        Raises:
            BridgeError: If the command failed
        """
        pass

    @abstractmethod
    def set_group_power(self, group_id: str, on: bool) -> None:
        """
        Switch every light of a group on or off.

        Raises:
            BridgeError: If the command failed
        """
        pass


class MockBridgeAdapter(BridgeAdapter):
    """
    Mock adapter for testing.

    Holds snapshots in memory, records commands, and can be told to fail
    individual calls.
    """

    def __init__(self) -> None:
        self._lights: dict[str, Light] = {}
        self._scenes: List[Scene] = []
        self._groups: List[Group] = []
        self._commands: list[tuple[str, str, Optional[str | bool]]] = []
        self._failing: set[str] = set()

    def set_lights(self, lights: List[Light]) -> None:
        """Replace the light snapshot."""
        self._lights = {light.id: light for light in lights}

    def set_reachable(self, light_id: str, reachable: bool) -> None:
        """Flip one light's reachability."""
        light = self._lights[light_id]
        self._lights[light_id] = Light(light.id, light.name, reachable, light.on)

    def set_scenes(self, scenes: List[Scene]) -> None:
        self._scenes = list(scenes)

    def set_groups(self, groups: List[Group]) -> None:
        self._groups = list(groups)

    def fail(self, *operations: str) -> None:
        """Make the named operations (e.g. "get_scenes") raise BridgeError."""
        self._failing.update(operations)

    def recover(self) -> None:
        """Stop failing any operation."""
        self._failing.clear()

    def get_commands(self) -> list[tuple[str, str, Optional[str | bool]]]:
        """Get recorded commands as (operation, group_id, argument)."""
        return self._commands.copy()

    def clear_commands(self) -> None:
        self._commands.clear()

    def _check(self, operation: str) -> None:
        if operation in self._failing:
            raise BridgeError(f"{operation} failed")

    # BridgeAdapter implementation

    def get_lights(self) -> List[Light]:
        self._check("get_lights")
        return list(self._lights.values())

    def get_scenes(self) -> List[Scene]:
        self._check("get_scenes")
        return list(self._scenes)

    def get_groups(self) -> List[Group]:
        self._check("get_groups")
        return list(self._groups)

    def activate_scene(self, group_id: str, scene_id: str) -> None:
        self._check("activate_scene")
        self._commands.append(("activate_scene", group_id, scene_id))

    def set_group_power(self, group_id: str, on: bool) -> None:
        self._check("set_group_power")
        self._commands.append(("set_group_power", group_id, on))
