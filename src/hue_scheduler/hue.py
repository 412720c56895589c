"""
Philips Hue bridge adapter (REST API v1).

Translates the bridge's JSON resources into snapshot models and sends
group actions. Every failure surfaces as BridgeError.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from hue_scheduler.adapter import BridgeAdapter, BridgeError
from hue_scheduler.core.models import Group, Light, Scene

logger = logging.getLogger(__name__)


class HueBridgeAdapter(BridgeAdapter):
    """
    Hue bridge over HTTP.

    Resources are read from ``http://<bridge>/api/<username>/<resource>``;
    commands go to ``.../groups/<id>/action``.
    """

    def __init__(
        self,
        bridge_ip: str,
        username: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            bridge_ip: Bridge address
            username: Whitelisted API username
            timeout: Per-request timeout in seconds
            session: Optional requests session (a new one is created if None)
        """
        self._base_url = f"http://{bridge_ip}/api/{username}"
        self._timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}/{path}"
        try:
            response = self._session.request(method, url, json=payload, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise BridgeError(f"{method} /{path} failed: {e}") from e
        except ValueError as e:
            raise BridgeError(f"{method} /{path} returned invalid JSON: {e}") from e

        # The bridge reports errors with HTTP 200 and a list of error objects
        if isinstance(data, list):
            errors = [item["error"] for item in data if isinstance(item, dict) and "error" in item]
            if errors:
                descriptions = ", ".join(str(error.get("description", error)) for error in errors)
                raise BridgeError(f"{method} /{path} rejected by bridge: {descriptions}")

        return data

    def _get_resource(self, resource: str) -> Dict[str, Any]:
        data = self._request("GET", resource)
        if not isinstance(data, dict):
            raise BridgeError(f"Unexpected response for /{resource}: {type(data).__name__}")
        return data

    def get_lights(self) -> List[Light]:
        lights = []
        for light_id, raw in self._get_resource("lights").items():
            state = raw.get("state", {})
            lights.append(
                Light(
                    id=light_id,
                    name=raw.get("name", ""),
                    reachable=bool(state.get("reachable", False)),
                    on=bool(state.get("on", False)),
                )
            )
        logger.debug(f"Fetched {len(lights)} lights")
        return lights

    def get_scenes(self) -> List[Scene]:
        scenes = []
        for scene_id, raw in self._get_resource("scenes").items():
            scenes.append(
                Scene(
                    id=scene_id,
                    name=raw.get("name", ""),
                    group_id=raw.get("group"),
                    light_ids=tuple(raw.get("lights") or ()),
                )
            )
        logger.debug(f"Fetched {len(scenes)} scenes")
        return scenes

    def get_groups(self) -> List[Group]:
        groups = []
        for group_id, raw in self._get_resource("groups").items():
            groups.append(
                Group(
                    id=group_id,
                    name=raw.get("name", ""),
                    light_ids=tuple(raw.get("lights") or ()),
                )
            )
        logger.debug(f"Fetched {len(groups)} groups")
        return groups

    def activate_scene(self, group_id: str, scene_id: str) -> None:
        self._request("PUT", f"groups/{group_id}/action", {"scene": scene_id})

    def set_group_power(self, group_id: str, on: bool) -> None:
        self._request("PUT", f"groups/{group_id}/action", {"on": on})
