"""
Scheduler configuration.

Configuration comes from environment variables, optionally seeded from a
``.env`` file, or from a plain dict for hosts that store it as JSON.
"""

import ipaddress
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from hue_scheduler.activation import DEFAULT_EXEMPT_MARKER

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 5.0


class ConfigError(ValueError):
    """Configuration is missing or malformed."""


def _require(environ: Mapping[str, str], key: str) -> str:
    value = environ.get(key)
    if value is None or value == "":
        raise ConfigError(f"{key} missing")
    return value


def _parse_ip(value: str, key: str) -> str:
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError as e:
        raise ConfigError(f"failed to parse {key}: {value!r}") from e


def _parse_millis(value: Any, key: str) -> timedelta:
    try:
        millis = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"failed to parse {key}: {value!r}") from e
    if millis < 0:
        raise ConfigError(f"{key} must not be negative: {millis}")
    return timedelta(milliseconds=millis)


def _parse_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"failed to parse {key}: {value!r}") from e


def _parse_timezone(value: str, key: str) -> ZoneInfo:
    try:
        return ZoneInfo(value.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"failed to parse {key}: {value!r}") from e


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Runtime configuration for the poll loop.

    Attributes:
        bridge_ip: Bridge address
        bridge_username: Whitelisted bridge API username
        ping_interval: Sleep between poll cycles
        reachability_window: How long a flip to reachable may trigger a scene
        home_timezone: Timezone used for "now" and solar times
        home_latitude: Latitude for sunrise/sunset
        home_longitude: Longitude for sunrise/sunset
        debug_file: Optional file receiving DEBUG-level log output
        exempt_marker: Name suffix of always-on lights
        request_timeout: Per-request bridge timeout in seconds
    """

    bridge_ip: str
    bridge_username: str
    ping_interval: timedelta
    reachability_window: timedelta
    home_timezone: ZoneInfo
    home_latitude: float
    home_longitude: float
    debug_file: Optional[Path] = None
    exempt_marker: str = DEFAULT_EXEMPT_MARKER
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None,
    ) -> "SchedulerConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (no .env loading)
            dotenv_path: Explicit .env path (default: search from cwd)

        Returns:
            Parsed configuration

        Raises:
            ConfigError: If a required variable is missing or malformed
        """
        if environ is None:
            if not load_dotenv(dotenv_path):
                logger.info("No .env file found")
            environ = os.environ

        debug_file = environ.get("DEBUG_FILE") or None

        config = cls(
            bridge_ip=_parse_ip(_require(environ, "BRIDGE_IP"), "BRIDGE_IP"),
            bridge_username=_require(environ, "BRIDGE_USERNAME"),
            ping_interval=_parse_millis(_require(environ, "PING_INTERVAL"), "PING_INTERVAL"),
            reachability_window=_parse_millis(
                _require(environ, "REACHABILITY_WINDOW"), "REACHABILITY_WINDOW"
            ),
            home_timezone=_parse_timezone(_require(environ, "HOME_TIMEZONE"), "HOME_TIMEZONE"),
            home_latitude=_parse_float(_require(environ, "HOME_LATITUDE"), "HOME_LATITUDE"),
            home_longitude=_parse_float(_require(environ, "HOME_LONGITUDE"), "HOME_LONGITUDE"),
            debug_file=Path(debug_file) if debug_file else None,
            exempt_marker=environ.get("EXEMPT_MARKER") or DEFAULT_EXEMPT_MARKER,
            request_timeout=_parse_float(
                environ.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT), "REQUEST_TIMEOUT"
            ),
        )
        logger.debug(f"Loaded configuration for bridge {config.bridge_ip}")
        return config

    def to_dict(self) -> dict:
        """Serialize to dict."""
        return {
            "bridge_ip": self.bridge_ip,
            "bridge_username": self.bridge_username,
            "ping_interval_ms": int(self.ping_interval / timedelta(milliseconds=1)),
            "reachability_window_ms": int(self.reachability_window / timedelta(milliseconds=1)),
            "home_timezone": self.home_timezone.key,
            "home_latitude": self.home_latitude,
            "home_longitude": self.home_longitude,
            "debug_file": str(self.debug_file) if self.debug_file else None,
            "exempt_marker": self.exempt_marker,
            "request_timeout": self.request_timeout,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchedulerConfig":
        """Deserialize from dict."""
        try:
            return cls(
                bridge_ip=_parse_ip(data["bridge_ip"], "bridge_ip"),
                bridge_username=data["bridge_username"],
                ping_interval=_parse_millis(data["ping_interval_ms"], "ping_interval_ms"),
                reachability_window=_parse_millis(
                    data["reachability_window_ms"], "reachability_window_ms"
                ),
                home_timezone=_parse_timezone(data["home_timezone"], "home_timezone"),
                home_latitude=_parse_float(data["home_latitude"], "home_latitude"),
                home_longitude=_parse_float(data["home_longitude"], "home_longitude"),
                debug_file=Path(data["debug_file"]) if data.get("debug_file") else None,
                exempt_marker=data.get("exempt_marker", DEFAULT_EXEMPT_MARKER),
                request_timeout=_parse_float(
                    data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT), "request_timeout"
                ),
            )
        except KeyError as e:
            raise ConfigError(f"{e.args[0]} missing") from e
