"""
HueScheduler - the single-threaded poll loop.

Each cycle takes a bridge snapshot, updates reachability, and, when any
light flipped, recalls the scheduled scenes of freshly powered lights and
switches off groups whose wall switch was turned off.

Failure model:
- A failed snapshot fetch aborts the rest of the cycle only.
- A failed command is logged; the remaining commands still run.
- Nothing escapes run_forever(); the loop keeps polling.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo, UTC
from functools import partial
from typing import Callable, List, Optional

from hue_scheduler.activation import (
    ActivationDecider,
    Decision,
    DEFAULT_EXEMPT_MARKER,
    ReachabilityTracker,
    TrackerUpdate,
)
from hue_scheduler.adapter import BridgeAdapter, BridgeError
from hue_scheduler.config import SchedulerConfig
from hue_scheduler.core.bus import (
    CYCLE_ABORTED,
    GROUP_TURNED_OFF,
    LIGHT_REACHABILITY_CHANGED,
    SCENE_ACTIVATED,
    Event,
    EventBus,
)
from hue_scheduler.hue import HueBridgeAdapter
from hue_scheduler.sun import minute_of_day, sunrise_sunset
from hue_scheduler.timerange import TimeRangeParser

logger = logging.getLogger(__name__)

SolarProvider = Callable[[date], Optional[tuple[int, int]]]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class CycleResult:
    """Outcome of one poll cycle."""

    aborted: bool = False
    reason: Optional[str] = None
    update: Optional[TrackerUpdate] = None
    decision: Optional[Decision] = None
    failed_commands: List[str] = field(default_factory=list)


class HueScheduler:
    """
    Drives the poll loop.

    Owns the reachability tracker; nothing else mutates it.
    """

    def __init__(
        self,
        bridge: BridgeAdapter,
        reachability_window: timedelta,
        home_timezone: tzinfo,
        solar: SolarProvider,
        ping_interval: timedelta = timedelta(seconds=1),
        exempt_marker: str = DEFAULT_EXEMPT_MARKER,
        bus: Optional[EventBus] = None,
        clock: Clock = _utc_now,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            bridge: Bridge transport
            reachability_window: How long a flip to reachable may trigger a scene
            home_timezone: Timezone used for minute-of-day
            solar: Returns (sunrise, sunset) minutes for a local date, or None
            ping_interval: Sleep between cycles
            exempt_marker: Name suffix of always-on lights
            bus: Optional EventBus receiving cycle events
            clock: Source of the current time (timezone-aware)
        """
        self.bridge = bridge
        self.home_timezone = home_timezone
        self.ping_interval = ping_interval
        self.bus = bus if bus is not None else EventBus()
        self.tracker = ReachabilityTracker()
        self.decider = ActivationDecider(self.tracker, reachability_window, exempt_marker)
        self._solar = solar
        self._clock = clock

    @classmethod
    def from_config(
        cls, config: SchedulerConfig, bus: Optional[EventBus] = None
    ) -> "HueScheduler":
        """Build a scheduler talking to a real Hue bridge."""
        bridge = HueBridgeAdapter(
            config.bridge_ip,
            config.bridge_username,
            timeout=config.request_timeout,
        )
        solar = partial(
            sunrise_sunset,
            config.home_latitude,
            config.home_longitude,
            tz=config.home_timezone,
        )
        return cls(
            bridge=bridge,
            reachability_window=config.reachability_window,
            home_timezone=config.home_timezone,
            solar=solar,
            ping_interval=config.ping_interval,
            exempt_marker=config.exempt_marker,
            bus=bus,
        )

    def run_forever(
        self,
        max_cycles: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Poll until interrupted.

        Args:
            max_cycles: Stop after this many cycles (None = forever)
            sleep: Sleep function, replaceable in tests
        """
        logger.info(f"Starting poll loop (interval={self.ping_interval})")
        cycles = 0

        try:
            while max_cycles is None or cycles < max_cycles:
                sleep(self.ping_interval.total_seconds())
                cycles += 1
                try:
                    self.run_cycle()
                except Exception as e:
                    logger.error(f"Unexpected error in poll cycle: {e}", exc_info=True)
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping poll loop")

    def run_cycle(self, now: Optional[datetime] = None) -> CycleResult:
        """
        Run a single poll cycle.

        Args:
            now: Current time (timezone-aware); defaults to the clock

        Returns:
            CycleResult describing what happened
        """
        now = now or self._clock()
        local_now = now.astimezone(self.home_timezone)

        try:
            lights = self.bridge.get_lights()
        except BridgeError as e:
            return self._abort("Failed to retrieve lights", e)

        update = self.decider.observe(lights, now)
        for change in update.changes:
            self.bus.publish(
                Event(
                    type=LIGHT_REACHABILITY_CHANGED,
                    source="tracker",
                    entity_id=change.light_id,
                    payload={"name": change.name, "reachable": change.reachable},
                    timestamp=now,
                )
            )

        if not update.changes:
            return CycleResult(update=update)

        try:
            scenes = self.bridge.get_scenes()
        except BridgeError as e:
            return self._abort("Failed to retrieve scenes", e, update)

        try:
            groups = self.bridge.get_groups()
        except BridgeError as e:
            return self._abort("Failed to retrieve groups", e, update)

        parser = TimeRangeParser(self._variables_for(local_now.date()))

        decision = self.decider.decide(
            lights,
            scenes,
            groups,
            update.changed_ids,
            parser,
            now,
            minute_of_day(local_now),
        )

        result = CycleResult(update=update, decision=decision)
        self._execute(decision, result, now)
        return result

    def _variables_for(self, day: date) -> dict[str, int]:
        solar = self._solar(day)
        if solar is None:
            logger.warning("Failed to retrieve sunrise/sunset, solar windows disabled this cycle")
            return {}

        sunrise, sunset = solar
        return {"sunrise": sunrise, "sunset": sunset}

    def _execute(self, decision: Decision, result: CycleResult, now: datetime) -> None:
        for activation in decision.activations:
            try:
                self.bridge.activate_scene(activation.group_id, activation.scene_id)
            except BridgeError as e:
                logger.error(f"Failed to set scene: {e}")
                result.failed_commands.append(f"activate_scene:{activation.scene_id}")
                continue

            self.bus.publish(
                Event(
                    type=SCENE_ACTIVATED,
                    source="scheduler",
                    entity_id=activation.scene_id,
                    payload={"group_id": activation.group_id},
                    timestamp=now,
                )
            )

        for shutoff in decision.shutoffs:
            try:
                self.bridge.set_group_power(shutoff.group_id, False)
            except BridgeError as e:
                logger.error(f"Failed to turn off attached lights: {e}")
                result.failed_commands.append(f"set_group_power:{shutoff.group_id}")
                continue

            self.bus.publish(
                Event(
                    type=GROUP_TURNED_OFF,
                    source="scheduler",
                    entity_id=shutoff.group_id,
                    payload={"name": shutoff.name},
                    timestamp=now,
                )
            )

    def _abort(
        self,
        reason: str,
        error: BridgeError,
        update: Optional[TrackerUpdate] = None,
    ) -> CycleResult:
        logger.error(f"{reason}: {error}")
        self.bus.publish(
            Event(type=CYCLE_ABORTED, source="scheduler", payload={"reason": reason})
        )
        return CycleResult(aborted=True, reason=reason, update=update)
