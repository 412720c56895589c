"""
Scheduler events and a synchronous bus to observe them.

Each poll cycle publishes what it saw and what it did: reachability flips,
recalled scenes, groups switched off and aborted cycles. Hosts subscribe to
these instead of scraping log lines.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Optional, Dict, Any, Callable, List
import logging

logger = logging.getLogger(__name__)

# Event types published by the scheduler
LIGHT_REACHABILITY_CHANGED = "light.reachability_changed"
SCENE_ACTIVATED = "scene.activated"
GROUP_TURNED_OFF = "group.turned_off"
CYCLE_ABORTED = "cycle.aborted"

EVENT_TYPES = frozenset(
    {LIGHT_REACHABILITY_CHANGED, SCENE_ACTIVATED, GROUP_TURNED_OFF, CYCLE_ABORTED}
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Event:
    """
    Something the scheduler observed or did.

    Attributes:
        type: One of EVENT_TYPES
        source: Publishing component ("tracker" or "scheduler")
        entity_id: Bridge ID of the light, scene or group involved, if any
        payload: Type-specific data
        timestamp: Cycle time the event belongs to
    """

    type: str
    source: str
    entity_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def domain(self) -> str:
        """Leading part of the type ("light", "scene", "group", "cycle")."""
        return self.type.partition(".")[0]


class EventFilter:
    """
    Selects events for a subscription.

    ``event_type`` may name a single type ("scene.activated") or a whole
    domain with a wildcard ("group.*").
    """

    def __init__(
        self,
        event_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        self.event_type = event_type
        self.entity_id = entity_id

    def matches(self, event: Event) -> bool:
        if self.event_type:
            if self.event_type.endswith(".*"):
                if event.domain != self.event_type[:-2]:
                    return False
            elif event.type != self.event_type:
                return False

        if self.entity_id and event.entity_id != self.entity_id:
            return False

        return True

    def __repr__(self) -> str:
        return f"EventFilter(event_type={self.event_type!r}, entity_id={self.entity_id!r})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Synchronous dispatcher for scheduler events.

    A failing handler is logged and skipped; it never aborts the poll cycle
    that published the event.
    """

    def __init__(self) -> None:
        self._subscriptions: List[tuple[EventFilter, EventHandler]] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        handler: EventHandler,
        event_filter: Optional[EventFilter] = None,
    ) -> None:
        """
        Register a handler.

        Args:
            handler: Callable receiving each matching Event
            event_filter: Selection of events (None = everything)
        """
        event_filter = event_filter or EventFilter()
        self._subscriptions.append((event_filter, handler))
        logger.debug(f"Subscribed {_name_of(handler)} with {event_filter}")

    def publish(self, event: Event) -> int:
        """
        Deliver an event to every matching handler, in subscription order.

        Returns:
            Number of handlers that ran without raising
        """
        if event.type not in EVENT_TYPES:
            logger.warning(f"Publishing unknown event type {event.type!r}")

        delivered = 0
        for event_filter, handler in self._subscriptions:
            if not event_filter.matches(event):
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in event handler {_name_of(handler)} for {event.type}: {e}",
                    exc_info=True,
                )
                continue
            delivered += 1

        logger.debug(f"Published {event.type} ({event.entity_id}) to {delivered} handler(s)")
        return delivered

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove every subscription of ``handler``."""
        self._subscriptions = [(f, h) for f, h in self._subscriptions if h != handler]
        logger.debug(f"Unsubscribed {_name_of(handler)}")


def _name_of(handler: EventHandler) -> str:
    return getattr(handler, "__name__", repr(handler))
