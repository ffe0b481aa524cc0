"""EventBus - tells the HUD, paper doll and meter what a committed gear mutation changed

- Payloads carry ids (character_id, item_id, container_id), never live objects
- One mutation is one chain: listeners may react by emitting, up to MAX_DEPTH
- Within a chain a source emits each event type at most once
"""

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Set

from gearmanager.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5


@dataclass
class GameEvent:
    """One notification.

    Args:
        event_type: an EventTypes constant
        data: ids describing what changed
        source: emitting component, "gear_service" for mutations
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """Synchronous, in-process.

    Usage:
        bus = EventBus()
        bus.subscribe(EventTypes.ITEM_MOVED, hud.refresh)
        with bus.chain():
            bus.emit(GameEvent(EventTypes.ITEM_MOVED, {"item_id": "item-rifle"}, "gear_service"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._depth = 0
        self._emitted: Set[tuple[str, str]] = set()  # (source, event_type)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("subscribe %s -> %s", event_type, handler.__qualname__)

    def emit(self, event: GameEvent) -> None:
        """Run the handlers for `event.event_type` in subscription order.

        The event is dropped with a warning past MAX_DEPTH or when its
        (source, type) pair already fired in this chain. A failing handler is
        logged and the rest still run.
        """
        key = (event.source, event.event_type)
        if self._depth >= MAX_DEPTH:
            logger.warning("depth %d reached, dropped %s:%s", MAX_DEPTH, *key)
            return
        if key in self._emitted:
            logger.warning("duplicate in chain, dropped %s:%s", *key)
            return
        self._emitted.add(key)
        event._depth = self._depth

        handlers = self._handlers.get(event.event_type)
        if not handlers:
            return
        logger.debug(
            "emit %s from %s (depth=%d, handlers=%d)",
            event.event_type,
            event.source,
            self._depth,
            len(handlers),
        )

        self._depth += 1
        try:
            for handler in list(handlers):
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "handler %s failed on %s", handler.__qualname__, event.event_type
                    )
        finally:
            self._depth -= 1

    def reset_chain(self) -> None:
        self._emitted.clear()
        self._depth = 0

    @contextmanager
    def chain(self) -> Iterator["EventBus"]:
        """Scope of one mutation's notifications. Resets even if a listener raises."""
        try:
            yield self
        finally:
            self.reset_chain()

    def clear(self) -> None:
        """Drop every subscription (shutdown)."""
        self._handlers.clear()
        self.reset_chain()
