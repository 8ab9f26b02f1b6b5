"""Game events for the event system."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    # Game flow events
    GAME_STARTED = auto()
    GAME_ENDED = auto()

    # Battle events
    BATTLE_STARTED = auto()
    CARDS_COMMITTED = auto()
    WAR_DECLARED = auto()
    ROUND_WON = auto()
    WAR_CUT_SHORT = auto()

    # Error events
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are how the engine tells the presentation layer what happened
    inside a battle, beyond the final BattleResult.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter for game events.

    Handlers subscribe to one event type, or to None for every event.
    History is bounded by max_history (None keeps everything).
    """

    def __init__(self, max_history: int | None = 1000) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []
        self._max_history = max_history

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def emit(self, event: GameEvent) -> None:
        """Record an event and deliver it to type-specific, then catch-all handlers."""
        self._event_history.append(event)
        if self._max_history is not None and len(self._event_history) > self._max_history:
            del self._event_history[: len(self._event_history) - self._max_history]

        logger.debug("event %s", event)

        for handler in self._handlers.get(event.event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def events_of(self, event_type: EventType) -> list[GameEvent]:
        """Return recorded events of a single type."""
        return [e for e in self._event_history if e.event_type == event_type]

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
