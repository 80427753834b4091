"""Event Bus for component communication.

Every event is logged and forwarded to the HA dispatcher, which is
how entities refresh. Entities need nothing more than that signal.

on/off is the observer channel for code that needs the event payload
(e.g. the start time or status of a completed session) rather than a
bare refresh. The integration itself registers no handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.helpers.dispatcher import async_dispatcher_send

from ..const import SIGNAL_UPDATE
from ..timer_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class TimerEvent(str, Enum):
    """Event types for the timer."""

    # Settings
    SETTINGS_UPDATED = "ev_charging_timer.settings_updated"
    POWER_PRESETS_UPDATED = "ev_charging_timer.power_presets_updated"

    # Session lifecycle
    SESSION_STARTED = "ev_charging_timer.session_started"
    SESSION_STOPPED = "ev_charging_timer.session_stopped"
    SESSION_COMPLETED = "ev_charging_timer.session_completed"

    # Periodic recompute
    STATUS_UPDATED = "ev_charging_timer.status_updated"


@dataclass
class EventData:
    """Container for event data."""

    event: TimerEvent
    timestamp: datetime
    data: dict[str, Any]


EventHandler = Callable[[EventData], Awaitable[None]]


class TimerEventBus:
    """Central event bus for the integration."""

    def __init__(self, hass: HomeAssistant, signal: str = SIGNAL_UPDATE) -> None:
        """Initialize the event bus.

        Args:
            hass: Home Assistant instance
            signal: Dispatcher signal entities listen on
        """
        self.hass = hass
        self.signal = signal
        self._logger = get_logger()
        self._handlers: dict[TimerEvent, list[EventHandler]] = {}

    async def emit(self, event: TimerEvent, **data: Any) -> None:
        """Emit an event to handlers, then to entities."""
        event_data = EventData(event=event, timestamp=datetime.now(), data=data)

        self._logger.debug(f"EVENT_{event.name}", **data)

        for handler in list(self._handlers.get(event, [])):
            try:
                await handler(event_data)
            except Exception as ex:  # noqa: BLE001
                self._logger.error(
                    "EVENT_HANDLER_ERROR",
                    failed_event=event.name,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(ex),
                )

        # Every timer event changes something an entity shows
        async_dispatcher_send(self.hass, self.signal)

    def on(self, event: TimerEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: TimerEvent, handler: EventHandler) -> None:
        """Unregister an event handler."""
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)
