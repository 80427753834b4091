"""Binary sensor entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator
    from ..core.state import TimerState

from ..const import SIGNAL_UPDATE
from .device import build_device_info


@dataclass
class BinarySensorDefinition:
    """Definition for a binary sensor."""

    key: str
    name: str
    value_fn: Callable[[TimerState], bool]
    device_class: BinarySensorDeviceClass | None = None
    icon_on: str | None = None
    icon_off: str | None = None


BINARY_SENSOR_DEFINITIONS: list[BinarySensorDefinition] = [
    BinarySensorDefinition(
        key="session_running",
        name="Charging",
        value_fn=lambda s: s.session.is_running,
        device_class=BinarySensorDeviceClass.BATTERY_CHARGING,
    ),
    BinarySensorDefinition(
        key="charge_complete",
        name="Charge Complete",
        value_fn=lambda s: s.status.is_complete,
        icon_on="mdi:battery-check",
        icon_off="mdi:battery-clock-outline",
    ),
]


class ChargingTimerBinarySensor(BinarySensorEntity):
    """Generic timer binary sensor."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        coordinator: ChargingTimerCoordinator,
        definition: BinarySensorDefinition,
    ) -> None:
        """Initialize."""
        self._state = coordinator.state
        self._definition = definition
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_device_class = definition.device_class
        self._attr_device_info = build_device_info(entry_id, coordinator.name)

    @property
    def icon(self) -> str | None:
        """Return icon based on state."""
        if self._definition.icon_on and self._definition.icon_off:
            return self._definition.icon_on if self.is_on else self._definition.icon_off
        return None

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        self._attr_is_on = self._definition.value_fn(self._state)
        self.async_write_ha_state()


async def async_setup_binary_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up binary sensor entities."""
    async_add_entities(
        ChargingTimerBinarySensor(coordinator, definition)
        for definition in BINARY_SENSOR_DEFINITIONS
    )
