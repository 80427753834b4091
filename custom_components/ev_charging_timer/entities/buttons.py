"""Button entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.button import ButtonEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator

from ..timer_logging import get_logger
from .device import build_device_info


class StartChargingButton(ButtonEntity):
    """Button to start a charging session now."""

    _attr_has_entity_name = True
    _attr_icon = "mdi:play"

    def __init__(self, coordinator: ChargingTimerCoordinator) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_start"
        self._attr_name = "Start Charging"
        self._attr_device_info = build_device_info(entry_id, coordinator.name)

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("START_BUTTON_PRESSED")
        await self._coordinator.async_start()


class StopChargingButton(ButtonEntity):
    """Button to stop the running session."""

    _attr_has_entity_name = True
    _attr_icon = "mdi:stop"

    def __init__(self, coordinator: ChargingTimerCoordinator) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_stop"
        self._attr_name = "Stop Charging"
        self._attr_device_info = build_device_info(entry_id, coordinator.name)

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("STOP_BUTTON_PRESSED")
        await self._coordinator.async_stop()


async def async_setup_buttons(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up button entities."""
    async_add_entities([
        StartChargingButton(coordinator),
        StopChargingButton(coordinator),
    ])
