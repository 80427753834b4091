"""Switch entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.switch import SwitchEntity
from homeassistant.const import EntityCategory

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator

from ..timer_logging import get_logger
from .device import build_device_info


class DebugLoggingSwitch(SwitchEntity):
    """Switch to control the JSON debug log file."""

    _attr_has_entity_name = True
    _attr_icon = "mdi:bug"
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, coordinator: ChargingTimerCoordinator) -> None:
        """Initialize."""
        self._logger = get_logger()
        self._log_size_kb = 0.0
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_debug_logging"
        self._attr_name = "Debug Logging"
        self._attr_is_on = self._logger.file_logging_enabled
        self._attr_device_info = build_device_info(entry_id, coordinator.name)

    async def async_turn_on(self, **kwargs) -> None:
        """Turn on debug logging."""
        await self.hass.async_add_executor_job(self._logger.set_file_logging, True)
        self._attr_is_on = True
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs) -> None:
        """Turn off debug logging.

        Stopping waits for the writer thread to flush, so it runs off the loop.
        """
        await self.hass.async_add_executor_job(self._logger.set_file_logging, False)
        self._attr_is_on = False
        self.async_write_ha_state()

    async def async_update(self) -> None:
        """Refresh the log size off the event loop."""
        self._attr_is_on = self._logger.file_logging_enabled
        self._log_size_kb = await self.hass.async_add_executor_job(
            self._logger.get_log_size_kb
        )

    @property
    def extra_state_attributes(self) -> dict:
        """Return extra attributes."""
        return {
            "log_file": str(self._logger.log_file),
            "log_size_kb": self._log_size_kb,
        }


async def async_setup_switches(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switch entities."""
    async_add_entities([DebugLoggingSwitch(coordinator)])
