"""Select entity for picking a charging power preset."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.select import SelectEntity
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator

from ..const import SIGNAL_UPDATE
from ..core.state import format_power
from ..timer_logging import get_logger
from .device import build_device_info


class ChargingPowerSelect(SelectEntity):
    """Select among the configured charging power presets (kW).

    Shows no option when the active power is not one of the presets,
    which happens after a free-form edit on the number entity.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_icon = "mdi:lightning-bolt"

    def __init__(self, coordinator: ChargingTimerCoordinator) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_power_preset"
        self._attr_name = "Power Preset"
        self._attr_device_info = build_device_info(entry_id, coordinator.name)
        self._sync_from_settings()

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    def _sync_from_settings(self) -> None:
        """Sync options and selection with the settings."""
        settings = self._coordinator.state.settings
        self._presets = {format_power(p): p for p in settings.available_powers}
        self._attr_options = list(self._presets)
        self._attr_current_option = next(
            (label for label, power in self._presets.items() if power == settings.charging_power),
            None,
        )

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        self._sync_from_settings()
        self.async_write_ha_state()

    async def async_select_option(self, option: str) -> None:
        """Apply the chosen preset as the charging power."""
        self._logger.info("POWER_PRESET_SELECTED", option=option)
        await self._coordinator.async_set_charging_power(self._presets[option])


async def async_setup_selects(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up select entities."""
    async_add_entities([ChargingPowerSelect(coordinator)])
