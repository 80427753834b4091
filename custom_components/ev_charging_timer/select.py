"""Select platform for EV Charging Timer."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import ChargingTimerCoordinator
from .entities.selects import async_setup_selects


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up select entities."""
    coordinator: ChargingTimerCoordinator = hass.data[DOMAIN][entry.entry_id]
    await async_setup_selects(hass, entry, coordinator, async_add_entities)
