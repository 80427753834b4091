"""The EV Charging Timer integration.

Estimates how long an EV takes to charge from a start to a max percent
and tracks a running session's projected percent and ETA:
- Pure estimation logic (domain/*.py)
- Immutable state records and persistence (core/*.py)
- Thin orchestrator owning clock and ticker (coordinator.py)
- Factory-based entities (entities/*.py)
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import ChargingTimerCoordinator
from .core.store import TimerStore
from .services import async_register_services, async_unregister_services

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
    Platform.BUTTON,
    Platform.NUMBER,
    Platform.SELECT,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up EV Charging Timer from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    coordinator = ChargingTimerCoordinator(hass, entry)
    await coordinator.async_init()

    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    async_register_services(hass)
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    _LOGGER.info("EV Charging Timer '%s' initialized", entry.title)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: ChargingTimerCoordinator = hass.data[DOMAIN].pop(entry.entry_id)
        coordinator.async_unload()

        if not hass.data[DOMAIN]:
            async_unregister_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Delete persisted settings and session when the entry is removed."""
    await TimerStore(hass, entry.entry_id).async_remove()


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply options flow changes without reloading."""
    coordinator: ChargingTimerCoordinator = hass.data[DOMAIN][entry.entry_id]
    await coordinator.async_apply_options(dict(entry.options))
