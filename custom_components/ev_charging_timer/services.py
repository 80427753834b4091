"""Service handlers for EV Charging Timer.

Services are registered once per HA instance and act on every loaded
timer, or only on the one named by ``config_entry_id``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import voluptuous as vol

from homeassistant.exceptions import HomeAssistantError
import homeassistant.helpers.config_validation as cv

from .const import (
    ATTR_POWER,
    DOMAIN,
    MAX_CHARGING_POWER,
    SERVICE_ADD_POWER_PRESET,
    SERVICE_REFRESH,
    SERVICE_REMOVE_POWER_PRESET,
    SERVICE_START_SESSION,
    SERVICE_STOP_SESSION,
)
from .timer_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant, ServiceCall

    from .coordinator import ChargingTimerCoordinator

ATTR_CONFIG_ENTRY_ID = "config_entry_id"

BASE_SCHEMA = vol.Schema({vol.Optional(ATTR_CONFIG_ENTRY_ID): cv.string})

POWER_SCHEMA = BASE_SCHEMA.extend(
    {
        vol.Required(ATTR_POWER): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False, max=MAX_CHARGING_POWER)
        ),
    }
)

ALL_SERVICES = (
    SERVICE_START_SESSION,
    SERVICE_STOP_SESSION,
    SERVICE_REFRESH,
    SERVICE_ADD_POWER_PRESET,
    SERVICE_REMOVE_POWER_PRESET,
)


def _target_coordinators(
    hass: HomeAssistant, call: ServiceCall
) -> list[ChargingTimerCoordinator]:
    """Resolve the coordinators a service call applies to."""
    coordinators: dict[str, ChargingTimerCoordinator] = hass.data.get(DOMAIN, {})
    entry_id = call.data.get(ATTR_CONFIG_ENTRY_ID)
    if entry_id is None:
        return list(coordinators.values())
    if entry_id not in coordinators:
        raise HomeAssistantError(f"No EV charging timer with config entry {entry_id}")
    return [coordinators[entry_id]]


def async_register_services(hass: HomeAssistant) -> None:
    """Register integration services (idempotent)."""
    if hass.services.has_service(DOMAIN, SERVICE_START_SESSION):
        return

    logger = get_logger()

    async def handle_start(call: ServiceCall) -> None:
        for coordinator in _target_coordinators(hass, call):
            await coordinator.async_start()

    async def handle_stop(call: ServiceCall) -> None:
        for coordinator in _target_coordinators(hass, call):
            await coordinator.async_stop()

    async def handle_refresh(call: ServiceCall) -> None:
        for coordinator in _target_coordinators(hass, call):
            await coordinator.async_refresh()

    async def handle_add_power(call: ServiceCall) -> None:
        for coordinator in _target_coordinators(hass, call):
            await coordinator.async_add_power_preset(call.data[ATTR_POWER])

    async def handle_remove_power(call: ServiceCall) -> None:
        for coordinator in _target_coordinators(hass, call):
            await coordinator.async_remove_power_preset(call.data[ATTR_POWER])

    hass.services.async_register(DOMAIN, SERVICE_START_SESSION, handle_start, schema=BASE_SCHEMA)
    hass.services.async_register(DOMAIN, SERVICE_STOP_SESSION, handle_stop, schema=BASE_SCHEMA)
    hass.services.async_register(DOMAIN, SERVICE_REFRESH, handle_refresh, schema=BASE_SCHEMA)
    hass.services.async_register(
        DOMAIN, SERVICE_ADD_POWER_PRESET, handle_add_power, schema=POWER_SCHEMA
    )
    hass.services.async_register(
        DOMAIN, SERVICE_REMOVE_POWER_PRESET, handle_remove_power, schema=POWER_SCHEMA
    )
    logger.debug("SERVICES_REGISTERED")


def async_unregister_services(hass: HomeAssistant) -> None:
    """Remove integration services."""
    for service in ALL_SERVICES:
        hass.services.async_remove(DOMAIN, service)
    get_logger().debug("SERVICES_REMOVED")
