"""Test integration services."""
import pytest
import voluptuous as vol
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.ev_charging_timer.const import (
    DOMAIN,
    SERVICE_ADD_POWER_PRESET,
    SERVICE_REFRESH,
    SERVICE_REMOVE_POWER_PRESET,
    SERVICE_START_SESSION,
    SERVICE_STOP_SESSION,
)
from custom_components.ev_charging_timer.exceptions import InvalidSettingsError


@pytest.mark.asyncio
async def test_services_registered(hass: HomeAssistant, setup_integration):
    """Test all services are registered."""
    for service in (
        SERVICE_START_SESSION,
        SERVICE_STOP_SESSION,
        SERVICE_REFRESH,
        SERVICE_ADD_POWER_PRESET,
        SERVICE_REMOVE_POWER_PRESET,
    ):
        assert hass.services.has_service(DOMAIN, service), f"{service} missing"


@pytest.mark.asyncio
async def test_start_stop_services(hass: HomeAssistant, coordinator, clock):
    """Start and stop act on the timer."""
    await hass.services.async_call(DOMAIN, SERVICE_START_SESSION, {}, blocking=True)
    assert coordinator.state.session.is_running
    assert coordinator.state.session.start_time == clock.now

    await hass.services.async_call(DOMAIN, SERVICE_STOP_SESSION, {}, blocking=True)
    assert not coordinator.state.session.is_running


@pytest.mark.asyncio
async def test_refresh_service(hass: HomeAssistant, coordinator, clock):
    """Refresh recomputes with the current time."""
    await coordinator.async_start()
    clock.advance(60)

    await hass.services.async_call(
        DOMAIN,
        SERVICE_REFRESH,
        {"config_entry_id": coordinator.entry.entry_id},
        blocking=True,
    )

    assert coordinator.state.status.calculation.time_remaining_minutes == 120


@pytest.mark.asyncio
async def test_power_preset_services(hass: HomeAssistant, coordinator):
    """Presets can be added and removed by service."""
    await hass.services.async_call(
        DOMAIN, SERVICE_ADD_POWER_PRESET, {"power": "4.6"}, blocking=True
    )
    assert 4.6 in coordinator.state.settings.available_powers

    await hass.services.async_call(
        DOMAIN, SERVICE_REMOVE_POWER_PRESET, {"power": 22}, blocking=True
    )
    assert coordinator.state.settings.available_powers == (3.6, 4.6, 7.0, 11.0)


@pytest.mark.asyncio
async def test_power_preset_schema(hass: HomeAssistant, setup_integration):
    """Non-positive powers are rejected by the schema."""
    with pytest.raises(vol.Invalid):
        await hass.services.async_call(
            DOMAIN, SERVICE_ADD_POWER_PRESET, {"power": 0}, blocking=True
        )


@pytest.mark.asyncio
async def test_remove_last_preset_fails(hass: HomeAssistant, coordinator):
    """Removing the last preset surfaces the validation error."""
    for power in (3.6, 7.0, 11.0):
        await coordinator.async_remove_power_preset(power)

    with pytest.raises(InvalidSettingsError):
        await hass.services.async_call(
            DOMAIN, SERVICE_REMOVE_POWER_PRESET, {"power": 22}, blocking=True
        )


@pytest.mark.asyncio
async def test_unknown_entry(hass: HomeAssistant, setup_integration):
    """An unknown config entry id is an error."""
    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            DOMAIN,
            SERVICE_START_SESSION,
            {"config_entry_id": "does_not_exist"},
            blocking=True,
        )


@pytest.mark.asyncio
async def test_target_single_entry(hass: HomeAssistant, coordinator, entry_data):
    """config_entry_id limits the call to one timer."""
    other = MockConfigEntry(
        domain=DOMAIN,
        title="Second EV",
        unique_id="second_ev",
        data={**entry_data, "battery_name": "Second EV"},
    )
    other.add_to_hass(hass)
    await hass.config_entries.async_setup(other.entry_id)
    await hass.async_block_till_done()
    other_coordinator = hass.data[DOMAIN][other.entry_id]

    await hass.services.async_call(
        DOMAIN,
        SERVICE_START_SESSION,
        {"config_entry_id": other.entry_id},
        blocking=True,
    )

    assert other_coordinator.state.session.is_running
    assert not coordinator.state.session.is_running

    await hass.config_entries.async_unload(other.entry_id)
    await hass.async_block_till_done()
