"""Test number, select and switch entities."""
import threading
from unittest.mock import patch

import pytest
from homeassistant.const import STATE_OFF, STATE_ON
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.ev_charging_timer.timer_logging import get_logger


async def _set_number(hass, entity, value):
    await hass.services.async_call(
        "number",
        "set_value",
        {"entity_id": entity, "value": value},
        blocking=True,
    )
    await hass.async_block_till_done()


@pytest.mark.asyncio
async def test_numbers_show_settings(hass: HomeAssistant, entity_id):
    """Numbers start from the configured settings."""
    expected = {
        "battery_capacity": 60.0,
        "charging_power": 12.0,
        "start_percent": 20.0,
        "max_percent": 80.0,
    }
    for key, value in expected.items():
        assert float(hass.states.get(entity_id("number", key)).state) == value


@pytest.mark.asyncio
async def test_set_number_updates_settings(hass: HomeAssistant, coordinator, entity_id):
    """Setting a number goes through the coordinator."""
    await _set_number(hass, entity_id("number", "max_percent"), 100)

    assert coordinator.state.settings.max_percent == 100.0
    assert coordinator.state.status.total_minutes == 240
    assert float(hass.states.get(entity_id("number", "max_percent")).state) == 100.0


@pytest.mark.asyncio
async def test_set_number_degenerate_range(hass: HomeAssistant, coordinator, entity_id):
    """Start above max is accepted."""
    await _set_number(hass, entity_id("number", "start_percent"), 90)

    assert coordinator.state.settings.start_percent == 90.0
    assert coordinator.state.status.total_minutes < 0
    assert int(hass.states.get(entity_id("sensor", "total_charging_time")).state) == 0


@pytest.mark.asyncio
async def test_power_select(hass: HomeAssistant, coordinator, entity_id):
    """The select lists presets and sets the charging power."""
    select = entity_id("select", "power_preset")
    state = hass.states.get(select)

    assert state.attributes["options"] == ["3.6", "7", "11", "22"]
    # 12 kW from the entry is not a preset
    assert state.state == "unknown"

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": select, "option": "11"},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert coordinator.state.settings.charging_power == 11.0
    assert hass.states.get(select).state == "11"
    assert float(hass.states.get(entity_id("number", "charging_power")).state) == 11.0


@pytest.mark.asyncio
async def test_power_select_follows_presets(hass: HomeAssistant, coordinator, entity_id):
    """Added presets appear as options."""
    await coordinator.async_add_power_preset(12.0)
    await hass.async_block_till_done()

    state = hass.states.get(entity_id("select", "power_preset"))
    assert "12" in state.attributes["options"]
    assert state.state == "12"


@pytest.mark.asyncio
async def test_invalid_number_rejected(hass: HomeAssistant, coordinator):
    """Coordinator validation errors reach the caller."""
    with pytest.raises(HomeAssistantError):
        await coordinator.async_set_charging_power(-1)


@pytest.mark.asyncio
async def test_debug_logging_switch(hass: HomeAssistant, entity_id):
    """The switch toggles file logging."""
    switch = entity_id("switch", "debug_logging")
    logger = get_logger()

    await hass.services.async_call("switch", "turn_on", {"entity_id": switch}, blocking=True)
    await hass.async_block_till_done()
    assert hass.states.get(switch).state == STATE_ON
    assert logger.file_logging_enabled

    await hass.services.async_call("switch", "turn_off", {"entity_id": switch}, blocking=True)
    await hass.async_block_till_done()
    assert hass.states.get(switch).state == STATE_OFF
    assert not logger.file_logging_enabled


@pytest.mark.asyncio
async def test_debug_logging_switch_runs_off_loop(hass: HomeAssistant, entity_id):
    """Stopping the writer thread joins it, so toggling runs in the executor."""
    switch = entity_id("switch", "debug_logging")
    logger = get_logger()
    calls = []

    def record(enabled):
        calls.append((enabled, threading.get_ident()))

    with patch.object(logger, "set_file_logging", side_effect=record):
        await hass.services.async_call("switch", "turn_on", {"entity_id": switch}, blocking=True)
        await hass.services.async_call("switch", "turn_off", {"entity_id": switch}, blocking=True)
        await hass.async_block_till_done()

    loop_thread = threading.get_ident()
    assert [enabled for enabled, _ in calls] == [True, False]
    assert all(ident != loop_thread for _, ident in calls)
    assert hass.states.get(switch).state == STATE_OFF


@pytest.mark.asyncio
async def test_power_select_keeps_preset_precision(hass: HomeAssistant, coordinator, entity_id):
    """A preset with many decimals is listed and applied exactly."""
    select = entity_id("select", "power_preset")
    await coordinator.async_add_power_preset(123.4567)
    await hass.async_block_till_done()

    assert "123.4567" in hass.states.get(select).attributes["options"]

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": select, "option": "123.4567"},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert coordinator.state.settings.charging_power == 123.4567
    assert hass.states.get(select).state == "123.4567"
