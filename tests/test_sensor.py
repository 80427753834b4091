"""Test sensor entities."""
import pytest
from homeassistant.const import STATE_UNKNOWN
from homeassistant.core import HomeAssistant

from custom_components.ev_charging_timer.entities.sensors import SENSOR_DEFINITIONS

T0 = 1_704_067_200_000


@pytest.mark.asyncio
async def test_sensors_created(hass: HomeAssistant, entity_id):
    """Test all sensors are created."""
    for definition in SENSOR_DEFINITIONS:
        state = hass.states.get(entity_id("sensor", definition.key))
        assert state is not None, f"Sensor {definition.key} not created"


@pytest.mark.asyncio
async def test_sensor_units(hass: HomeAssistant, entity_id):
    """Test sensors have correct units."""
    expected = {
        "estimated_percent": "%",
        "time_remaining": "min",
        "total_charging_time": "min",
        "charging_speed": "kW",
        "energy_in_battery": "kWh",
        "energy_to_add": "kWh",
    }
    for key, unit in expected.items():
        state = hass.states.get(entity_id("sensor", key))
        assert state.attributes.get("unit_of_measurement") == unit, (
            f"{key} should have {unit} unit"
        )


@pytest.mark.asyncio
async def test_sensors_idle(hass: HomeAssistant, entity_id):
    """Idle timer shows the plan for the configured range."""
    def value(key):
        return hass.states.get(entity_id("sensor", key)).state

    assert float(value("estimated_percent")) == 20.0
    assert int(value("time_remaining")) == 180
    assert int(value("total_charging_time")) == 180
    assert float(value("charging_speed")) == 12.0
    assert int(value("energy_in_battery")) == 12
    assert int(value("energy_to_add")) == 36
    assert value("estimated_end_time") == STATE_UNKNOWN


@pytest.mark.asyncio
async def test_sensors_follow_session(hass: HomeAssistant, coordinator, clock, entity_id):
    """Sensors update when the session starts and progresses."""
    def value(key):
        return hass.states.get(entity_id("sensor", key)).state

    await coordinator.async_start()
    await hass.async_block_till_done()

    # T0 + 180 minutes
    assert value("estimated_end_time") == "2024-01-01T03:00:00+00:00"

    clock.advance(90)
    await coordinator.async_refresh()
    await hass.async_block_till_done()

    assert float(value("estimated_percent")) == pytest.approx(50)
    assert int(value("time_remaining")) == 90
    assert int(value("energy_in_battery")) == 30
    assert int(value("energy_to_add")) == 18
    assert clock.now == T0 + 90 * 60_000


@pytest.mark.asyncio
async def test_sensors_follow_settings(hass: HomeAssistant, coordinator, entity_id):
    """A settings edit is reflected without a refresh."""
    await coordinator.async_set_charging_power(24.0)
    await hass.async_block_till_done()

    assert int(hass.states.get(entity_id("sensor", "total_charging_time")).state) == 90
    assert float(hass.states.get(entity_id("sensor", "charging_speed")).state) == 24.0
