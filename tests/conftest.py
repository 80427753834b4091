"""Fixtures for testing."""
from unittest.mock import patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er

from custom_components.ev_charging_timer.const import (
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_NAME,
    CONF_CHARGING_POWER,
    CONF_MAX_PERCENT,
    CONF_START_PERCENT,
    DOMAIN,
    MILLIS_PER_MINUTE,
)

# 2024-01-01T00:00:00Z
T0 = 1_704_067_200_000


class FakeClock:
    """Epoch-ms clock driven by the test."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, minutes: float) -> int:
        self.now += int(minutes * MILLIS_PER_MINUTE)
        return self.now


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations defined in the test dir."""
    yield


@pytest.fixture
def clock():
    """Fake clock, also used by coordinators created during setup."""
    fake = FakeClock()
    with patch(
        "custom_components.ev_charging_timer.coordinator.utc_now_ms", fake
    ):
        yield fake


@pytest.fixture
def entry_data():
    """60 kWh, 12 kW, 20 % -> 80 %: a 180 minute session."""
    return {
        CONF_BATTERY_NAME: "Test EV",
        CONF_BATTERY_CAPACITY: 60.0,
        CONF_CHARGING_POWER: 12.0,
        CONF_START_PERCENT: 20.0,
        CONF_MAX_PERCENT: 80.0,
    }


@pytest.fixture
def config_entry(hass: HomeAssistant, entry_data):
    """Config entry added to hass but not set up."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        title="Test EV",
        unique_id="test_ev",
        data=entry_data,
    )
    entry.add_to_hass(hass)
    return entry


@pytest.fixture
async def setup_integration(hass: HomeAssistant, config_entry, clock):
    """Set up the integration, unloading it afterwards."""
    await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()

    yield config_entry

    if config_entry.entry_id in hass.data.get(DOMAIN, {}):
        await hass.config_entries.async_unload(config_entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
def coordinator(hass: HomeAssistant, setup_integration):
    """Coordinator of the set-up entry."""
    return hass.data[DOMAIN][setup_integration.entry_id]


@pytest.fixture
def entity_id(hass: HomeAssistant, setup_integration):
    """Look up an entity id by platform and key."""
    registry = er.async_get(hass)

    def _lookup(platform: str, key: str) -> str:
        entity = registry.async_get_entity_id(
            platform, DOMAIN, f"{setup_integration.entry_id}_{key}"
        )
        assert entity is not None, f"no {platform} entity for {key}"
        return entity

    return _lookup
