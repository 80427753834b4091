"""Sensor entities using factory pattern.

Every sensor is a projection of TimerState.
Add a new sensor = add one entry to SENSOR_DEFINITIONS.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE, UnitOfEnergy, UnitOfPower, UnitOfTime
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.util import dt as dt_util

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator
    from ..core.state import TimerState

from ..const import SIGNAL_UPDATE
from ..domain.calculator import calculate_kwh
from .device import build_device_info


def _end_time(state: TimerState) -> datetime | None:
    """Estimated end as an aware datetime, only while running."""
    if not state.status.is_running:
        return None
    return dt_util.utc_from_timestamp(state.status.estimated_end_time / 1000)


def _energy_to_add(state: TimerState) -> int:
    """kWh still to go from the projected percent to max percent."""
    delta = max(0.0, state.settings.max_percent - state.status.current_percent)
    return calculate_kwh(state.settings.battery_capacity, delta)


@dataclass
class SensorDefinition:
    """Definition for a sensor entity."""

    key: str
    name: str
    value_fn: Callable[[TimerState], Any]
    unit: str | None = None
    device_class: SensorDeviceClass | None = None
    state_class: SensorStateClass | None = None
    icon: str | None = None
    suggested_precision: int | None = None


SENSOR_DEFINITIONS: list[SensorDefinition] = [
    # Live projection
    SensorDefinition(
        key="estimated_percent",
        name="Estimated Battery Level",
        value_fn=lambda s: s.status.current_percent,
        unit=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
        suggested_precision=1,
    ),
    SensorDefinition(
        key="time_remaining",
        name="Time Remaining",
        value_fn=lambda s: s.status.calculation.time_remaining_minutes,
        unit=UnitOfTime.MINUTES,
        device_class=SensorDeviceClass.DURATION,
        icon="mdi:timer-sand",
    ),
    SensorDefinition(
        key="estimated_end_time",
        name="Estimated End Time",
        value_fn=_end_time,
        device_class=SensorDeviceClass.TIMESTAMP,
        icon="mdi:clock-end",
    ),
    SensorDefinition(
        key="charging_speed",
        name="Charging Speed",
        value_fn=lambda s: s.status.calculation.charging_speed,
        unit=UnitOfPower.KILO_WATT,
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
    ),

    # Static estimate
    SensorDefinition(
        key="total_charging_time",
        name="Total Charging Time",
        value_fn=lambda s: max(0, s.status.total_minutes),
        unit=UnitOfTime.MINUTES,
        device_class=SensorDeviceClass.DURATION,
        icon="mdi:timer-outline",
    ),

    # Energy (display only, rounded to whole kWh)
    SensorDefinition(
        key="energy_in_battery",
        name="Energy In Battery",
        value_fn=lambda s: calculate_kwh(s.settings.battery_capacity, s.status.current_percent),
        unit=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY_STORAGE,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorDefinition(
        key="energy_to_add",
        name="Energy To Add",
        value_fn=_energy_to_add,
        unit=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY_STORAGE,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:battery-plus-outline",
    ),
]


class ChargingTimerSensor(SensorEntity):
    """Generic timer sensor entity."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        coordinator: ChargingTimerCoordinator,
        definition: SensorDefinition,
    ) -> None:
        """Initialize the sensor."""
        self._state = coordinator.state
        self._definition = definition
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
        self._attr_state_class = definition.state_class
        self._attr_suggested_display_precision = definition.suggested_precision
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = build_device_info(entry_id, coordinator.name)

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        try:
            self._attr_native_value = self._definition.value_fn(self._state)
        except (ValueError, TypeError, AttributeError, ZeroDivisionError):
            self._attr_native_value = None
        self.async_write_ha_state()


async def async_setup_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up all sensor entities."""
    async_add_entities(
        ChargingTimerSensor(coordinator, definition)
        for definition in SENSOR_DEFINITIONS
    )
