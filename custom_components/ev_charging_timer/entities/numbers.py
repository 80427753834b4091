"""Number entities for the editable charging settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

from homeassistant.components.number import NumberDeviceClass, NumberEntity, NumberMode
from homeassistant.const import PERCENTAGE, UnitOfEnergy, UnitOfPower
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from ..coordinator import ChargingTimerCoordinator
    from ..core.state import ChargingSettings

from ..const import MAX_BATTERY_CAPACITY, MAX_CHARGING_POWER, SIGNAL_UPDATE
from ..timer_logging import get_logger
from .device import build_device_info


@dataclass
class NumberDefinition:
    """Definition for a settings number."""

    key: str
    name: str
    value_fn: Callable[[ChargingSettings], float]
    set_fn: Callable[[ChargingTimerCoordinator, float], Awaitable[None]]
    min_value: float
    max_value: float
    step: float
    unit: str
    device_class: NumberDeviceClass | None = None
    icon: str | None = None


NUMBER_DEFINITIONS: list[NumberDefinition] = [
    NumberDefinition(
        key="battery_capacity",
        name="Battery Capacity",
        value_fn=lambda s: s.battery_capacity,
        set_fn=lambda c, v: c.async_set_battery_capacity(v),
        min_value=1.0,
        max_value=MAX_BATTERY_CAPACITY,
        step=0.5,
        unit=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=NumberDeviceClass.ENERGY_STORAGE,
        icon="mdi:car-battery",
    ),
    NumberDefinition(
        key="charging_power",
        name="Charging Power",
        value_fn=lambda s: s.charging_power,
        set_fn=lambda c, v: c.async_set_charging_power(v),
        min_value=0.1,
        max_value=MAX_CHARGING_POWER,
        step=0.1,
        unit=UnitOfPower.KILO_WATT,
        device_class=NumberDeviceClass.POWER,
        icon="mdi:ev-station",
    ),
    NumberDefinition(
        key="start_percent",
        name="Start Level",
        value_fn=lambda s: s.start_percent,
        set_fn=lambda c, v: c.async_set_start_percent(v),
        min_value=0.0,
        max_value=100.0,
        step=1.0,
        unit=PERCENTAGE,
        icon="mdi:battery-low",
    ),
    NumberDefinition(
        key="max_percent",
        name="Target Level",
        value_fn=lambda s: s.max_percent,
        set_fn=lambda c, v: c.async_set_max_percent(v),
        min_value=0.0,
        max_value=100.0,
        step=1.0,
        unit=PERCENTAGE,
        icon="mdi:battery-high",
    ),
]


class ChargingSettingNumber(NumberEntity):
    """Number entity bound to one charging setting.

    Edits go through the coordinator, which validates and persists
    them. A rejected edit raises and the shown value is left unchanged.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_mode = NumberMode.BOX

    def __init__(
        self,
        coordinator: ChargingTimerCoordinator,
        definition: NumberDefinition,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._definition = definition
        self._logger = get_logger()
        entry_id = coordinator.entry.entry_id

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_min_value = definition.min_value
        self._attr_native_max_value = definition.max_value
        self._attr_native_step = definition.step
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
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
        """Sync with coordinator state."""
        self._attr_native_value = self._definition.value_fn(self._coordinator.state.settings)
        self.async_write_ha_state()

    async def async_set_native_value(self, value: float) -> None:
        """Handle value change from UI."""
        self._logger.info(
            "SETTING_SET_REQUEST",
            key=self._definition.key,
            old_value=self._attr_native_value,
            new_value=value,
        )
        await self._definition.set_fn(self._coordinator, value)


async def async_setup_numbers(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargingTimerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up number entities."""
    async_add_entities(
        ChargingSettingNumber(coordinator, definition)
        for definition in NUMBER_DEFINITIONS
    )
