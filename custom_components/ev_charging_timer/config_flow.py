"""Config flow for EV Charging Timer integration."""
from __future__ import annotations

import math
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector
from homeassistant.util import slugify

from .const import (
    CONF_AVAILABLE_POWERS,
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_NAME,
    CONF_CHARGING_POWER,
    CONF_MAX_PERCENT,
    CONF_START_PERCENT,
    CONF_UPDATE_INTERVAL,
    DEFAULT_AVAILABLE_POWERS,
    DEFAULT_BATTERY_CAPACITY,
    DEFAULT_BATTERY_NAME,
    DEFAULT_CHARGING_POWER,
    DEFAULT_MAX_PERCENT,
    DEFAULT_START_PERCENT,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    MAX_BATTERY_CAPACITY,
    MAX_CHARGING_POWER,
    MAX_UPDATE_INTERVAL,
    MIN_UPDATE_INTERVAL,
)
from .core.state import ChargingSettings, format_power, normalize_powers
from .domain.validation import validate_settings
from .exceptions import InvalidSettingsError


def parse_powers(text: str) -> tuple[float, ...]:
    """Parse "3.6, 7, 11" into sorted unique presets.

    Raises:
        ValueError: if an item is not a finite number in (0, MAX_CHARGING_POWER]
    """
    items = [item.strip() for item in text.split(",") if item.strip()]
    powers = normalize_powers(items)
    if not powers or any(
        not math.isfinite(p) or p <= 0 or p > MAX_CHARGING_POWER for p in powers
    ):
        raise ValueError(f"Invalid charging power presets: {text!r}")
    return powers


def format_powers(powers) -> str:
    """Inverse of parse_powers for form defaults."""
    return ", ".join(format_power(p) for p in powers)


def _capacity_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=1,
            max=MAX_BATTERY_CAPACITY,
            step=0.5,
            unit_of_measurement="kWh",
            mode=selector.NumberSelectorMode.BOX,
        )
    )


def _percent_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=0,
            max=100,
            step=1,
            unit_of_measurement="%",
            mode=selector.NumberSelectorMode.SLIDER,
        )
    )


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for EV Charging Timer."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Battery and charging parameters."""
        errors: dict[str, str] = {}

        if user_input is not None:
            name = user_input[CONF_BATTERY_NAME].strip() or DEFAULT_BATTERY_NAME
            await self.async_set_unique_id(slugify(name))
            self._abort_if_unique_id_configured()

            settings = ChargingSettings(
                battery_capacity=float(user_input[CONF_BATTERY_CAPACITY]),
                charging_power=float(user_input[CONF_CHARGING_POWER]),
                start_percent=float(user_input[CONF_START_PERCENT]),
                max_percent=float(user_input[CONF_MAX_PERCENT]),
                available_powers=normalize_powers(DEFAULT_AVAILABLE_POWERS),
            )
            try:
                validate_settings(settings)
            except InvalidSettingsError as ex:
                errors["base"] = ex.reason

            if not errors:
                data = {**user_input, CONF_BATTERY_NAME: name}
                return self.async_create_entry(title=name, data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_BATTERY_NAME, default=DEFAULT_BATTERY_NAME
                    ): selector.TextSelector(),
                    vol.Required(
                        CONF_BATTERY_CAPACITY, default=DEFAULT_BATTERY_CAPACITY
                    ): _capacity_selector(),
                    vol.Required(
                        CONF_CHARGING_POWER, default=DEFAULT_CHARGING_POWER
                    ): selector.NumberSelector(
                        selector.NumberSelectorConfig(
                            min=0.1,
                            max=MAX_CHARGING_POWER,
                            step=0.1,
                            unit_of_measurement="kW",
                            mode=selector.NumberSelectorMode.BOX,
                        )
                    ),
                    vol.Required(
                        CONF_START_PERCENT, default=DEFAULT_START_PERCENT
                    ): _percent_selector(),
                    vol.Required(
                        CONF_MAX_PERCENT, default=DEFAULT_MAX_PERCENT
                    ): _percent_selector(),
                }
            ),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for EV Charging Timer."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry

    def _get_value(self, key: str, default: Any) -> Any:
        """Get value from options or data with fallback to default."""
        return self._config_entry.options.get(
            key,
            self._config_entry.data.get(key, default)
        )

    def _current_settings(self) -> ChargingSettings | None:
        """Live settings of the loaded timer, which may differ from the entry."""
        coordinator = self.hass.data.get(DOMAIN, {}).get(self._config_entry.entry_id)
        return coordinator.state.settings if coordinator else None

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options - single page."""
        errors: dict[str, str] = {}

        if user_input is not None:
            capacity = float(user_input[CONF_BATTERY_CAPACITY])
            if not math.isfinite(capacity) or capacity <= 0:
                errors[CONF_BATTERY_CAPACITY] = "invalid_capacity"

            try:
                powers = parse_powers(user_input[CONF_AVAILABLE_POWERS])
            except ValueError:
                errors[CONF_AVAILABLE_POWERS] = "invalid_powers"

            if not errors:
                return self.async_create_entry(
                    title="",
                    data={
                        CONF_BATTERY_CAPACITY: capacity,
                        CONF_AVAILABLE_POWERS: list(powers),
                        CONF_UPDATE_INTERVAL: int(user_input[CONF_UPDATE_INTERVAL]),
                    },
                )

        current = self._current_settings()
        if current is not None:
            capacity = current.battery_capacity
            powers_default = current.available_powers
        else:
            capacity = self._get_value(CONF_BATTERY_CAPACITY, DEFAULT_BATTERY_CAPACITY)
            powers_default = self._get_value(CONF_AVAILABLE_POWERS, DEFAULT_AVAILABLE_POWERS)

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_BATTERY_CAPACITY, default=capacity
                    ): _capacity_selector(),
                    vol.Required(
                        CONF_AVAILABLE_POWERS, default=format_powers(powers_default)
                    ): selector.TextSelector(),
                    vol.Required(
                        CONF_UPDATE_INTERVAL,
                        default=self._get_value(CONF_UPDATE_INTERVAL, DEFAULT_UPDATE_INTERVAL),
                    ): selector.NumberSelector(
                        selector.NumberSelectorConfig(
                            min=MIN_UPDATE_INTERVAL,
                            max=MAX_UPDATE_INTERVAL,
                            step=1,
                            unit_of_measurement="s",
                            mode=selector.NumberSelectorMode.BOX,
                        )
                    ),
                }
            ),
            errors=errors,
        )
