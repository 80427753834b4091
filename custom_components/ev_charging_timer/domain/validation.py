"""Settings validation at the edit boundary.

The estimator itself never validates: a zero or non-finite value must be
stopped here, before it reaches calculate_charging_time().
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..exceptions import InvalidSettingsError

if TYPE_CHECKING:
    from ..core.state import ChargingSettings

REASON_INVALID_CAPACITY = "invalid_capacity"
REASON_INVALID_POWER = "invalid_power"
REASON_INVALID_PERCENT = "invalid_percent"
REASON_NO_POWER_PRESETS = "no_power_presets"


def validate_power(power: float) -> float:
    """Validate a single charging power (kW)."""
    if not math.isfinite(power) or power <= 0:
        raise InvalidSettingsError(
            REASON_INVALID_POWER,
            f"Charging power must be greater than 0 kW, got {power}",
        )
    return power


def validate_settings(settings: ChargingSettings) -> ChargingSettings:
    """Validate a settings record.

    max_percent <= start_percent is allowed: it projects as an
    already-complete session.

    Returns:
        The same settings, for chaining

    Raises:
        InvalidSettingsError: on the first problem found
    """
    if not math.isfinite(settings.battery_capacity) or settings.battery_capacity <= 0:
        raise InvalidSettingsError(
            REASON_INVALID_CAPACITY,
            f"Battery capacity must be greater than 0 kWh, got {settings.battery_capacity}",
        )

    validate_power(settings.charging_power)

    for name, value in (
        ("start_percent", settings.start_percent),
        ("max_percent", settings.max_percent),
    ):
        if not math.isfinite(value) or not 0 <= value <= 100:
            raise InvalidSettingsError(
                REASON_INVALID_PERCENT,
                f"{name} must be between 0 and 100, got {value}",
            )

    if not settings.available_powers or any(
        not math.isfinite(p) or p <= 0 for p in settings.available_powers
    ):
        raise InvalidSettingsError(
            REASON_NO_POWER_PRESETS,
            "At least one charging power preset greater than 0 kW is required",
        )

    return settings
