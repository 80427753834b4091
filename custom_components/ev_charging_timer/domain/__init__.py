"""Domain logic module - charging estimation, no HA runtime objects.

All functions in this package:
- Take inputs → produce outputs
- Have no side effects
- Never read the clock (callers pass "now" in)
- Are easy to unit test
"""

from .calculator import (
    calculate_charging_time,
    calculate_current_percent,
    calculate_kwh,
    estimate_end_time,
    get_charging_calculation,
    get_charging_status,
)
from .validation import validate_power, validate_settings

__all__ = [
    "calculate_charging_time",
    "calculate_current_percent",
    "calculate_kwh",
    "estimate_end_time",
    "get_charging_calculation",
    "get_charging_status",
    "validate_power",
    "validate_settings",
]
