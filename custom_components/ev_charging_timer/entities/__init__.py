"""Entities module - HA entity definitions using factory pattern.

All entities are thin wrappers that:
- Read from TimerState
- Delegate actions to the coordinator
- Refresh on the shared update signal
"""

from .sensors import async_setup_sensors, SENSOR_DEFINITIONS
from .binary_sensors import async_setup_binary_sensors, BINARY_SENSOR_DEFINITIONS
from .numbers import async_setup_numbers, NUMBER_DEFINITIONS
from .selects import async_setup_selects
from .switches import async_setup_switches
from .buttons import async_setup_buttons

__all__ = [
    "async_setup_sensors",
    "async_setup_binary_sensors",
    "async_setup_numbers",
    "async_setup_selects",
    "async_setup_switches",
    "async_setup_buttons",
    "SENSOR_DEFINITIONS",
    "BINARY_SENSOR_DEFINITIONS",
    "NUMBER_DEFINITIONS",
]
