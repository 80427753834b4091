"""Core module for EV Charging Timer.

Contains the fundamental building blocks:
- State: immutable records plus the single mutable holder
- Events: Event bus for component communication
- Store: settings and session persistence
"""

from .state import (
    ChargingCalculation,
    ChargingSession,
    ChargingSettings,
    ChargingStatus,
    TimerState,
)
from .events import TimerEvent, TimerEventBus
from .store import TimerStore

__all__ = [
    "ChargingCalculation",
    "ChargingSession",
    "ChargingSettings",
    "ChargingStatus",
    "TimerState",
    "TimerEvent",
    "TimerEventBus",
    "TimerStore",
]
