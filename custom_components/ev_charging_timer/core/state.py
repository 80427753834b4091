"""Single Source of Truth - all timer state in one place.

Value records (settings, session, calculation, status) are immutable.
TimerState is the one mutable holder; the coordinator swaps whole
records in and out of it, so readers never see a half-updated value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..const import (
    DEFAULT_AVAILABLE_POWERS,
    DEFAULT_BATTERY_CAPACITY,
    DEFAULT_CHARGING_POWER,
    DEFAULT_MAX_PERCENT,
    DEFAULT_START_PERCENT,
    DEFAULT_UPDATE_INTERVAL,
)


def normalize_powers(powers) -> tuple[float, ...]:
    """Sort and de-duplicate a collection of power presets."""
    return tuple(sorted({float(p) for p in powers}))


def format_power(power: float) -> str:
    """Label for a power preset: 7.0 -> "7", 3.6 -> "3.6", 123.4567 kept whole."""
    return f"{float(power):.15g}"


@dataclass(frozen=True)
class ChargingSettings:
    """User-configured charging parameters."""

    battery_capacity: float = DEFAULT_BATTERY_CAPACITY  # kWh
    charging_power: float = DEFAULT_CHARGING_POWER  # kW
    start_percent: float = DEFAULT_START_PERCENT
    max_percent: float = DEFAULT_MAX_PERCENT
    available_powers: tuple[float, ...] = DEFAULT_AVAILABLE_POWERS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "battery_capacity": self.battery_capacity,
            "charging_power": self.charging_power,
            "start_percent": self.start_percent,
            "max_percent": self.max_percent,
            "available_powers": list(self.available_powers),
        }


@dataclass(frozen=True)
class ChargingSession:
    """Persisted run state. start_time is epoch ms, meaningful only while running."""

    is_running: bool = False
    start_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "is_running": self.is_running,
            "start_time": self.start_time,
        }


@dataclass(frozen=True)
class ChargingCalculation:
    """Projection recomputed from settings, session and the current time."""

    time_remaining_minutes: int = 0
    estimated_percent: float = 0.0
    charging_speed: float = 0.0  # kW


@dataclass(frozen=True)
class ChargingStatus:
    """Calculation plus the session-derived fields shown to the user."""

    is_running: bool = False
    start_time: int = 0
    current_percent: float = 0.0
    estimated_end_time: int = 0
    total_minutes: int = 0
    is_complete: bool = False
    calculation: ChargingCalculation = field(default_factory=ChargingCalculation)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "is_running": self.is_running,
            "start_time": self.start_time,
            "current_percent": round(self.current_percent, 2),
            "estimated_end_time": self.estimated_end_time,
            "total_minutes": self.total_minutes,
            "time_remaining_minutes": self.calculation.time_remaining_minutes,
            "is_complete": self.is_complete,
        }


@dataclass
class TimerState:
    """Mutable holder for the current records.

    Entities read from here; only the coordinator writes.
    """

    settings: ChargingSettings = field(default_factory=ChargingSettings)
    session: ChargingSession = field(default_factory=ChargingSession)
    status: ChargingStatus = field(default_factory=ChargingStatus)

    # Options
    update_interval_seconds: int = DEFAULT_UPDATE_INTERVAL

    # Set once per session when the projection reaches max_percent
    completion_reported: bool = False

    @property
    def is_running(self) -> bool:
        """Check if a session is running."""
        return self.session.is_running

    def to_dict(self) -> dict[str, Any]:
        """Export full state as dictionary."""
        return {
            "settings": self.settings.to_dict(),
            "session": self.session.to_dict(),
            "status": self.status.to_dict(),
            "update_interval_seconds": self.update_interval_seconds,
        }
