"""Pure charging time estimation.

This module contains the arithmetic behind the timer.
It calls no Home Assistant APIs and never reads a clock:
every "now" is passed in as epoch milliseconds by the caller.
"""

from __future__ import annotations

import math

from ..const import MILLIS_PER_MINUTE
from ..core.state import (
    ChargingCalculation,
    ChargingSession,
    ChargingSettings,
    ChargingStatus,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (19.8 -> 20, 24.5 -> 25)."""
    return math.floor(value + 0.5)


def calculate_charging_time(
    battery_capacity: float,
    start_percent: float,
    max_percent: float,
    charging_power: float,
) -> int:
    """Calculate total charging time in minutes.

    Args:
        battery_capacity: Usable battery capacity in kWh
        start_percent: Charge level when plugging in
        max_percent: Charge level to stop at
        charging_power: Charger power in kW, must be > 0

    Returns:
        Whole minutes. Zero or negative when max_percent <= start_percent.
    """
    energy_needed = battery_capacity * (max_percent - start_percent) / 100.0
    hours = energy_needed / charging_power
    return round_half_up(hours * 60)


def elapsed_minutes(start_time: int, now: int) -> int:
    """Whole minutes between two epoch-millisecond instants."""
    return int((now - start_time) / MILLIS_PER_MINUTE)


def calculate_current_percent(
    start_time: int,
    start_percent: float,
    max_percent: float,
    total_minutes: int,
    now: int,
) -> float:
    """Project the battery percent reached at ``now``.

    Charging is modelled as linear between start_percent and max_percent
    over total_minutes.
    """
    elapsed = elapsed_minutes(start_time, now)

    if elapsed <= 0:
        return start_percent
    if elapsed >= total_minutes:
        return max_percent

    percent_per_minute = (max_percent - start_percent) / total_minutes
    return start_percent + percent_per_minute * elapsed


def estimate_end_time(start_time: int, total_minutes: int) -> int:
    """Epoch milliseconds when the session is expected to finish."""
    return start_time + total_minutes * MILLIS_PER_MINUTE


def calculate_kwh(battery_capacity: float, percent: float) -> int:
    """Energy stored at ``percent``, rounded to whole kWh."""
    return round_half_up(battery_capacity * percent / 100.0)


def total_minutes_for(settings: ChargingSettings) -> int:
    """Shortcut for calculate_charging_time() on a settings record."""
    return calculate_charging_time(
        settings.battery_capacity,
        settings.start_percent,
        settings.max_percent,
        settings.charging_power,
    )


def get_charging_calculation(
    settings: ChargingSettings,
    is_running: bool,
    start_time: int,
    now: int,
) -> ChargingCalculation:
    """Build the calculation shown to the user."""
    total_minutes = total_minutes_for(settings)

    if is_running:
        estimated_percent = calculate_current_percent(
            start_time,
            settings.start_percent,
            settings.max_percent,
            total_minutes,
            now,
        )
        elapsed = elapsed_minutes(start_time, now)
    else:
        estimated_percent = settings.start_percent
        elapsed = 0

    return ChargingCalculation(
        time_remaining_minutes=max(0, total_minutes - elapsed),
        estimated_percent=estimated_percent,
        charging_speed=settings.charging_power,
    )


def get_charging_status(
    settings: ChargingSettings,
    session: ChargingSession,
    now: int,
) -> ChargingStatus:
    """Aggregate the calculation with the session-derived fields."""
    total_minutes = total_minutes_for(settings)
    calculation = get_charging_calculation(
        settings, session.is_running, session.start_time, now
    )

    if not session.is_running:
        return ChargingStatus(
            current_percent=settings.start_percent,
            total_minutes=total_minutes,
            calculation=calculation,
        )

    return ChargingStatus(
        is_running=True,
        start_time=session.start_time,
        current_percent=calculation.estimated_percent,
        estimated_end_time=estimate_end_time(session.start_time, total_minutes),
        total_minutes=total_minutes,
        is_complete=elapsed_minutes(session.start_time, now) >= total_minutes,
        calculation=calculation,
    )
