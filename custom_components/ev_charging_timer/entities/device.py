"""Shared device info for all timer entities."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo

from ..const import DEFAULT_NAME, DOMAIN


def build_device_info(entry_id: str, battery_name: str) -> DeviceInfo:
    """One device per config entry."""
    return DeviceInfo(
        identifiers={(DOMAIN, entry_id)},
        name=battery_name,
        manufacturer="EV Charging Timer",
        model=DEFAULT_NAME,
    )
