"""Settings and session persistence.

Both records live in one HA storage file per config entry, so a
start/stop transition is always written in a single save.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from homeassistant.helpers import storage

from ..const import DEFAULT_AVAILABLE_POWERS, STORAGE_KEY, STORAGE_VERSION
from .state import ChargingSession, ChargingSettings, normalize_powers

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


def _settings_from_dict(data: dict[str, Any]) -> ChargingSettings:
    """Parse stored settings, falling back to defaults field by field."""
    defaults = ChargingSettings()

    def number(key: str, default: float) -> float:
        try:
            value = float(data[key])
        except (KeyError, TypeError, ValueError):
            return default
        return value if math.isfinite(value) else default

    try:
        powers = normalize_powers(data.get("available_powers") or ())
    except (TypeError, ValueError):
        _LOGGER.warning("Discarding malformed power presets: %s", data.get("available_powers"))
        powers = ()
    if not powers or any(not math.isfinite(p) or p <= 0 for p in powers):
        powers = DEFAULT_AVAILABLE_POWERS

    return ChargingSettings(
        battery_capacity=number("battery_capacity", defaults.battery_capacity),
        charging_power=number("charging_power", defaults.charging_power),
        start_percent=number("start_percent", defaults.start_percent),
        max_percent=number("max_percent", defaults.max_percent),
        available_powers=powers,
    )


def _session_from_dict(data: dict[str, Any]) -> ChargingSession:
    """Parse the stored session; anything malformed means 'not running'."""
    try:
        return ChargingSession(
            is_running=bool(data.get("is_running", False)),
            start_time=int(data.get("start_time", 0)),
        )
    except (TypeError, ValueError):
        _LOGGER.warning("Discarding malformed session: %s", data)
        return ChargingSession()


class TimerStore:
    """Persists ChargingSettings and ChargingSession for one config entry."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        """Initialize the store."""
        self._store = storage.Store(hass, STORAGE_VERSION, f"{STORAGE_KEY}.{entry_id}")

    async def async_load(self) -> tuple[ChargingSettings | None, ChargingSession]:
        """Load persisted records.

        Returns:
            (settings or None if never saved, session)
        """
        data = await self._store.async_load()
        if not data:
            return None, ChargingSession()

        settings = None
        if isinstance(data.get("settings"), dict):
            settings = _settings_from_dict(data["settings"])

        session = ChargingSession()
        if isinstance(data.get("session"), dict):
            session = _session_from_dict(data["session"])

        return settings, session

    async def async_save(
        self,
        settings: ChargingSettings,
        session: ChargingSession,
    ) -> None:
        """Save both records."""
        await self._store.async_save(
            {
                "settings": settings.to_dict(),
                "session": session.to_dict(),
            }
        )

    async def async_remove(self) -> None:
        """Delete the storage file."""
        await self._store.async_remove()
