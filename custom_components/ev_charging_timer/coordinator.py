"""Charging Timer Coordinator - thin orchestrator for all components.

It:
- Loads settings and session from storage
- Owns the clock and the refresh ticker
- Applies start/stop transitions atomically
- Delegates all arithmetic to the domain module
- Emits events for state changes

It does NOT contain any estimation logic.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

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
    EVENT_SESSION_COMPLETE,
)
from .core.events import TimerEvent, TimerEventBus
from .core.state import (
    ChargingSession,
    ChargingSettings,
    TimerState,
    normalize_powers,
)
from .core.store import TimerStore
from .domain.calculator import get_charging_status
from .domain.validation import REASON_NO_POWER_PRESETS, validate_power, validate_settings
from .exceptions import InvalidSettingsError
from .timer_logging import get_logger

Clock = Callable[[], int]


def utc_now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(dt_util.utcnow().timestamp() * 1000)


class ChargingTimerCoordinator:
    """Thin orchestrator for one EV charging timer.

    This class:
    - Restores settings and any running session on startup
    - Starts and stops sessions, persisting each transition
    - Runs a periodic ticker only while a session is running
    - Validates and persists settings edits
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance
            entry: Config entry holding initial settings and options
            clock: Source of "now" in epoch ms (default: HA UTC clock)
        """
        self.hass = hass
        self.entry = entry
        self._clock = clock or utc_now_ms
        self._logger = get_logger()
        self._unsub_ticker: Callable[[], None] | None = None
        self._session_lock = asyncio.Lock()

        self.state = TimerState(
            settings=self._create_settings_from_config(),
            update_interval_seconds=int(
                self._get_config(CONF_UPDATE_INTERVAL, DEFAULT_UPDATE_INTERVAL)
            ),
        )
        self.events = TimerEventBus(hass)
        self._store = TimerStore(hass, entry.entry_id)

        self._logger.info("COORDINATOR_INIT", entry_id=entry.entry_id)

    def _get_config(self, key: str, default: Any) -> Any:
        """Read a value from options, then data, then default."""
        return self.entry.options.get(key, self.entry.data.get(key, default))

    def _create_settings_from_config(self) -> ChargingSettings:
        """Create settings from the config entry."""
        return ChargingSettings(
            battery_capacity=float(self._get_config(CONF_BATTERY_CAPACITY, DEFAULT_BATTERY_CAPACITY)),
            charging_power=float(self._get_config(CONF_CHARGING_POWER, DEFAULT_CHARGING_POWER)),
            start_percent=float(self._get_config(CONF_START_PERCENT, DEFAULT_START_PERCENT)),
            max_percent=float(self._get_config(CONF_MAX_PERCENT, DEFAULT_MAX_PERCENT)),
            available_powers=normalize_powers(
                self._get_config(CONF_AVAILABLE_POWERS, DEFAULT_AVAILABLE_POWERS)
            ),
        )

    @property
    def name(self) -> str:
        """Battery name shown on the device."""
        return self.entry.data.get(CONF_BATTERY_NAME, DEFAULT_BATTERY_NAME)

    def now(self) -> int:
        """Current time from the injected clock (epoch ms)."""
        return self._clock()

    # ========== Lifecycle ==========

    async def async_init(self) -> None:
        """Restore persisted state and start ticking if a session is running."""
        settings, session = await self._store.async_load()

        if settings is not None:
            try:
                self.state.settings = validate_settings(settings)
            except InvalidSettingsError as ex:
                self._logger.warning("STORED_SETTINGS_REJECTED", reason=ex.reason, error=str(ex))

        self.state.session = session
        self._recompute()
        # A session that finished while HA was down is not announced again
        self.state.completion_reported = self.state.status.is_complete
        self._ensure_ticker()

        self._logger.info(
            "COORDINATOR_RESTORED",
            running=session.is_running,
            start_time=session.start_time,
            settings=self.state.settings.to_dict(),
        )

    def async_unload(self) -> None:
        """Stop the ticker."""
        self._cancel_ticker()
        self._logger.info("COORDINATOR_UNLOADED", entry_id=self.entry.entry_id)

    # ========== Session control ==========

    async def async_start(self) -> bool:
        """Start a charging session now.

        Returns:
            False if a session was already running
        """
        async with self._session_lock:
            if self.state.session.is_running:
                self._logger.debug("START_IGNORED_ALREADY_RUNNING")
                return False

            now = self.now()
            session = ChargingSession(is_running=True, start_time=now)
            await self._store.async_save(self.state.settings, session)

            self.state.session = session
            self.state.completion_reported = False
            self._recompute(now)
            self._ensure_ticker()

        status = self.state.status
        self._logger.info(
            "SESSION_STARTED",
            start_time=now,
            total_minutes=status.total_minutes,
            estimated_end_time=status.estimated_end_time,
        )
        await self.events.emit(
            TimerEvent.SESSION_STARTED,
            start_time=now,
            total_minutes=status.total_minutes,
        )
        return True

    async def async_stop(self) -> bool:
        """Stop the running session.

        Returns:
            False if no session was running
        """
        async with self._session_lock:
            if not self.state.session.is_running:
                self._logger.debug("STOP_IGNORED_NOT_RUNNING")
                return False

            session = replace(self.state.session, is_running=False)
            await self._store.async_save(self.state.settings, session)

            self.state.session = session
            self._recompute()
            self._ensure_ticker()

        self._logger.info("SESSION_STOPPED", start_time=session.start_time)
        await self.events.emit(TimerEvent.SESSION_STOPPED, start_time=session.start_time)
        return True

    async def async_refresh(self) -> None:
        """Recompute the projection now and push it to entities."""
        self._recompute()
        await self._publish_status()

    # ========== Settings ==========

    async def async_update_settings(self, **changes: Any) -> ChargingSettings:
        """Validate, persist and apply a settings change.

        Raises:
            InvalidSettingsError: if the result is not a usable configuration
        """
        if "available_powers" in changes:
            changes["available_powers"] = normalize_powers(changes["available_powers"])

        settings = validate_settings(replace(self.state.settings, **changes))

        async with self._session_lock:
            await self._store.async_save(settings, self.state.session)
            self.state.settings = settings
            self._recompute()

        self._logger.info("SETTINGS_UPDATED", **changes)
        await self.events.emit(TimerEvent.SETTINGS_UPDATED, **changes)
        return settings

    async def async_set_battery_capacity(self, capacity: float) -> None:
        """Set battery capacity (kWh)."""
        await self.async_update_settings(battery_capacity=float(capacity))

    async def async_set_charging_power(self, power: float) -> None:
        """Set charging power (kW)."""
        await self.async_update_settings(charging_power=float(power))

    async def async_set_start_percent(self, percent: float) -> None:
        """Set the percent the car is plugged in at."""
        await self.async_update_settings(start_percent=float(percent))

    async def async_set_max_percent(self, percent: float) -> None:
        """Set the percent to charge up to."""
        await self.async_update_settings(max_percent=float(percent))

    async def async_add_power_preset(self, power: float) -> bool:
        """Add a charging power preset.

        Returns:
            False if the preset already existed
        """
        power = validate_power(float(power))
        presets = self.state.settings.available_powers
        if power in presets:
            return False

        await self.async_update_settings(available_powers=presets + (power,))
        await self.events.emit(
            TimerEvent.POWER_PRESETS_UPDATED,
            available_powers=list(self.state.settings.available_powers),
        )
        return True

    async def async_remove_power_preset(self, power: float) -> bool:
        """Remove a charging power preset.

        The active charging power is left as it is.

        Returns:
            False if the preset did not exist
        """
        power = float(power)
        presets = self.state.settings.available_powers
        if power not in presets:
            return False
        if len(presets) == 1:
            raise InvalidSettingsError(
                REASON_NO_POWER_PRESETS,
                "The last charging power preset cannot be removed",
            )

        await self.async_update_settings(
            available_powers=tuple(p for p in presets if p != power)
        )
        await self.events.emit(
            TimerEvent.POWER_PRESETS_UPDATED,
            available_powers=list(self.state.settings.available_powers),
        )
        return True

    async def async_apply_options(self, options: dict[str, Any]) -> None:
        """Apply values saved by the options flow."""
        changes: dict[str, Any] = {}
        if CONF_BATTERY_CAPACITY in options:
            changes["battery_capacity"] = float(options[CONF_BATTERY_CAPACITY])
        if CONF_AVAILABLE_POWERS in options:
            changes["available_powers"] = options[CONF_AVAILABLE_POWERS]
        if changes:
            await self.async_update_settings(**changes)

        interval = int(options.get(CONF_UPDATE_INTERVAL, self.state.update_interval_seconds))
        if interval != self.state.update_interval_seconds:
            self.state.update_interval_seconds = interval
            self._cancel_ticker()
            self._ensure_ticker()
            self._logger.info("UPDATE_INTERVAL_CHANGED", seconds=interval)

    # ========== Ticker ==========

    def _ensure_ticker(self) -> None:
        """Run the ticker exactly while a session is running."""
        if self.state.session.is_running:
            if self._unsub_ticker is None:
                self._unsub_ticker = async_track_time_interval(
                    self.hass,
                    self._handle_tick,
                    timedelta(seconds=self.state.update_interval_seconds),
                )
                self._logger.debug("TICKER_STARTED", seconds=self.state.update_interval_seconds)
        else:
            self._cancel_ticker()

    def _cancel_ticker(self) -> None:
        if self._unsub_ticker is not None:
            self._unsub_ticker()
            self._unsub_ticker = None
            self._logger.debug("TICKER_STOPPED")

    @property
    def is_ticking(self) -> bool:
        """Check if the refresh ticker is active."""
        return self._unsub_ticker is not None

    async def _handle_tick(self, _now: datetime) -> None:
        """Periodic recompute while charging."""
        self._recompute()
        await self._publish_status()

    # ========== Utility ==========

    def _recompute(self, now: int | None = None) -> None:
        """Swap in a fresh status for the current settings and session."""
        if now is None:
            now = self.now()
        self.state.status = get_charging_status(self.state.settings, self.state.session, now)

    async def _publish_status(self) -> None:
        """Emit the status, announcing completion once per session."""
        status = self.state.status
        if status.is_complete and not self.state.completion_reported:
            self.state.completion_reported = True
            self._logger.info("SESSION_COMPLETED", **status.to_dict())
            self.hass.bus.async_fire(
                EVENT_SESSION_COMPLETE,
                {
                    "entry_id": self.entry.entry_id,
                    "start_time": status.start_time,
                    "max_percent": self.state.settings.max_percent,
                },
            )
            await self.events.emit(TimerEvent.SESSION_COMPLETED, **status.to_dict())
            return

        await self.events.emit(TimerEvent.STATUS_UPDATED)
