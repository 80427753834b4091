"""Exceptions for the EV Charging Timer integration."""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class InvalidSettingsError(HomeAssistantError):
    """Raised when a settings edit would break the estimator."""

    def __init__(self, reason: str, message: str) -> None:
        """Initialize.

        Args:
            reason: Machine-readable key, also used as config flow error
            message: Human-readable description
        """
        super().__init__(message)
        self.reason = reason
