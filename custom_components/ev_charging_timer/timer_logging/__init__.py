"""Structured logging module for EV Charging Timer."""

from .unified_logger import TimerLogger, get_logger

__all__ = ["TimerLogger", "get_logger"]
