"""Structured event logger for the EV Charging Timer.

Every event goes to the Home Assistant log as ``EVENT | key=value``.
When file logging is enabled, the same event is also written as a JSON
line to a rotating file. File I/O happens on a background thread so the
event loop is never blocked.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

_SENTINEL = None


class TimerLogger:
    """Event logger with optional JSON-lines file output.

    Features:
    - Always logs to HA logs at the requested level
    - Rotating JSON-lines file (max 2MB, 3 backups) when enabled
    - All file I/O runs in a background thread (non-blocking)
    """

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    _LEVELS = {
        CRITICAL: logging.CRITICAL,
        ERROR: logging.ERROR,
        WARNING: logging.WARNING,
        INFO: logging.INFO,
        DEBUG: logging.DEBUG,
    }

    def __init__(
        self,
        name: str = "timer",
        log_dir: Path | None = None,
        file_logging_enabled: bool = False,
        max_file_size_mb: int = 2,
        backup_count: int = 3,
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name suffix
            log_dir: Directory for the JSON log (default: component dir/log)
            file_logging_enabled: Whether to start writing to file right away
            max_file_size_mb: Max size of the rotating log file
            backup_count: Number of rotated files to keep
        """
        self.name = name
        self._max_file_size_mb = max_file_size_mb
        self._backup_count = backup_count

        if log_dir is None:
            log_dir = Path(__file__).parent.parent / "log"
        self.log_dir = log_dir
        self.log_file = self.log_dir / "ev_charging_timer.jsonl"

        self._ha_logger = logging.getLogger(f"custom_components.ev_charging_timer.{name}")

        self._file_logging_enabled = False
        self._write_queue: queue.Queue = queue.Queue()
        self._writer_thread: threading.Thread | None = None

        if file_logging_enabled:
            self.set_file_logging(True)

    # ========== File writer ==========

    def _start_writer_thread(self) -> None:
        """Start the background writer thread."""
        if self._writer_thread is not None and self._writer_thread.is_alive():
            return

        self._writer_thread = threading.Thread(
            target=self._writer_loop,
            name="EVChargingTimerLogWriter",
            daemon=True,
        )
        self._writer_thread.start()

    def _stop_writer_thread(self) -> None:
        """Ask the writer thread to flush and exit."""
        if self._writer_thread is None:
            return
        self._write_queue.put(_SENTINEL)
        self._writer_thread.join(timeout=2.0)
        self._writer_thread = None

    def _writer_loop(self) -> None:
        """Background loop that drains the write queue."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                self.log_file,
                maxBytes=self._max_file_size_mb * 1024 * 1024,
                backupCount=self._backup_count,
                encoding="utf-8",
            )
        except OSError as ex:
            _LOGGER.error("Failed to open log file %s: %s", self.log_file, ex)
            return

        handler.setFormatter(logging.Formatter("%(message)s"))

        try:
            while True:
                line = self._write_queue.get()
                if line is _SENTINEL:
                    break
                handler.emit(
                    logging.LogRecord(
                        self._ha_logger.name, logging.INFO, "", 0, line, None, None
                    )
                )
        finally:
            handler.close()

    # ========== Public API ==========

    def log(self, level: str, event: str, **data: Any) -> None:
        """Log an event at the given level.

        Args:
            level: One of critical, error, warning, info, debug
            event: Event name (e.g., "SESSION_STARTED")
            **data: Additional context
        """
        message = event
        if data:
            message = f"{event} | " + " | ".join(f"{k}={v}" for k, v in data.items())

        self._ha_logger.log(self._LEVELS.get(level, logging.DEBUG), message)

        if self._file_logging_enabled:
            entry = {
                "timestamp": datetime.now().isoformat(timespec="milliseconds"),
                "level": level,
                "event": event,
                "data": data,
            }
            self._write_queue.put_nowait(json.dumps(entry, default=str))

    def critical(self, event: str, **data: Any) -> None:
        """Log critical event."""
        self.log(self.CRITICAL, event, **data)

    def error(self, event: str, **data: Any) -> None:
        """Log error event."""
        self.log(self.ERROR, event, **data)

    def warning(self, event: str, **data: Any) -> None:
        """Log warning event."""
        self.log(self.WARNING, event, **data)

    def info(self, event: str, **data: Any) -> None:
        """Log info event."""
        self.log(self.INFO, event, **data)

    def debug(self, event: str, **data: Any) -> None:
        """Log debug event."""
        self.log(self.DEBUG, event, **data)

    def set_file_logging(self, enabled: bool) -> None:
        """Enable or disable the JSON-lines file."""
        if enabled == self._file_logging_enabled:
            return

        if enabled:
            self._start_writer_thread()
            self._file_logging_enabled = True
        else:
            self._file_logging_enabled = False
            self._stop_writer_thread()

        self.info("FILE_LOGGING_CHANGED", enabled=enabled)

    @property
    def file_logging_enabled(self) -> bool:
        """Check if file logging is enabled."""
        return self._file_logging_enabled

    def get_log_size_kb(self) -> float:
        """Size of the current and rotated log files in KB.

        Note: blocking I/O - call from executor if in async context.
        """
        total = 0
        for path in self.log_dir.glob(f"{self.log_file.name}*"):
            try:
                total += path.stat().st_size
            except OSError:
                continue
        return round(total / 1024, 2)


# Singleton instance
_logger_instance: TimerLogger | None = None


def get_logger() -> TimerLogger:
    """Get or create the singleton logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = TimerLogger()
    return _logger_instance
