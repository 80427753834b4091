"""Test the event bus and structured logger."""
import logging

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from custom_components.ev_charging_timer.const import SIGNAL_UPDATE
from custom_components.ev_charging_timer.core.events import TimerEvent, TimerEventBus
from custom_components.ev_charging_timer.timer_logging import TimerLogger


@pytest.mark.asyncio
async def test_emit_calls_handlers_and_dispatches(hass: HomeAssistant):
    """Handlers receive the data and entities get the update signal."""
    bus = TimerEventBus(hass)
    received = []
    dispatched = []

    async def handler(event_data):
        received.append(event_data)

    bus.on(TimerEvent.SESSION_STARTED, handler)
    async_dispatcher_connect(hass, SIGNAL_UPDATE, lambda: dispatched.append(True))

    await bus.emit(TimerEvent.SESSION_STARTED, start_time=123)
    await hass.async_block_till_done()

    assert len(received) == 1
    assert received[0].event is TimerEvent.SESSION_STARTED
    assert received[0].data == {"start_time": 123}
    assert dispatched


@pytest.mark.asyncio
async def test_unsubscribe(hass: HomeAssistant):
    """An unsubscribed handler is not called."""
    bus = TimerEventBus(hass)
    received = []

    async def handler(event_data):
        received.append(event_data)

    unsub = bus.on(TimerEvent.STATUS_UPDATED, handler)
    unsub()
    await bus.emit(TimerEvent.STATUS_UPDATED)

    assert received == []


@pytest.mark.asyncio
async def test_failing_handler_does_not_block_others(hass: HomeAssistant, caplog):
    """A handler error is logged and the next handler still runs."""
    bus = TimerEventBus(hass)
    received = []

    async def broken(event_data):
        raise RuntimeError("boom")

    async def working(event_data):
        received.append(event_data)

    dispatched = []

    bus.on(TimerEvent.SESSION_STOPPED, broken)
    bus.on(TimerEvent.SESSION_STOPPED, working)
    async_dispatcher_connect(hass, SIGNAL_UPDATE, lambda: dispatched.append(True))

    with caplog.at_level(logging.ERROR):
        await bus.emit(TimerEvent.SESSION_STOPPED, start_time=5)
    await hass.async_block_till_done()

    assert len(received) == 1
    assert received[0].data == {"start_time": 5}
    assert "EVENT_HANDLER_ERROR" in caplog.text
    assert "failed_event=SESSION_STOPPED" in caplog.text
    assert "handler=broken" in caplog.text
    assert "boom" in caplog.text
    assert dispatched


def test_logger_formats_event(caplog):
    """Events are logged as NAME | key=value."""
    logger = TimerLogger(name="test")

    with caplog.at_level(logging.INFO, logger="custom_components.ev_charging_timer.test"):
        logger.info("SESSION_STARTED", start_time=1, total_minutes=180)

    assert "SESSION_STARTED | start_time=1 | total_minutes=180" in caplog.text


def test_logger_file_output(tmp_path):
    """File logging writes JSON lines and stops cleanly."""
    logger = TimerLogger(name="file_test", log_dir=tmp_path)

    logger.set_file_logging(True)
    logger.info("SESSION_STOPPED", start_time=5)
    logger.set_file_logging(False)

    lines = logger.log_file.read_text(encoding="utf-8").splitlines()
    assert any('"event": "SESSION_STOPPED"' in line for line in lines)
    assert logger.get_log_size_kb() > 0
