"""Tests for the background decay worker."""

from __future__ import annotations

import asyncio
import logging

import pytest

from hackspace_timer.core.counter import CountdownCounter
from hackspace_timer.core.status import format_status
from hackspace_timer.services.decay import DecayWorker
from hackspace_timer.services.status_message import StatusMessageHandle
from tests.conftest import FakeDiscordClient

HOUR_MS = 3_600_000
HANDLE = StatusMessageHandle(channel_id=10, message_id=20)


def _worker(
    counter: CountdownCounter, sink: FakeDiscordClient, interval: float = 10.0
) -> DecayWorker:
    return DecayWorker(counter, sink, HANDLE, interval_seconds=interval)


@pytest.mark.asyncio
async def test_tick_decrements_and_publishes() -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    sink = FakeDiscordClient()
    worker = _worker(counter, sink)

    text = await worker.tick_once()

    assert worker.tick_amount_ms == 10_000
    assert counter.load() == 3_590_000
    assert text == format_status(3_590_000)
    assert sink.published == [(10, 20, text)]
    assert worker.ticks == 1
    assert worker.last_status == text


@pytest.mark.asyncio
async def test_tick_on_empty_counter_publishes_empty_text() -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS)
    sink = FakeDiscordClient()

    text = await _worker(counter, sink).tick_once()

    assert counter.load() == 0
    assert text == format_status(0)
    assert sink.published[0][2] == text


@pytest.mark.asyncio
async def test_publish_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    sink = FakeDiscordClient()
    sink.fail_publish = True
    worker = _worker(counter, sink)

    with caplog.at_level(logging.WARNING, logger="hackspace_timer.services.decay"):
        await worker.tick_once()

    assert counter.load() == HOUR_MS - 10_000
    assert worker.last_error is not None
    assert "Failed to update status message" in caplog.text

    sink.fail_publish = False
    await worker.tick_once()
    assert worker.last_error is None
    assert counter.load() == HOUR_MS - 20_000


@pytest.mark.asyncio
async def test_loop_keeps_ticking_through_failures() -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    sink = FakeDiscordClient()
    sink.fail_publish = True
    worker = DecayWorker(counter, sink, HANDLE, interval_seconds=0.01, tick_amount_ms=1_000)

    await worker.start()
    assert worker.running
    for _ in range(200):
        if worker.ticks >= 3:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert worker.ticks >= 3
    assert worker.running is False
    assert counter.load() == HOUR_MS - worker.ticks * 1_000


@pytest.mark.asyncio
async def test_stop_returns_before_first_tick() -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    sink = FakeDiscordClient()
    worker = _worker(counter, sink, interval=60.0)

    await worker.start()
    await asyncio.wait_for(worker.stop(), timeout=1.0)

    assert worker.ticks == 0
    assert counter.load() == HOUR_MS
    assert sink.published == []


@pytest.mark.asyncio
async def test_start_twice_keeps_single_task() -> None:
    worker = _worker(CountdownCounter(ceiling_ms=HOUR_MS), FakeDiscordClient(), interval=60.0)

    await worker.start()
    task = worker._task
    await worker.start()

    assert worker._task is task
    await worker.stop()


@pytest.mark.asyncio
async def test_stop_without_start_is_noop() -> None:
    worker = _worker(CountdownCounter(ceiling_ms=HOUR_MS), FakeDiscordClient())
    await worker.stop()
    assert worker.running is False


class _BrokenSocketSink(FakeDiscordClient):
    async def publish(self, channel_id: int, message_id: int, text: str) -> None:
        raise OSError("socket died")


class _BadPayloadSink(FakeDiscordClient):
    async def publish(self, channel_id: int, message_id: int, text: str) -> None:
        raise KeyError("id")


@pytest.mark.asyncio
async def test_network_error_from_sink_does_not_stop_loop(
    caplog: pytest.LogCaptureFixture,
) -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    worker = DecayWorker(
        counter, _BrokenSocketSink(), HANDLE, interval_seconds=0.01, tick_amount_ms=1_000
    )

    with caplog.at_level(logging.WARNING, logger="hackspace_timer.services.decay"):
        await worker.start()
        for _ in range(200):
            if worker.ticks >= 3:
                break
            await asyncio.sleep(0.01)
        assert worker.running
        await worker.stop()

    assert worker.ticks >= 3
    assert worker.last_error == "socket died"
    assert "Network error updating status message" in caplog.text
    assert counter.load() == HOUR_MS - worker.ticks * 1_000


@pytest.mark.asyncio
async def test_data_error_from_sink_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    counter = CountdownCounter(ceiling_ms=6 * HOUR_MS, initial_ms=HOUR_MS)
    worker = _worker(counter, _BadPayloadSink())

    with caplog.at_level(logging.ERROR, logger="hackspace_timer.services.decay"):
        text = await worker.tick_once()

    assert text == format_status(HOUR_MS - 10_000)
    assert worker.last_error is not None
    assert "Error updating status message" in caplog.text
