"""Background countdown decay.

This module provides the DecayWorker class which, on a fixed period, removes
one tick from the shared countdown and publishes the resulting status text to
the channel status message.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from hackspace_timer.core.counter import CountdownCounter
from hackspace_timer.core.settings import settings
from hackspace_timer.core.status import format_status
from hackspace_timer.services.discord import DiscordError
from hackspace_timer.services.status_message import StatusMessageHandle, StatusSink

# Configure logger for this module
logger = logging.getLogger(__name__)


class DecayWorker:
    """Periodically decrements the countdown and publishes its status.

    Publish failures are logged and never interrupt the tick cadence; the next
    tick publishes again.
    """

    def __init__(
        self,
        counter: CountdownCounter,
        sink: StatusSink,
        handle: StatusMessageHandle,
        *,
        interval_seconds: float | None = None,
        tick_amount_ms: int | None = None,
    ) -> None:
        """Initialize the decay worker.

        Args:
            counter: Shared countdown to decrement.
            sink: Client used to edit the status message.
            handle: Identifiers of the status message to edit.
            interval_seconds: Sleep between ticks. Defaults to the configured interval.
            tick_amount_ms: Amount removed per tick. Defaults to the interval in ms.
        """
        self.counter = counter
        self.sink = sink
        self.handle = handle
        self.interval_seconds = (
            float(settings.tick_interval_seconds) if interval_seconds is None else interval_seconds
        )
        self.tick_amount_ms = (
            int(self.interval_seconds * 1000) if tick_amount_ms is None else tick_amount_ms
        )
        self.ticks = 0
        self.last_status: str | None = None
        self.last_error: str | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background decay loop."""

        if self.running:
            return

        self._stopping.clear()
        self._task = asyncio.create_task(self._run())
        logger.info(
            "Decay worker started: %d ms every %.1f s",
            self.tick_amount_ms,
            self.interval_seconds,
        )

    async def stop(self) -> None:
        """Stop the background decay loop and wait for it to finish."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Decay worker stopped after %d ticks", self.ticks)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval_seconds)
            if self._stopping.is_set():
                return
            await self.tick_once()

    async def tick_once(self) -> str:
        """Run one tick and return the status text that was published."""
        remaining_ms = self.counter.tick_decrement(self.tick_amount_ms)
        status_text = format_status(remaining_ms)
        self.ticks += 1
        self.last_status = status_text
        logger.debug("Tick %d: %d ms remaining", self.ticks, remaining_ms)

        try:
            await self.sink.publish(self.handle.channel_id, self.handle.message_id, status_text)
        except DiscordError as exc:
            self.last_error = str(exc)
            logger.warning("Failed to update status message %d: %s", self.handle.message_id, exc)
        except (OSError, ConnectionError, TimeoutError) as exc:
            self.last_error = str(exc)
            logger.warning(
                "Network error updating status message %d: %s", self.handle.message_id, exc
            )
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            self.last_error = str(exc)
            logger.error(
                "Error updating status message %d: %s",
                self.handle.message_id,
                exc,
                exc_info=True,
            )
        else:
            self.last_error = None

        return status_text
