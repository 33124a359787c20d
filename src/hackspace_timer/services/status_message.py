"""Creation and lookup of the channel message that carries the status."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from hackspace_timer.services.discord import DiscordError, DiscordMessage

logger = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the service cannot reach a state where it may serve."""


class StatusSink(Protocol):
    """Subset of the chat client the timer relies on."""

    async def create_message(self, channel_id: int, content: str) -> DiscordMessage: ...

    async def channel_messages(
        self, channel_id: int, limit: int = 1
    ) -> list[DiscordMessage]: ...

    async def publish(self, channel_id: int, message_id: int, text: str) -> None: ...


@dataclass(frozen=True)
class StatusMessageHandle:
    """Channel and message identifiers of the status message."""

    channel_id: int
    message_id: int


async def announce_status_message(
    sink: StatusSink, channel_id: int, text: str
) -> StatusMessageHandle:
    """Post the initial status message and return a handle for later edits.

    The message is created first, then the most recent message in the channel
    is fetched and its id is the one edited from then on.

    Raises:
        StartupError: If either call fails or the channel has no messages.
    """
    try:
        created = await sink.create_message(channel_id, text)
    except DiscordError as exc:
        raise StartupError(f"Could not create the initial status message: {exc}") from exc
    logger.info("Created status message %d in channel %d", created.id, channel_id)

    try:
        messages = await sink.channel_messages(channel_id, limit=1)
    except DiscordError as exc:
        raise StartupError(f"Could not list messages in channel {channel_id}: {exc}") from exc

    if not messages:
        raise StartupError(f"No message found in channel {channel_id}")

    handle = StatusMessageHandle(channel_id=channel_id, message_id=messages[0].id)
    logger.info("Editing status message %d from now on", handle.message_id)
    return handle
