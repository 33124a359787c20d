"""Discord REST client used as the status sink.

This module provides the DiscordClient class that handles all communication
with the Discord HTTP API. It includes:

- Lazily created HTTP client with bot authentication
- Message creation, listing and editing for the status message
- Publish statistics for monitoring
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from hackspace_timer.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_MULTIPLE_CHOICES = 300


class DiscordError(RuntimeError):
    """Base exception raised for Discord API failures."""


class DiscordNotConfiguredError(DiscordError):
    """Raised when the bot token or target channel is missing."""


@dataclass(frozen=True)
class DiscordConfig:
    """Immutable configuration for Discord operations."""

    token: str | None
    base_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class DiscordMessage:
    """The parts of a Discord message the timer cares about."""

    id: int
    channel_id: int
    content: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> DiscordMessage:
        """Build a message from a Discord API message object."""
        try:
            return cls(
                id=int(payload["id"]),
                channel_id=int(payload["channel_id"]),
                content=str(payload.get("content") or ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DiscordError(f"Malformed Discord message payload: {exc}") from exc


@dataclass
class PublishMetrics:
    """Counters for status message edits."""

    attempts: int = 0
    successes: int = 0
    failures: int = 0
    last_error: str | None = None
    last_success_at: float | None = None

    def record_success(self) -> None:
        """Record a successful publish."""
        self.attempts += 1
        self.successes += 1
        self.last_success_at = time.time()

    def record_failure(self, error: Exception) -> None:
        """Record a failed publish."""
        self.attempts += 1
        self.failures += 1
        self.last_error = str(error)


def load_discord_config() -> DiscordConfig:
    """Build configuration object from global settings."""

    return DiscordConfig(
        token=settings.discord_token,
        base_url=settings.discord_api_base_url,
        timeout_seconds=float(settings.discord_http_timeout_seconds),
    )


class DiscordClient:
    """HTTP client wrapper for the Discord channel message endpoints."""

    def __init__(
        self,
        config: DiscordConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_discord_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()
        self._metrics = PublishMetrics()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.config.token:
            raise DiscordNotConfiguredError("Discord bot token is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers={"Authorization": f"Bot {self.config.token}"},
                    transport=self._transport,
                )

        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_data: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        client = await self._ensure_client()
        try:
            response = await client.request(method, path, json=json_data, params=params)
        except httpx.HTTPError as exc:
            raise DiscordError(f"Discord request {method} {path} failed: {exc}") from exc

        if response.status_code >= HTTP_MULTIPLE_CHOICES:
            raise DiscordError(
                f"Discord responded with {response.status_code} for {method} {path}",
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DiscordError(f"Discord returned invalid JSON for {method} {path}") from exc

    async def create_message(self, channel_id: int, content: str) -> DiscordMessage:
        """Post a new message to ``channel_id``."""
        payload = await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            json_data={"content": content},
        )
        return DiscordMessage.from_payload(payload)

    async def channel_messages(self, channel_id: int, limit: int = 1) -> list[DiscordMessage]:
        """Return the most recent messages in ``channel_id``, newest first."""
        if not 1 <= limit <= 100:
            raise ValueError("limit must be between 1 and 100")

        payload = await self._request(
            "GET",
            f"/channels/{channel_id}/messages",
            params={"limit": limit},
        )
        if not isinstance(payload, list):
            raise DiscordError("Discord returned a non-list channel message payload")
        return [DiscordMessage.from_payload(item) for item in payload]

    async def update_message(
        self, channel_id: int, message_id: int, content: str
    ) -> DiscordMessage:
        """Replace the content of an existing message."""
        payload = await self._request(
            "PATCH",
            f"/channels/{channel_id}/messages/{message_id}",
            json_data={"content": content},
        )
        return DiscordMessage.from_payload(payload)

    async def publish(self, channel_id: int, message_id: int, text: str) -> None:
        """Show ``text`` in the status message, recording the outcome."""
        try:
            await self.update_message(channel_id, message_id, text)
        except DiscordError as exc:
            self._metrics.record_failure(exc)
            raise
        self._metrics.record_success()

    def get_metrics(self) -> dict[str, Any]:
        """Get publish statistics."""
        return {
            "attempts": self._metrics.attempts,
            "successes": self._metrics.successes,
            "failures": self._metrics.failures,
            "last_error": self._metrics.last_error,
            "last_success_at": self._metrics.last_success_at,
        }

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _DiscordClientSingleton:
    """Singleton wrapper for DiscordClient."""

    _instance: DiscordClient | None = None

    @classmethod
    def get_instance(cls) -> DiscordClient:
        """Get or create the singleton DiscordClient instance."""
        if cls._instance is None:
            cls._instance = DiscordClient()
        return cls._instance


def get_discord_client() -> DiscordClient:
    """Return a singleton Discord client instance."""
    return _DiscordClientSingleton.get_instance()
