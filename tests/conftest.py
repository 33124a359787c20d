# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("DISCORD_CHANNEL", "111111111111111111")

from hackspace_timer.core import counter as counter_module
from hackspace_timer.core.counter import CountdownCounter
from hackspace_timer.core.settings import settings
from hackspace_timer.main import app as fastapi_app
from hackspace_timer.services import discord as discord_module
from hackspace_timer.services.discord import DiscordError, DiscordMessage

STATUS_MESSAGE_ID = 222222222222222222


class FakeDiscordClient:
    """In-memory stand-in for DiscordClient that records every call."""

    def __init__(self) -> None:
        self.created: list[tuple[int, str]] = []
        self.published: list[tuple[int, int, str]] = []
        self.fail_publish = False
        self.closed = False
        self._next_id = STATUS_MESSAGE_ID

    async def create_message(self, channel_id: int, content: str) -> DiscordMessage:
        self.created.append((channel_id, content))
        message = DiscordMessage(id=self._next_id, channel_id=channel_id, content=content)
        self._next_id += 1
        return message

    async def channel_messages(self, channel_id: int, limit: int = 1) -> list[DiscordMessage]:
        if not self.created:
            return []
        last_channel, last_content = self.created[-1]
        return [DiscordMessage(id=self._next_id - 1, channel_id=last_channel, content=last_content)]

    async def publish(self, channel_id: int, message_id: int, text: str) -> None:
        if self.fail_publish:
            raise DiscordError("Discord responded with 500")
        self.published.append((channel_id, message_id, text))

    def get_metrics(self) -> dict[str, Any]:
        return {"attempts": len(self.published), "failures": 0}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_discord(monkeypatch: pytest.MonkeyPatch) -> FakeDiscordClient:
    client = FakeDiscordClient()
    monkeypatch.setattr(discord_module._DiscordClientSingleton, "_instance", client)
    return client


@pytest.fixture()
def counter(monkeypatch: pytest.MonkeyPatch) -> CountdownCounter:
    """Provide a fresh process-wide counter for each test."""
    fresh = CountdownCounter(ceiling_ms=settings.ceiling_ms)
    monkeypatch.setattr(counter_module._CountdownCounterSingleton, "_instance", fresh)
    return fresh


@pytest.fixture()
def app(fake_discord: FakeDiscordClient, counter: CountdownCounter) -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
