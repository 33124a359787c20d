"""Countdown endpoints.

Both responses are the remaining time in milliseconds as plain decimal text.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from hackspace_timer.api.dependencies import CounterDep
from hackspace_timer.core.settings import settings

router = APIRouter(prefix="/timer", tags=["timer"])


@router.post("", response_class=PlainTextResponse)
def extend_timer(counter: CounterDep) -> str:
    """Add one hour to the countdown and return the new remaining time.

    The countdown resets to zero when the addition would exceed the ceiling.
    """
    return str(counter.extend(settings.hour_increment_ms))


@router.get("", response_class=PlainTextResponse)
def read_timer(counter: CounterDep) -> str:
    """Return the remaining time without changing it."""
    return str(counter.load())
