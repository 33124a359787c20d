"""Service status endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from hackspace_timer.api.dependencies import CounterDep
from hackspace_timer.core.settings import settings
from hackspace_timer.core.status import format_status
from hackspace_timer.services.decay import DecayWorker
from hackspace_timer.services.discord import get_discord_client

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/status")
async def get_system_status(request: Request, counter: CounterDep) -> dict[str, object]:
    """Get the countdown state and status message health.

    Args:
        request: Incoming request, used to reach the running decay worker
        counter: Shared countdown counter

    Returns:
        Dictionary with the countdown, its rendered status text, the decay
        worker state and status message publish metrics
    """
    remaining_ms = counter.load()
    worker: DecayWorker | None = getattr(request.app.state, "decay_worker", None)

    return {
        "service": "hackspace-timer",
        "version": settings.app_version,
        "timestamp": int(time.time()),
        "countdown": {
            "remaining_ms": remaining_ms,
            "ceiling_ms": counter.ceiling_ms,
            "status_text": format_status(remaining_ms),
        },
        "decay": {
            "running": bool(worker and worker.running),
            "interval_seconds": settings.tick_interval_seconds,
            "tick_amount_ms": settings.tick_amount_ms,
            "ticks": worker.ticks if worker else 0,
            "last_error": worker.last_error if worker else None,
        },
        "discord": get_discord_client().get_metrics(),
    }
