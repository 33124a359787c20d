"""Main entry point for the occupancy timer service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from hackspace_timer.api import system_router, timer_router
from hackspace_timer.core.counter import get_countdown_counter
from hackspace_timer.core.settings import settings
from hackspace_timer.services.decay import DecayWorker
from hackspace_timer.services.discord import get_discord_client
from hackspace_timer.services.status_message import StartupError, announce_status_message

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Hackspace Timer",
    description="Tracks how long the space will stay occupied",
    version=settings.app_version,
)

app.include_router(timer_router)
app.include_router(system_router)


@app.on_event("startup")
async def on_startup() -> None:
    if not settings.discord_configured or settings.discord_channel is None:
        raise StartupError("DISCORD_TOKEN and DISCORD_CHANNEL must both be configured")

    logger.info("Announcing status message in channel %d", settings.discord_channel)

    client = get_discord_client()
    handle = await announce_status_message(client, settings.discord_channel, settings.empty_text)

    worker = DecayWorker(
        get_countdown_counter(),
        client,
        handle,
        interval_seconds=settings.tick_interval_seconds,
        tick_amount_ms=settings.tick_amount_ms,
    )
    await worker.start()
    app.state.decay_worker = worker
    logger.info(
        "Serving with status message %d in channel %d",
        handle.message_id,
        handle.channel_id,
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: DecayWorker | None = getattr(app.state, "decay_worker", None)
    if worker:
        await worker.stop()
        app.state.decay_worker = None
    await get_discord_client().close()
    logger.info("Shutdown complete")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the service."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "timer": "/timer",
        "docs": "/docs",
    }


def configure_logging() -> None:
    """Install a basic log format at the configured level."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    """Run the service under uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run(
        "hackspace_timer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
