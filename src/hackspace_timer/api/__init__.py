"""HTTP API for the occupancy timer."""

from .endpoints import system_router, timer_router

__all__ = [
    "system_router",
    "timer_router",
]
