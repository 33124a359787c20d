"""API endpoint modules."""

from .system import router as system_router
from .timer import router as timer_router

__all__ = [
    "system_router",
    "timer_router",
]
