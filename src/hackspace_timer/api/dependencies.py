"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends

from hackspace_timer.core.counter import CountdownCounter, get_countdown_counter


def get_counter_dep() -> CountdownCounter:
    """Get the shared countdown counter for dependency injection."""
    return get_countdown_counter()


# Type alias for the counter dependency
CounterDep = Annotated[CountdownCounter, Depends(get_counter_dep)]
