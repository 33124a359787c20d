"""Human-readable rendering of the remaining occupancy time."""

from __future__ import annotations

from typing import Final

from hackspace_timer.core.settings import settings

MS_PER_SECOND: Final[int] = 1000
SECONDS_PER_MINUTE: Final[int] = 60
MINUTES_PER_HOUR: Final[int] = 60


def format_status(
    remaining_ms: int,
    *,
    prefix: str | None = None,
    empty_text: str | None = None,
    emoji: str | None = None,
) -> str:
    """Render ``remaining_ms`` as the status text shown in the channel.

    Anything under a whole minute, including zero, renders as the
    "nobody present" text. Texts default to the configured ones.
    """
    prefix = settings.occupied_prefix if prefix is None else prefix
    empty_text = settings.empty_text if empty_text is None else empty_text
    emoji = settings.status_emoji if emoji is None else emoji

    total_minutes = remaining_ms // MS_PER_SECOND // SECONDS_PER_MINUTE
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)

    if hours > 0:
        return f"{prefix} {hours} hours and {minutes} minutes {emoji}"
    if minutes > 0:
        return f"{prefix} {minutes} minutes {emoji}"
    return empty_text
