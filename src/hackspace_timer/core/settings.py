"""Application settings and configuration.

This module defines all configuration options for the occupancy timer.
Settings are loaded from environment variables, an optional ``.env`` file and
an optional ``Secrets.toml`` file, with sensible defaults for everything except
the Discord credentials.
"""

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables, a ``.env`` file or
    the ``Secrets.toml`` file used by existing deployments. Environment
    variables take precedence over both files.
    """

    # Application metadata
    app_name: str = Field(default="Hackspace Timer", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # HTTP server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Discord status message integration
    discord_token: str | None = Field(default=None, alias="DISCORD_TOKEN")
    discord_channel: int | None = Field(default=None, alias="DISCORD_CHANNEL")
    discord_api_base_url: str = Field(
        default="https://discord.com/api/v10",
        alias="DISCORD_API_BASE_URL",
    )
    discord_http_timeout_seconds: float = Field(
        default=10.0,
        alias="DISCORD_HTTP_TIMEOUT_SECONDS",
    )

    # Countdown behaviour
    hour_increment_ms: int = Field(default=3_600_000, alias="HOUR_INCREMENT_MS", gt=0)
    ceiling_hours: int = Field(default=6, alias="CEILING_HOURS", gt=0)
    tick_interval_seconds: int = Field(default=10, alias="TICK_INTERVAL_SECONDS", gt=0)

    # Status message texts
    space_name: str = Field(default="HackManhattan", alias="SPACE_NAME")
    status_emoji: str = Field(default="\U0001f920", alias="STATUS_EMOJI")
    empty_status_text: str | None = Field(default=None, alias="EMPTY_STATUS_TEXT")
    occupied_status_prefix: str | None = Field(default=None, alias="OCCUPIED_STATUS_PREFIX")

    model_config = SettingsConfigDict(
        env_file=".env",
        toml_file="Secrets.toml",
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Add ``Secrets.toml`` as the lowest-priority file source."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def ceiling_ms(self) -> int:
        """Return the largest countdown value kept before a reset."""
        return self.hour_increment_ms * self.ceiling_hours

    @property
    def tick_amount_ms(self) -> int:
        """Return the amount removed from the countdown on every tick."""
        return self.tick_interval_seconds * 1000

    @property
    def discord_configured(self) -> bool:
        """Return True when both the bot token and target channel are set."""
        return bool(self.discord_token) and self.discord_channel is not None

    @property
    def empty_text(self) -> str:
        """Return the status text shown when nobody is in the space."""
        if self.empty_status_text:
            return self.empty_status_text
        return f"There is no one in {self.space_name} \U0001f634"

    @property
    def occupied_prefix(self) -> str:
        """Return the status text prefix used while the space is occupied."""
        if self.occupied_status_prefix:
            return self.occupied_status_prefix
        return f"{self.space_name} will have people in it for the next"


settings = Settings()  # type: ignore[call-arg]
