"""Spotlight service configuration loaded from environment variables."""
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from spotlight.native.types import DISPLAY_NAME_ATTRIBUTE


class Settings(BaseSettings):
    """Configuration loaded from SPOTLIGHT_* environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        log_json: Emit JSON log lines. Plain console lines when False.
        key: API key for authenticating requests. Empty disables auth.
        shutdown_timeout: Seconds to wait for graceful shutdown.
        poll_interval_ms: Milliseconds between native run-loop ticks.
        run_loop_timeout: Seconds each run-loop pass may wait for a source.
        result_attribute: Metadata attribute returned for each result.
        search_timeout: Default seconds an HTTP search may take.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPOTLIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_json: bool = True
    key: str = ""
    shutdown_timeout: float = 30.0

    poll_interval_ms: int = Field(default=50, gt=0)
    run_loop_timeout: float = Field(default=0.0, ge=0.0)
    result_attribute: str = DISPLAY_NAME_ATTRIBUTE
    search_timeout: float = Field(default=30.0, gt=0.0)

    @computed_field
    @property
    def poll_interval(self) -> float:
        """Poll tick interval in seconds."""
        return self.poll_interval_ms / 1000.0
