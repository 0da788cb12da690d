"""Runtime settings for latency runs."""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from http_latency.errors import InvalidConfigurationError


def _package_version() -> str:
    try:
        return version("http-latency")
    except PackageNotFoundError:
        return "0.0.0"


class LatencySettings(BaseSettings):
    """Settings read from ``HTTP_LATENCY_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_LATENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    concurrency: int = Field(
        default=10, ge=1, description="Maximum requests in flight at once"
    )
    timeout: float = Field(
        default=10.0, gt=0, description="Per-request budget in seconds"
    )
    user_agent: str = Field(
        default_factory=lambda: f"http-latency/{_package_version()}",
        min_length=1,
        description="User-Agent header sent with every request",
    )
    follow_redirects: bool = Field(
        default=True, description="Follow redirects and report the final status"
    )
    max_redirects: int = Field(default=10, ge=0, description="Redirect hop limit")


def load_settings(**overrides: Any) -> LatencySettings:
    """Load settings, applying non-None overrides on top of the environment.

    Raises:
        InvalidConfigurationError: If any value is out of range

    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    try:
        settings = LatencySettings()
        if not updates:
            return settings
        return LatencySettings.model_validate(settings.model_dump() | updates)
    except ValidationError as exc:
        raise InvalidConfigurationError(str(exc)) from exc
