"""
Runtime configuration for the budget service.

Uses ``pydantic_settings.BaseSettings`` for environment variable
binding, type coercion, and validation. Values can also come from
a ``.env`` file, which ``main`` loads via ``python-dotenv`` before
the settings are first read.
"""

from __future__ import annotations

import functools

import pydantic
import pydantic_settings


class Settings(pydantic_settings.BaseSettings):
    """Timeouts, concurrency, and server binding.

    Attributes:
        page_fetch_timeout_seconds: Ceiling on retrieving the page
            being analysed (connect, redirects, and body).
        head_timeout_seconds: Ceiling on each resource HEAD request.
        size_fetch_deadline_seconds: Wall-clock ceiling on the whole
            batch of HEAD requests. Anything unfinished is unknown.
        size_fetch_concurrency: Maximum HEAD requests in flight.
        user_agent: ``User-Agent`` header sent with every request.
        host: Interface uvicorn binds to.
        port: Port uvicorn listens on.
        environment: ``development`` or ``production``.
    """

    model_config = pydantic_settings.SettingsConfigDict(extra="ignore", populate_by_name=True)

    page_fetch_timeout_seconds: float = pydantic.Field(
        default=12.0, gt=0, validation_alias="PAGE_FETCH_TIMEOUT_SECONDS"
    )
    head_timeout_seconds: float = pydantic.Field(
        default=5.0, gt=0, validation_alias="HEAD_TIMEOUT_SECONDS"
    )
    size_fetch_deadline_seconds: float = pydantic.Field(
        default=20.0, gt=0, validation_alias="SIZE_FETCH_DEADLINE_SECONDS"
    )
    size_fetch_concurrency: int = pydantic.Field(
        default=10, ge=1, validation_alias="SIZE_FETCH_CONCURRENCY"
    )
    user_agent: str = pydantic.Field(
        default="ThirdPartyBudgeter/1.0", validation_alias="FETCH_USER_AGENT"
    )
    host: str = pydantic.Field(default="0.0.0.0", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
