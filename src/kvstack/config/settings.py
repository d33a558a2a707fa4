"""Configuration settings using Pydantic Settings.

Provides typed backend configuration with environment variable support.

Usage:
    from kvstack.config import StoreSettings

    # Load from environment variables (KVSTACK_*)
    settings = StoreSettings()

    # Or override with explicit values
    settings = StoreSettings(url="redis://cache:6379", db=3)
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kvstack.backend.retry import RetryPolicy


class StoreSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the Redis backend.

    Attributes:
        url: Redis URL. A database in the URL path overrides db.
        db: Logical database number (the partition all keys live in).
        socket_timeout: Per-command timeout in seconds (None = no timeout).
        max_attempts: Attempts per command on connection failure (1 = no retry).
        backoff: Backoff strategy between retries.
        base_delay: Base delay in seconds for backoff calculation.

    Environment Variables:
        KVSTACK_URL
        KVSTACK_DB
        KVSTACK_SOCKET_TIMEOUT
        KVSTACK_MAX_ATTEMPTS
        KVSTACK_BACKOFF
        KVSTACK_BASE_DELAY
    """

    model_config = SettingsConfigDict(
        env_prefix="KVSTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = "redis://localhost:6379"
    db: int = Field(default=0, ge=0)
    socket_timeout: float | None = None
    max_attempts: int = Field(default=1, ge=1)
    backoff: Literal["none", "linear", "exponential"] = "none"
    base_delay: float = Field(default=0.1, ge=0)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            base_delay=self.base_delay,
        )
