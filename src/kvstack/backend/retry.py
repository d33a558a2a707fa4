"""Retry configuration for backend commands.

Retries only cover connection-level failures and are off by default
(max_attempts=1). Requires tenacity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import tenacity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retrying backend commands on connection failures."""

    max_attempts: int = 1
    """Maximum attempts (1 = no retry). Default: no retry."""

    backoff: Literal["none", "linear", "exponential"] = "none"
    """Backoff strategy between retries."""

    base_delay: float = 0.1
    """Base delay in seconds for backoff calculation."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    def _wait(self) -> tenacity.wait.wait_base:
        if self.backoff == "exponential":
            return tenacity.wait_exponential(multiplier=self.base_delay, min=self.base_delay)
        if self.backoff == "linear":
            return tenacity.wait_incrementing(start=self.base_delay, increment=self.base_delay)
        return tenacity.wait_none()

    def retrying(self, retry_on: tuple[type[BaseException], ...]) -> tenacity.Retrying:
        """Build a synchronous tenacity retryer."""
        return tenacity.Retrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=tenacity.retry_if_exception_type(retry_on),
            reraise=False,
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
        )

    def async_retrying(self, retry_on: tuple[type[BaseException], ...]) -> tenacity.AsyncRetrying:
        """Build an asyncio tenacity retryer."""
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=tenacity.retry_if_exception_type(retry_on),
            reraise=False,
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
        )
