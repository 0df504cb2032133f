"""Retry policy for transient HTTP failures."""

from __future__ import annotations

import asyncio
import random

import httpx

from photonctl.config.models import RetryConfig


class RetryPolicy:
    def __init__(self, config: RetryConfig) -> None:
        self.config = config

    def _delay_for_attempt(self, attempt: int) -> float:
        base = self.config.base_delay * (2 ** max(0, attempt - 1))
        clipped = min(base, self.config.max_delay)
        if self.config.jitter <= 0:
            return clipped

        spread = clipped * self.config.jitter
        return max(0.0, clipped + random.uniform(-spread, spread))

    def should_retry_status(self, status_code: int, *, idempotent: bool = True) -> bool:
        if status_code not in self.config.retry_statuses:
            return False
        # 429 is the only retryable status that guarantees the request was not processed.
        return idempotent or status_code == 429

    def should_retry_exception(self, exc: Exception, *, idempotent: bool = True) -> bool:
        if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
            return True
        return idempotent and isinstance(exc, (httpx.ReadTimeout, httpx.RemoteProtocolError))

    async def wait(self, attempt: int) -> None:
        delay = self._delay_for_attempt(attempt)
        if delay > 0:
            await asyncio.sleep(delay)
