"""
PlanetFeed Retry Logic
=====================

Bounded retry with a superlinear backoff for feed retrieval. The policy
holds configuration only; all per-attempt state lives in the call, so one
instance is shared by every concurrent fetch of a run.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedError


T = TypeVar('T')


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 2                    # Retries after the first attempt
    backoff_base: float = 1.2               # Delay before retry r: r * base**r
    retry_on_exceptions: Tuple[Type[BaseException], ...] = (FeedError,)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        return cls(
            max_retries=settings.retry.max_retries,
            backoff_base=settings.retry.backoff_base,
        )


class RetryPolicy:
    """Retries an async operation on feed failures, then re-raises the last one."""

    def __init__(self,
                 config: Optional[RetryConfig] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        """Initialize retry policy.

        Args:
            config: Retry configuration (defaults to 2 retries, base 1.2)
            sleep: Awaitable used to wait between attempts
        """
        self.config = config or RetryConfig()
        self._sleep = sleep
        self.logger = get_logger_for_component('retry_policy')

    def calculate_delay(self, retry: int) -> float:
        """Seconds to wait before retry number ``retry`` (1-based)."""
        return retry * (self.config.backoff_base ** retry)

    async def retry_async(self,
                          func: Callable[..., Awaitable[T]],
                          *args,
                          context: Optional[Dict[str, Any]] = None,
                          **kwargs) -> T:
        """
        Run an async function, retrying it on retryable failures.

        Args:
            func: Async function to retry
            *args: Function arguments
            context: Extra fields attached to retry log records
            **kwargs: Function keyword arguments

        Returns:
            Function result if any attempt succeeds

        Raises:
            The last retryable exception once retries are exhausted; any
            other exception immediately.
        """
        log_context = dict(context or {})
        name = getattr(func, '__name__', repr(func))
        retry = 0

        while True:
            try:
                result = await func(*args, **kwargs)
            except self.config.retry_on_exceptions as e:
                if retry >= self.config.max_retries:
                    self.logger.error(
                        f"All {self.config.max_attempts} attempts failed for {name}: {e}",
                        extra={**log_context, 'attempts': retry + 1},
                    )
                    raise

                retry += 1
                delay = self.calculate_delay(retry)
                self.logger.warning(
                    f"Attempt {retry} failed for {name}: {e}. "
                    f"Retrying in {delay:.2f}s (attempt {retry + 1}/{self.config.max_attempts})",
                    extra={**log_context, 'attempt': retry, 'delay_seconds': delay},
                )
                await self._sleep(delay)
                continue

            if retry:
                self.logger.info(
                    f"Retry successful for {name} on attempt {retry + 1}",
                    extra=log_context,
                )
            return result
