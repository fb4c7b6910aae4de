"""Bounded fixed-delay retry policy for store lookups."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from src.core.config import settings
from src.core.db_client import DatabaseError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Configuration for retry behavior.

    ``max_attempts`` counts the first call, so 3 attempts sleep twice.
    """

    max_attempts: int = 3
    delay: float = 0.2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.update_lookup_max_attempts,
            delay=settings.update_lookup_delay_seconds,
        )

    async def run(
        self,
        func: Callable[[], Awaitable[T]],
        *,
        should_retry: Callable[[T], bool],
        operation: str = "lookup",
    ) -> T:
        """Call ``func`` until ``should_retry`` rejects its result or attempts run out.

        Store errors are retried the same way as rejected results. The final
        attempt's result is returned even if ``should_retry`` still holds; the
        final attempt's store error is re-raised.

        Args:
            func: Zero-argument coroutine function performing one attempt
            should_retry: Predicate deciding whether a result warrants another attempt
            operation: Name used in log records

        Returns:
            The result of the last attempt made

        Raises:
            DatabaseError: If the last attempt failed at the store layer
        """
        attempt = 1
        while True:
            try:
                result = await func()
            except DatabaseError as e:
                if attempt >= self.max_attempts:
                    logger.error(
                        "retry_exhausted",
                        extra={"operation": operation, "attempts": attempt, "error_message": str(e)},
                    )
                    raise
                logger.warning(
                    "retry_store_error",
                    extra={"operation": operation, "attempt": attempt, "error_message": str(e)},
                )
            else:
                if not should_retry(result) or attempt >= self.max_attempts:
                    if attempt > 1:
                        logger.info("retry_finished", extra={"operation": operation, "attempts": attempt})
                    return result
                logger.info(
                    "retry_pending",
                    extra={"operation": operation, "attempt": attempt, "delay_seconds": self.delay},
                )

            await asyncio.sleep(self.delay)
            attempt += 1
