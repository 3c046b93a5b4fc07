"""Retry policy shared by every oracle call site."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Tuple, Type, TypeVar

from rfi_responder.core.exceptions import OracleTimeoutError, OracleUnavailableError
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff over a fixed set of retryable exception types.

    Attributes:
        max_attempts: Total attempts including the first call
        base_delay: Delay in seconds before the first retry
        max_delay: Upper bound for a single backoff delay
        retryable: Exception types that trigger another attempt
    """

    max_attempts: int = 3
    base_delay: float = 2.0
    max_delay: float = 30.0
    retryable: Tuple[Type[BaseException], ...] = field(
        default=(OracleTimeoutError, OracleUnavailableError)
    )

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the given zero-based attempt."""
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def is_retryable(self, error: BaseException) -> bool:
        return isinstance(error, self.retryable)

    async def run(self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``operation`` until it succeeds or the policy gives up.

        Non-retryable errors propagate immediately; the last retryable error
        propagates once attempts are exhausted.
        """
        for attempt in range(self.max_attempts):
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                if not self.is_retryable(e) or attempt == self.max_attempts - 1:
                    raise
                wait_time = self.delay_for(attempt)
                LOGGER.warning(
                    f"Retryable failure (Attempt {attempt + 1}/{self.max_attempts}), "
                    f"retrying in {wait_time:.1f}s: {e}"
                )
                await asyncio.sleep(wait_time)
