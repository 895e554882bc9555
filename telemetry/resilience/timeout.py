"""Deadline and timeout handling for sync and async pipeline stages."""

import asyncio
import time
from typing import Any, Callable, Optional

from ..exceptions import UpstreamTimeoutError
from ..logging import get_logger

logger = get_logger(__name__)


class Deadline:
    """
    Wall-clock budget shared by every stage of one pipeline run.

    Stages never wait longer than ``remaining()``; a per-call timeout is clipped
    with ``bound()`` so that an outbound request or a sleep cannot outlive the
    overall budget.
    """

    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self.clock = clock
        self.started_at = clock()

    @classmethod
    def unbounded(cls, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(None, clock=clock)

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when the deadline is unbounded."""
        if self.seconds is None:
            return None
        return max(0.0, self.seconds - self.elapsed())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def bound(self, timeout: float) -> float:
        """Clip a per-call timeout to the remaining budget."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    def check(self, operation: str) -> None:
        """Raise UpstreamTimeoutError if the budget is already spent."""
        if self.expired():
            logger.error(f"{operation} aborted: pipeline budget of {self.seconds}s exhausted")
            raise UpstreamTimeoutError(operation, self.seconds or 0.0)


async def with_timeout(
    coro: Any,
    timeout_seconds: float,
    operation: str,
    error_message: Optional[str] = None,
) -> Any:
    """
    Await ``coro`` for at most ``timeout_seconds``.

    On expiry the awaited task is cancelled by ``asyncio.wait_for`` and an
    UpstreamTimeoutError is raised instead of hanging.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        msg = error_message or f"Operation '{operation}' timed out after {timeout_seconds}s"
        logger.error(msg, extra={"operation": operation, "timeout": timeout_seconds})
        raise UpstreamTimeoutError(operation, timeout_seconds, message=error_message) from e


class TimeoutContext:
    """Logs how long a stage took against its expected budget."""

    def __init__(self, timeout_seconds: float, operation_name: str = "operation"):
        self.timeout_seconds = timeout_seconds
        self.operation_name = operation_name
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        logger.debug(f"Starting {self.operation_name} with {self.timeout_seconds}s budget")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            execution_time = time.perf_counter() - self.start_time

            if exc_type is None:
                if execution_time > self.timeout_seconds:
                    logger.warning(f"{self.operation_name} took {execution_time:.2f}s "
                                   f"(exceeded expected budget of {self.timeout_seconds}s)")
                else:
                    logger.debug(f"{self.operation_name} completed in {execution_time:.2f}s")
            else:
                logger.error(f"{self.operation_name} failed after {execution_time:.2f}s: {exc_val}")

        return False
