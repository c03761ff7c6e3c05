#!/usr/bin/env python3
"""Resilience Patterns for directory endpoint calls.

This module provides the small set of resilience helpers used when talking
to a directory endpoint:
    - Retry with exponential backoff
    - Per-call timeout

Example:
    devices = await retry_async(
        endpoint.list_devices_by_type,
        "KIOSK",
        max_attempts=3,
    )

    devices = await with_timeout(endpoint.list_devices_by_type, 10.0, "KIOSK")
"""
import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

from .exceptions import DiscoveryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================
# Retry with Exponential Backoff
# ============================================

# Default exceptions that are considered retryable
DEFAULT_RETRYABLE_EXCEPTIONS = (
    DiscoveryError,
    asyncio.TimeoutError,
    ConnectionResetError,
    OSError,
)


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args,
    max_attempts: int = 3,
    backoff_factor: float = 2.0,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    retryable_exceptions: tuple = DEFAULT_RETRYABLE_EXCEPTIONS,
    **kwargs,
) -> T:
    """Retry an async function call with exponential backoff.

    Args:
        func: Async function to call
        *args: Arguments to pass to func
        max_attempts: Maximum attempts (including the first one)
        backoff_factor: Delay multiplier
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        retryable_exceptions: Exceptions to retry on
        **kwargs: Keyword arguments to pass to func

    Returns:
        Result from func

    Raises:
        The last retryable exception once attempts are exhausted, or any
        non-retryable exception immediately.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_exception: Optional[Exception] = None
    delay = initial_delay

    for attempt in range(1, max_attempts + 1):
        try:
            return await func(*args, **kwargs)

        except retryable_exceptions as e:
            last_exception = e

            if attempt < max_attempts:
                actual_delay = min(delay * (0.5 + random.random()), max_delay)
                logger.warning(
                    f"Retry {attempt}/{max_attempts}: {e}. Waiting {actual_delay:.1f}s"
                )
                await asyncio.sleep(actual_delay)
                delay = min(delay * backoff_factor, max_delay)
            else:
                raise

    if last_exception:
        raise last_exception
    raise RuntimeError("Retry logic error")


# ============================================
# Timeout
# ============================================

async def with_timeout(
    func: Callable[..., Awaitable[T]],
    timeout_seconds: Optional[float],
    *args,
    **kwargs,
) -> T:
    """Execute async function with an optional timeout.

    Args:
        func: Async function to execute
        timeout_seconds: Maximum execution time in seconds; None or 0 disables
        *args: Arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result from func

    Raises:
        asyncio.TimeoutError: If the call does not finish in time
    """
    if not timeout_seconds:
        return await func(*args, **kwargs)
    return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)


__all__ = [
    "DEFAULT_RETRYABLE_EXCEPTIONS",
    "retry_async",
    "with_timeout",
]
