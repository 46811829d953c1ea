"""
Retry logic with exponential backoff and jitter.

Used for uploads to remote output sinks, where transient network and
service errors are expected.

Usage:
    from src.utils.retry import retry_with_backoff

    @retry_with_backoff(max_attempts=5, base_delay=1.0)
    def upload_document(blob_name, text):
        # ... upload logic that may fail transiently ...
        pass
"""

import functools
import random
import time
from typing import Any, Callable, Optional, Tuple, Type

from src.utils.logging import get_logger

logger = get_logger(__name__)


def calculate_backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    multiplier: float,
    jitter: bool,
) -> float:
    """
    Calculate delay for exponential backoff with optional jitter.

    Formula:
        delay = min(base_delay * (multiplier ** attempt), max_delay)
        if jitter:
            delay = delay * random.uniform(0.5, 1.5)

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Base delay in seconds
        max_delay: Maximum delay cap
        multiplier: Exponential multiplier
        jitter: Whether to add random jitter

    Returns:
        Calculated delay in seconds

    Example:
        >>> calculate_backoff_delay(2, base_delay=1.0, max_delay=60.0,
        ...                         multiplier=2.0, jitter=False)
        4.0
    """
    delay = min(base_delay * (multiplier ** attempt), max_delay)

    if jitter:
        delay = delay * random.uniform(0.5, 1.5)

    return delay


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_multiplier: float = 2.0,
    jitter: bool = True,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (including initial)
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries
        backoff_multiplier: Multiplier for exponential backoff
        jitter: Add randomness to delays
        exceptions: Tuple of exception types to retry on
        on_retry: Optional callback called before each retry

    Returns:
        Decorated function with retry logic; the last exception is re-raised
        once all attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_attempts):
                try:
                    if attempt > 0:
                        logger.info(
                            f"Retry attempt {attempt}/{max_attempts - 1} for {func.__name__}"
                        )
                    return func(*args, **kwargs)

                except exceptions as e:
                    if attempt == max_attempts - 1:
                        logger.error(
                            f"{func.__name__} failed after {max_attempts} attempts. "
                            f"Last error: {e}"
                        )
                        raise

                    delay = calculate_backoff_delay(
                        attempt=attempt,
                        base_delay=base_delay,
                        max_delay=max_delay,
                        multiplier=backoff_multiplier,
                        jitter=jitter,
                    )
                    logger.warning(
                        f"{func.__name__} failed on attempt {attempt + 1}: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )
                    if on_retry:
                        on_retry(attempt, e, delay)
                    time.sleep(delay)

            raise RuntimeError(f"{func.__name__} failed without exception")

        return wrapper

    return decorator
