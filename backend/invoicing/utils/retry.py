"""Retry helper with exponential backoff for transient storage failures"""

import logging
import time
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 2,
    initial_delay: float = 0.05,
    max_delay: float = 1.0,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,),
):
    """
    Decorator for retrying functions with exponential backoff

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff calculation
        exceptions: Tuple of exceptions to catch and retry
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_retries:
                        logger.error(f"{func.__name__} failed after {max_retries} retries: {e}")
                        raise
                    logger.warning(
                        f"{func.__name__} failed attempt {attempt + 1}/{max_retries}: {e}, "
                        f"retrying in {delay:.2f}s"
                    )
                    time.sleep(delay)
                    delay = min(delay * exponential_base, max_delay)

        return wrapper
    return decorator
