"""
Utility decorators for Asset Librarian

Simple, practical decorators added as needed.
"""

import time
import logging
import functools
from typing import Callable, Any

logger = logging.getLogger(__name__)


def timed(func: Callable) -> Callable:
    """
    Decorator to log execution time of a function.

    Usage:
        @timed
        def ingest_stockshot(...):
            ...

    Logs: "IngestionPipeline.ingest_stockshot took 123.4ms"
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{func.__qualname__} took {elapsed_ms:.1f}ms")
        return result
    return wrapper


def safe_operation(default: Any = None, log_level: int = logging.WARNING):
    """
    Decorator for operations that must not raise exceptions.

    Catches exceptions, logs them, and returns a default value.
    Used at boundaries where a failure degrades the result instead
    of failing the caller (thumbnail generation).

    Args:
        default: Value to return on failure (default: None)
        log_level: Logging level for errors (default: WARNING)

    Usage:
        @safe_operation(default=False)
        def generate_for_video(self, source, target):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    log_level,
                    f"{func.__qualname__} failed: {e}",
                    exc_info=log_level <= logging.DEBUG
                )
                return default
        return wrapper
    return decorator


__all__ = ['timed', 'safe_operation']
