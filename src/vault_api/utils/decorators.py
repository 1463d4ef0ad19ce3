"""Logging decorators for storage writes and upload handling."""
import time
import logging
import functools
from typing import Any, BinaryIO, Callable, TypeVar, cast

from vault_api.errors import VaultError

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def log_storage_write(func: F) -> F:
    """Log the stored name, byte count and duration of a storage write.

    The wrapped method must take ``(self, stored_name, stream)`` and return
    the number of bytes written.
    """
    @functools.wraps(func)
    def wrapper(self, stored_name: str, stream: BinaryIO, *args, **kwargs):
        started = time.perf_counter()
        try:
            size = func(self, stored_name, stream, *args, **kwargs)
        except Exception as err:
            logger.error(f"Failed to store {stored_name} after {_elapsed_ms(started):.1f}ms: {err}")
            raise
        logger.info(f"Stored {stored_name} ({size} bytes) in {_elapsed_ms(started):.1f}ms")
        return size
    return cast(F, wrapper)


def log_request_timing(func: F) -> F:
    """Log how long an async route handler took.

    Client errors (a :class:`VaultError` below 500) are logged at info level;
    anything else that escapes the handler is logged as an error.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        started = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except VaultError as err:
            level = logging.INFO if err.status_code < 500 else logging.ERROR
            logger.log(
                level,
                f"{func.__name__} answered {err.status_code} after {_elapsed_ms(started):.1f}ms: {err.message}",
            )
            raise
        except Exception as err:
            logger.error(f"{func.__name__} failed after {_elapsed_ms(started):.1f}ms: {err}")
            raise
        logger.info(f"{func.__name__} completed in {_elapsed_ms(started):.1f}ms")
        return result
    return cast(F, wrapper)
