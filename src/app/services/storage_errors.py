"""
Storage failure contract between use cases and storage adapters.

Adapters translate driver exceptions into these types so the application
layer never depends on a particular database library.
"""

import functools
import logging

from libs.result import Error, Return

logger = logging.getLogger(__name__)


class StorageFailure(Exception):
    """The store failed, timed out, or aborted the transaction."""


class UniqueViolation(StorageFailure):
    """A write collided with a unique key (token or active-invite key)."""


STORAGE_ERROR = Error("STORAGE_ERROR", "Storage is temporarily unavailable")


def storage_errors_as_result(func):
    """Turn a StorageFailure escaping a use case into a STORAGE_ERROR result."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except StorageFailure as exc:
            logger.error(f"Storage failure in {func.__qualname__}: {exc!r}")
            return Return.err(STORAGE_ERROR)

    return wrapper
