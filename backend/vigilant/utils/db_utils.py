"""Database utility functions."""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import OperationalError, InterfaceError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Substrings of driver errors worth another attempt (SQLite lock contention,
# PostgreSQL connection churn under load)
TRANSIENT_ERRORS = (
    "database is locked",
    "connection refused",
    "connection reset",
    "connection closed",
    "server closed",
    "timeout",
    "too many clients",
)


def is_transient(error: Exception) -> bool:
    """Whether a database error is likely to succeed on a fresh attempt."""
    message = str(error).lower()
    return any(fragment in message for fragment in TRANSIENT_ERRORS)


async def retry_on_lock(
    unit_of_work: Callable[[], Awaitable[T]],
    monitor_id: str,
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """Run a store operation for one monitor, retrying it whole on transient errors.

    The callable must open its own session, so every attempt re-reads state
    instead of re-committing a session that has already failed.

    Args:
        unit_of_work: Async callable performing the read-modify-write and commit
        monitor_id: Monitor the operation writes, used in log messages
        max_attempts: Total number of attempts
        base_delay: Delay before the second attempt in seconds (doubles after that)

    Raises:
        OperationalError/InterfaceError: If the error is not transient or attempts run out
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return await unit_of_work()
        except (OperationalError, InterfaceError) as e:
            if attempt == max_attempts or not is_transient(e):
                logger.error(f"Database write for monitor {monitor_id} failed after {attempt} attempt(s): {e}")
                raise
            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                f"Database transient error writing monitor {monitor_id}, "
                f"retrying in {delay}s (attempt {attempt}/{max_attempts})"
            )
            await asyncio.sleep(delay)
    raise RuntimeError("max_attempts must be at least 1")
