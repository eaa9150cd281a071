# fechou/utils/db_retry.py

import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from fechou.core.config import DB_RETRY_ATTEMPTS, DB_RETRY_DELAY_SECONDS
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_transient(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


async def run_with_db_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = DB_RETRY_ATTEMPTS,
    delay: float = DB_RETRY_DELAY_SECONDS,
    label: str = "db operation",
) -> T:
    """Run ``operation`` again on dropped connections, waiting a little longer each time.

    ``operation`` must open its own session so a retry starts clean.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except DBAPIError as exc:
            if not is_transient(exc) or attempt >= attempts:
                raise
            logger.warning(
                "Transient database error, retrying",
                extra={"operation": label, "attempt": attempt},
            )
            await asyncio.sleep(delay * attempt)
            attempt += 1
