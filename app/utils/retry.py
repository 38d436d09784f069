"""
Bounded retry with exponential backoff for backend calls.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar
from sqlalchemy.exc import OperationalError, InterfaceError
from app.config.constants import BACKEND_MAX_RETRIES, BACKEND_RETRY_DELAY_BASE_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    ConnectionError,
    asyncio.TimeoutError,
)


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args,
    retries: int = BACKEND_MAX_RETRIES,
    base_delay: float = BACKEND_RETRY_DELAY_BASE_SECONDS,
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    on_retry: Optional[Callable[[], Awaitable[None]]] = None,
    **kwargs,
) -> T:
    """
    Await func(*args, **kwargs), retrying transient failures.

    Makes at most `retries` attempts, sleeping base_delay * 2**n between them.
    `on_retry` is awaited before each new attempt, e.g. to roll back a
    session whose transaction the failure left unusable.
    Non-transient errors and the last transient error propagate.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await func(*args, **kwargs)
        except retry_on as e:
            if attempt >= retries:
                raise
            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                f"{getattr(func, '__name__', func)} failed (attempt {attempt}/{retries}): {e}; retrying in {delay}s"
            )
            if on_retry is not None:
                await on_retry()
            await asyncio.sleep(delay)
