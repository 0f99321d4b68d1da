"""
Database utilities for connection management, retries and transaction scoping
"""
import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

# Define a type variable for the return type of the decorated function
T = TypeVar('T')

RETRYABLE_ERROR_NAMES = (
    "ConnectionError",
    "OperationalError",
    "ConnectionDoesNotExistError",
    "ConnectionRefusedError",
)


def with_db_retry(
    max_retries: int = 3,
    retry_delay: float = 0.5
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator that retries database operations on connection errors.

    Args:
        max_retries: Maximum number of retries before giving up
        retry_delay: Base delay between retries in seconds (doubles each attempt)

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0
            last_error = None

            while retries <= max_retries:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    error_name = type(e).__name__
                    if not any(err in error_name for err in RETRYABLE_ERROR_NAMES):
                        raise

                    retries += 1
                    last_error = e
                    if retries <= max_retries:
                        delay = retry_delay * (2 ** (retries - 1))
                        logger.warning(
                            f"Database connection error in {func.__name__}: {str(e)}. "
                            f"Retrying in {delay:.2f}s... (Attempt {retries}/{max_retries})"
                        )
                        await asyncio.sleep(delay)

            logger.error(f"Database operation {func.__name__} failed after {max_retries} retries: {last_error}")
            if last_error:
                raise last_error
            raise RuntimeError("Database operation failed with unknown error")

        return cast(Callable[..., Awaitable[T]], wrapper)

    return decorator


@asynccontextmanager
async def transaction_scope(
    session_factory: async_sessionmaker,
) -> AsyncIterator[AsyncSession]:
    """
    Open a session and a transaction around the enclosed block.

    Commits when the block exits normally, rolls back when it raises and
    always closes the session. The yielded session is the handle every
    repository call inside the block must receive.
    """
    session: AsyncSession = session_factory()
    try:
        async with session.begin():
            yield session
        logger.debug("Transaction committed")
    except Exception as e:
        logger.error(f"Transaction rolled back: {str(e)}")
        raise
    finally:
        await session.close()
