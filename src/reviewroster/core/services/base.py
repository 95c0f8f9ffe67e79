"""Shared store-call handling for services."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

from ..errors import ErrorCode, ReviewRosterError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(error: BaseException) -> bool:
    """Whether a store failure may succeed if the call is retried."""
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, OperationalError)


def require(**fields: str) -> None:
    """Raise INVALID_INPUT when any required string field is empty."""
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ReviewRosterError(
            ErrorCode.INVALID_INPUT, f"required field(s) missing: {', '.join(missing)}"
        )


class BaseService:
    """Base class bounding and classifying calls into the stores.

    Args:
        store_timeout: Seconds a single store call may take
        store_retry_attempts: Attempts for calls failing with a transient error
        store_retry_backoff: Base delay between attempts, multiplied by attempt number
    """

    def __init__(
        self,
        *,
        store_timeout: float = 5.0,
        store_retry_attempts: int = 3,
        store_retry_backoff: float = 0.05,
    ):
        self.store_timeout = store_timeout
        self.store_retry_attempts = max(1, store_retry_attempts)
        self.store_retry_backoff = store_retry_backoff

    async def _call_store(
        self, operation: str, func: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        """Run a store call with a timeout, retrying transient failures.

        Store-level exceptions (``StoreError``) pass through for the caller
        to classify. Database failures become INTERNAL_ERROR.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await asyncio.wait_for(func(*args), timeout=self.store_timeout)
            except asyncio.TimeoutError as e:
                logger.error("Store call %s timed out after %.2fs", operation, self.store_timeout)
                raise ReviewRosterError(
                    ErrorCode.INTERNAL_ERROR, f"{operation} timed out", transient=True
                ) from e
            except SQLAlchemyError as e:
                transient = is_transient(e)
                if transient and attempt < self.store_retry_attempts:
                    logger.warning(
                        "Transient failure in %s (attempt %d/%d): %s",
                        operation,
                        attempt,
                        self.store_retry_attempts,
                        e,
                    )
                    await asyncio.sleep(self.store_retry_backoff * attempt)
                    continue
                logger.exception("Store call %s failed", operation)
                raise ReviewRosterError(ErrorCode.INTERNAL_ERROR, transient=transient) from e
