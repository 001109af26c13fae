"""Race store calls against a timer and substitute fixed data when the store is unavailable.

Dashboards must render something even in a total outage, so callers always get a
value back. The :class:`FallbackResult` wrapper records whether that value is live
or substitute data so handlers and tests can tell the two apart.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from loan_office.core.logging import get_fallback_logger
from loan_office.core.settings import settings
from loan_office.services import records

T = TypeVar("T")

logger = get_fallback_logger()

DATA_SOURCE_HEADER = "X-Data-Source"
FALLBACK_REASON_HEADER = "X-Fallback-Reason"


class DataSource(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


class FallbackReason(str, Enum):
    TIMEOUT = "timeout"
    ERROR = "error"
    SECTION_FAILED = "section_failed"


@dataclass(frozen=True, slots=True)
class FallbackResult(Generic[T]):
    value: T
    source: DataSource = DataSource.LIVE
    reason: FallbackReason | None = None
    error: str | None = None

    @property
    def is_live(self) -> bool:
        return self.source is DataSource.LIVE

    @classmethod
    def live(cls, value: T) -> FallbackResult[T]:
        return cls(value=value)

    @classmethod
    def substitute(
        cls, value: T, reason: FallbackReason, error: str | None = None
    ) -> FallbackResult[T]:
        return cls(value=value, source=DataSource.FALLBACK, reason=reason, error=error)


def _resolve(fallback_value: T | Callable[[], T]) -> T:
    if callable(fallback_value):
        return fallback_value()
    return fallback_value


def _discard_late_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    # Retrieve the outcome so asyncio does not report it as never retrieved.
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned operation finished with %r", exc)


def _timeout_ms(timeout_ms: int | None) -> int:
    return max(settings.fallback_timeout_ms if timeout_ms is None else timeout_ms, 0)


async def with_fallback(
    operation: Callable[[], Awaitable[T]],
    fallback_value: T | Callable[[], T],
    timeout_ms: int | None = None,
    operation_name: str = "Database operation",
) -> FallbackResult[T]:
    """Return the operation's result, or the fallback if it fails or outlasts ``timeout_ms``.

    The operation is attempted exactly once. When the timer wins, the operation task
    is cancelled without waiting for it and anything it produces later is dropped.
    """
    timeout_ms = _timeout_ms(timeout_ms)
    task = asyncio.ensure_future(operation())
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if not done:
        task.add_done_callback(_discard_late_result)
        task.cancel()
        message = f"{operation_name} timed out after {timeout_ms} ms"
        logger.warning("%s, using fallback data", message, extra={"operation": operation_name})
        return FallbackResult.substitute(_resolve(fallback_value), FallbackReason.TIMEOUT, message)

    if task.cancelled():
        message = f"{operation_name} was cancelled"
        logger.warning("%s, using fallback data", message, extra={"operation": operation_name})
        return FallbackResult.substitute(_resolve(fallback_value), FallbackReason.ERROR, message)

    exc = task.exception()
    if exc is not None:
        logger.warning(
            "%s failed, using fallback data: %s",
            operation_name,
            exc,
            exc_info=exc,
            extra={"operation": operation_name},
        )
        return FallbackResult.substitute(_resolve(fallback_value), FallbackReason.ERROR, str(exc))

    return FallbackResult.live(task.result())


async def is_database_available(db: AsyncSession, timeout_ms: int | None = None) -> bool:
    async def _check() -> bool:
        await records.ping(db)
        return True

    result = await with_fallback(_check, False, timeout_ms, "Database availability check")
    return bool(result.value)


def source_headers(result) -> dict[str, str]:
    """Headers naming where a payload came from, for anything carrying ``source`` and ``reason``."""
    headers = {DATA_SOURCE_HEADER: result.source.value}
    if result.reason is not None:
        headers[FALLBACK_REASON_HEADER] = result.reason.value
    return headers
