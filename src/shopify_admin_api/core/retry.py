from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from .context import get_request_id
from .errors import UnauthorizedError
from .observability import log_event

T = TypeVar("T")


async def with_reauth_retry(
    attempt: Callable[[], Awaitable[T]],
    recover: Callable[[], Awaitable[None]],
    *,
    retries: int = 1,
) -> T:
    """
    Run ``attempt``; on UnauthorizedError call ``recover`` and run it again.
    - At most ``retries`` recoveries; the last UnauthorizedError propagates
    - Any other exception propagates untouched on the first occurrence
    - ``attempt`` is re-invoked, so it must re-read credentials itself
    """
    budget = retries
    while True:
        try:
            return await attempt()
        except UnauthorizedError as exc:
            if budget <= 0:
                raise
            budget -= 1
            log_event(
                "reauth_retry",
                request_id=get_request_id(),
                status=exc.status_code,
                attempt=retries - budget,
            )
            await recover()


__all__ = ["with_reauth_retry"]
