"""
Exponential back‑off for calls to remote collaborators.

Defaults: first wait 0.5 s, doubling, at most 3 retries (4 calls).
EndpointAbsent is never retried – a missing deployment will not appear
between two attempts.
"""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional, TypeVar

from hazardview.errors import EndpointAbsent

T = TypeVar("T")

_log = logging.getLogger(__name__)


def retry_with_backoff(
    fn: Callable[[], T],
    max_retries: int = 3,
    initial_delay: float = 0.5,
    multiplier: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, float, Exception], None]] = None,
) -> T:
    """
    Call ``fn`` until it returns, sleeping between failed attempts.

    Parameters
    ----------
    fn            : zero‑argument callable doing one attempt
    max_retries   : retries after the first call
    initial_delay : seconds before the first retry
    multiplier    : growth factor of the delay
    sleep         : injected for tests
    on_retry      : observer ``(attempt, delay, exc)`` called before each wait

    Raises
    ------
    The last exception once retries are exhausted, or EndpointAbsent at once.
    """
    retries = 0
    delay = initial_delay

    while True:
        try:
            return fn()
        except EndpointAbsent:
            raise
        except Exception as exc:
            if retries >= max_retries:
                raise
            _log.info("Retry attempt %d after %dms delay (%s)",
                      retries + 1, round(delay * 1000), exc)
            if on_retry is not None:
                on_retry(retries + 1, delay, exc)
            sleep(delay)
            retries += 1
            delay *= multiplier
