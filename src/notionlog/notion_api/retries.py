"""Retry decision and backoff computation.

Two pure functions used by the transports:

* :func:`should_retry` -- is another attempt allowed and worthwhile?
* :func:`compute_backoff` -- how long to wait before it.

With the default configuration a request is tried three times and the
waits are 0.5 s and 1 s.
"""

from __future__ import annotations

import random
from collections.abc import Collection

import httpx

# Network-level exceptions that may be retried.
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
    retry_statuses: Collection[int],
    retry_network_errors: bool = False,
) -> bool:
    """Decide whether a failed attempt should be followed by another.

    Parameters
    ----------
    status_code:
        Status of the response, or ``None`` if none was received.
    exception:
        The transport exception, or ``None`` if a response was received.
    attempt:
        The attempt that just failed (0-indexed).
    max_attempts:
        Total attempts allowed, the first one included.
    retry_statuses:
        Statuses considered transient.
    retry_network_errors:
        Whether timeouts and connection failures are transient.
    """
    if attempt + 1 >= max_attempts:
        return False

    if exception is not None:
        return retry_network_errors and isinstance(exception, RETRYABLE_EXCEPTIONS)

    return status_code is not None and status_code in retry_statuses


def compute_backoff(
    attempt: int,
    base: float = 0.5,
    maximum: float = 8.0,
    jitter: bool = False,
    retry_after: float | None = None,
) -> float:
    """Delay in seconds before the attempt following *attempt* (0-indexed).

    ``base * 2**attempt`` capped at *maximum*, unless the server named a
    ``Retry-After`` value, which is used as is.  With *jitter* the result is
    scaled to a random 50-100 % of itself.

    >>> [compute_backoff(n) for n in range(3)]
    [0.5, 1.0, 2.0]
    """
    if retry_after is not None and retry_after >= 0:
        delay = retry_after
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay
