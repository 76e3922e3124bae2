"""Retry decision logic and exponential backoff computation.

This module provides two pure functions used by the transport layer:

* :func:`should_retry` -- decide whether a failed request is retryable.
* :func:`compute_backoff` -- compute the delay before the next retry attempt.

Only ``429 Too Many Requests`` is ever retried.  Other error statuses and
network failures surface to the caller on first occurrence.
"""

from __future__ import annotations

import random

RETRYABLE_STATUS = 429


def should_retry(status_code: int, attempt: int, max_retries: int) -> bool:
    """Decide whether a request should be retried.

    Parameters
    ----------
    status_code:
        HTTP status code of the response just received.
    attempt:
        Number of retries already performed (0 for the initial request).
    max_retries:
        Maximum number of retries allowed after the initial request.
    """
    return status_code == RETRYABLE_STATUS and attempt < max_retries


def compute_backoff(
    attempt: int,
    base_ms: float = 1000,
    max_ms: float = 30000,
    jitter_factor: float = 0.1,
    multiplier: float = 1.0,
    retry_after: float | None = None,
) -> float:
    """Compute the delay, in seconds, before the next retry attempt.

    A server-provided ``Retry-After`` value (seconds) is used as-is.
    Otherwise the delay is ``min(base_ms * 2**attempt * multiplier, max_ms)``,
    scaled by a random factor in ``[1 - jitter_factor, 1 + jitter_factor]``
    and capped at *max_ms* again.

    Parameters
    ----------
    attempt:
        Number of retries already performed (0-indexed).
    base_ms:
        Base delay in milliseconds.
    max_ms:
        Maximum delay cap in milliseconds.
    jitter_factor:
        Fraction of the delay that is randomly added or removed.
    multiplier:
        Strategy-dependent scale applied before capping.
    retry_after:
        Value of the ``Retry-After`` header in seconds, if honoured.

    Returns
    -------
    float
        Delay in seconds, never negative.
    """
    if retry_after is not None:
        return max(0.0, retry_after)

    delay_ms = min(base_ms * (2 ** attempt) * multiplier, max_ms)
    if jitter_factor > 0:
        delay_ms *= 1.0 + random.uniform(-jitter_factor, jitter_factor)
    delay_ms = min(max(0.0, delay_ms), max_ms)
    return delay_ms / 1000.0
