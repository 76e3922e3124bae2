"""Sync and async HTTP transports for the Notion API.

Each transport handles the full request lifecycle:

1. If rate limiting is enabled, wait out any proactive delay computed
   from the last observed rate-limit headers.
2. Send the HTTP request with auth and version headers.
3. Fold the response's rate-limit headers into the tracker state.
4. On ``2xx`` -- return the parsed JSON response.
5. On ``429`` -- honour ``Retry-After`` or back off exponentially, then
   retry up to ``max_retries`` times before raising
   :class:`NotionkitRateLimitError`.
6. On any other error status -- raise the matching
   :class:`NotionkitApiError` subclass immediately.
7. On a network failure -- raise :class:`NotionkitNetworkError`
   immediately.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from typing import TYPE_CHECKING, Any, NoReturn

import httpx

from notionkit.errors import (
    NotionkitApiError,
    NotionkitAuthError,
    NotionkitNetworkError,
    NotionkitNotFoundError,
    NotionkitPermissionError,
    NotionkitRateLimitError,
)
from notionkit.observability import NoopMetricsHook, get_logger
from notionkit.utils.redact import redact

from .rate_limit import (
    AsyncRateLimitTracker,
    RateLimitState,
    RateLimitTracker,
    parse_retry_after,
)
from .retries import compute_backoff, should_retry

if TYPE_CHECKING:
    from notionkit.config import NotionkitConfig

log = get_logger("notionkit.transport")

_STATUS_ERRORS: dict[int, type[NotionkitApiError]] = {
    401: NotionkitAuthError,
    403: NotionkitPermissionError,
    404: NotionkitNotFoundError,
    429: NotionkitRateLimitError,
}

_STATUS_LABELS: dict[int, str] = {
    400: "Bad request",
    401: "Authentication failed",
    403: "Permission denied",
    404: "Resource not found",
    409: "Conflict",
    429: "Rate limited",
}

# Transport-level failures: no response was received.
_NETWORK_EXCEPTIONS: tuple[type[Exception], ...] = (httpx.TransportError,)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:1000]


def _raise_for_status(
    response: httpx.Response,
    method: str,
    path: str,
    context: dict[str, Any] | None = None,
) -> NoReturn:
    """Raise the :class:`NotionkitApiError` subclass matching *response*."""
    status = response.status_code
    body = _response_body(response)
    if not isinstance(body, dict):
        body = {"message": body}

    notion_message = body.get("message") or response.reason_phrase
    notion_code = body.get("code", "")
    label = _STATUS_LABELS.get(status, f"HTTP {status}")
    error_cls = _STATUS_ERRORS.get(status, NotionkitApiError)

    ctx: dict[str, Any] = {"method": method, "path": path}
    ctx.update(context or {})

    log.warning(
        "Notion API error",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "status_code": status,
                "api_code": notion_code,
            }
        },
    )
    raise error_cls(
        message=f"{label} on {method} {path} ({status}): {notion_message}",
        status=status,
        api_code=notion_code,
        details=notion_message,
        context=ctx,
    )


def _raise_network_error(metrics: Any, method: str, path: str, exc: Exception) -> NoReturn:
    metrics.increment(
        "notionkit.requests_total",
        tags={"method": method, "path": path, "status": "error"},
    )
    log.warning(
        "Request network error",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "error": str(exc),
            }
        },
    )
    raise NotionkitNetworkError(
        message=f"Network error on {method} {path}: {exc}",
        context={"method": method, "path": path},
        cause=exc,
    ) from exc


def _record_response(
    metrics: Any,
    method: str,
    path: str,
    response: httpx.Response,
    elapsed_ms: float,
    state: RateLimitState | None,
) -> None:
    tags = {"method": method, "path": path, "status": str(response.status_code)}
    metrics.increment("notionkit.requests_total", tags=tags)
    metrics.timing("notionkit.request_duration_ms", elapsed_ms, tags=tags)
    if state is not None and state.remaining is not None:
        metrics.gauge("notionkit.rate_limit_remaining", float(state.remaining))


def _record_wait(metrics: Any, method: str, path: str, wait: float, reason: str) -> None:
    metrics.timing(
        "notionkit.rate_limit_wait_ms",
        wait * 1000,
        tags={"method": method, "path": path, "reason": reason},
    )
    log.debug(
        "Waiting before request",
        extra={
            "extra_fields": {
                "op": "rate_limit",
                "method": method,
                "path": path,
                "wait_seconds": round(wait, 3),
                "reason": reason,
            }
        },
    )


def _retry_delay(
    config: NotionkitConfig,
    metrics: Any,
    method: str,
    path: str,
    response: httpx.Response,
    attempt: int,
) -> float:
    """Return the delay before retrying *response*, or raise.

    Non-429 statuses, and 429 when rate limiting is disabled, raise
    immediately.  A 429 that has used up ``max_retries`` raises
    :class:`NotionkitRateLimitError`.
    """
    status = response.status_code
    if status != 429 or not config.rate_limit_enabled:
        _raise_for_status(response, method, path, {"attempts": attempt + 1})

    metrics.increment(
        "notionkit.rate_limited_total",
        tags={"method": method, "path": path},
    )
    retry_after = (
        parse_retry_after(response.headers.get("retry-after"))
        if config.respect_retry_after
        else None
    )

    if not should_retry(status, attempt, config.max_retries):
        _raise_for_status(
            response,
            method,
            path,
            {"attempts": attempt + 1, "retry_after_seconds": retry_after},
        )

    log.warning(
        "Rate limited by Notion API",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "status_code": 429,
                "retry_after": retry_after,
                "attempt": attempt + 1,
            }
        },
    )
    delay = compute_backoff(
        attempt,
        base_ms=config.base_delay_ms,
        max_ms=config.max_delay_ms,
        jitter_factor=config.jitter_factor,
        multiplier=config.preset.delay_multiplier,
        retry_after=retry_after,
    )
    metrics.increment(
        "notionkit.retries_total",
        tags={"method": method, "path": path},
    )
    _record_wait(metrics, method, path, delay, "backoff")
    return delay


def _emit_debug_dump(
    config: NotionkitConfig,
    method: str,
    path: str,
    response: httpx.Response,
    request_kwargs: dict[str, Any],
) -> None:
    """Write a redacted request/response dump to stderr if enabled."""
    if not config.debug_dump_payload:
        return
    dump: dict[str, Any] = {
        "method": method,
        "path": path,
        "response_status": response.status_code,
        "response_body": _response_body(response),
    }
    for key in ("json", "params", "data", "files"):
        if request_kwargs.get(key) is not None:
            dump[f"request_{key}"] = request_kwargs[key]
    print(
        _json.dumps(redact(dump, config.token), indent=2, default=str),
        file=sys.stderr,
    )


def _parse_success(response: httpx.Response) -> dict:
    # Some endpoints return 204 with no body.
    if response.status_code == 204 or not response.content:
        return {}
    result: dict = response.json()
    return result


def _client_kwargs(config: NotionkitConfig) -> dict[str, Any]:
    return {
        "base_url": config.base_url,
        "headers": {
            "Authorization": f"Bearer {config.token}",
            "Notion-Version": config.notion_version,
        },
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Synchronous HTTP transport with auth, rate limiting and 429 retries.

    Parameters
    ----------
    config:
        A :class:`NotionkitConfig` instance controlling all transport behaviour.
    """

    def __init__(self, config: NotionkitConfig) -> None:
        self._config = config
        self._tracker = RateLimitTracker(
            config.preset,
            max_delay=config.max_delay_ms / 1000,
        )
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(**_client_kwargs(config))

    @property
    def rate_limit_state(self) -> RateLimitState:
        """Snapshot of the last observed rate-limit information."""
        return self._tracker.snapshot()

    # -- public API --------------------------------------------------------

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g. ``/pages``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request`.  Use ``json=`` for
            JSON bodies, ``params=`` for query strings and ``files=`` /
            ``data=`` for multipart uploads.

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for empty responses).

        Raises
        ------
        NotionkitAuthError
            On 401 responses.
        NotionkitPermissionError
            On 403 responses.
        NotionkitNotFoundError
            On 404 responses.
        NotionkitRateLimitError
            On 429 once every permitted retry has been used.
        NotionkitApiError
            On any other non-2xx response.
        NotionkitNetworkError
            When no response was received.
        """
        config = self._config
        attempt = 0

        while True:
            # 1. Proactive pacing
            if config.rate_limit_enabled:
                wait = self._tracker.wait()
                if wait > 0:
                    _record_wait(self._metrics, method, path, wait, "proactive")

            # 2. Send request
            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except _NETWORK_EXCEPTIONS as exc:
                _raise_network_error(self._metrics, method, path, exc)
            elapsed_ms = (time.monotonic() - t0) * 1000

            # 3. Observe
            state = None
            if config.rate_limit_enabled:
                state = self._tracker.observe(response.headers, response.status_code)
            _record_response(self._metrics, method, path, response, elapsed_ms, state)
            _emit_debug_dump(config, method, path, response, kwargs)

            # 4. Success
            if response.is_success:
                return _parse_success(response)

            # 5. Retry or raise
            delay = _retry_delay(config, self._metrics, method, path, response, attempt)
            time.sleep(delay)
            attempt += 1

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth, rate limiting and 429 retries.

    Mirrors :class:`NotionTransport` but uses ``httpx.AsyncClient`` and
    ``asyncio.sleep`` for non-blocking I/O.  Cancelling the calling task
    while it waits before a retry propagates
    :class:`asyncio.CancelledError`; no further request is sent.

    Parameters
    ----------
    config:
        A :class:`NotionkitConfig` instance controlling all transport behaviour.
    """

    def __init__(self, config: NotionkitConfig) -> None:
        self._config = config
        self._tracker = AsyncRateLimitTracker(
            config.preset,
            max_delay=config.max_delay_ms / 1000,
        )
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(**_client_kwargs(config))

    @property
    def rate_limit_state(self) -> RateLimitState:
        """Snapshot of the last observed rate-limit information."""
        return self._tracker.peek()

    # -- public API --------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API (async).

        See :meth:`NotionTransport.request` for full documentation; the
        semantics are identical but all blocking calls are replaced with
        async equivalents.
        """
        config = self._config
        attempt = 0

        while True:
            if config.rate_limit_enabled:
                wait = await self._tracker.wait()
                if wait > 0:
                    _record_wait(self._metrics, method, path, wait, "proactive")

            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except _NETWORK_EXCEPTIONS as exc:
                _raise_network_error(self._metrics, method, path, exc)
            elapsed_ms = (time.monotonic() - t0) * 1000

            state = None
            if config.rate_limit_enabled:
                state = await self._tracker.observe(response.headers, response.status_code)
            _record_response(self._metrics, method, path, response, elapsed_ms, state)
            _emit_debug_dump(config, method, path, response, kwargs)

            if response.is_success:
                return _parse_success(response)

            delay = _retry_delay(config, self._metrics, method, path, response, attempt)
            await asyncio.sleep(delay)
            attempt += 1

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
