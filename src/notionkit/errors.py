"""Exceptions raised by notionkit.

Everything the SDK raises on purpose derives from :class:`NotionkitError`
and exposes ``code`` (an :class:`ErrorCode`), ``message``, ``context``
(a dict of diagnostic values) and ``cause`` (the wrapped exception, also
set as ``__cause__``).

Where a call fails decides the class:

* :class:`NotionkitValidationError` -- a local pre-flight check failed and
  nothing was sent.
* :class:`NotionkitApiError` -- the server answered with an error status.
  :class:`NotionkitAuthError` (401), :class:`NotionkitPermissionError`
  (403), :class:`NotionkitNotFoundError` (404) and
  :class:`NotionkitRateLimitError` (429 after retries) refine it so callers
  can branch on the class or on ``status``.
* :class:`NotionkitNetworkError` -- no response was received at all.

``ErrorCode`` members are plain strings, so ``err.code == "NOT_FOUND"``
works and codes serialise to JSON unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Category of a :class:`NotionkitError`."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionkitError(Exception):
    """Root of the notionkit exception tree.

    Parameters
    ----------
    code:
        :class:`ErrorCode` member naming the failure category.
    message:
        Text shown by ``str(err)``.
    context:
        Diagnostic key/value pairs; each subclass documents its keys.
    cause:
        Exception that triggered this one, if any.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context: dict[str, Any] = dict(context) if context else {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        code = getattr(self.code, "value", self.code)
        fields = [f"code={code!r}", f"message={self.message!r}"]
        if self.context:
            fields.append(f"context={self.context!r}")
        return f"{type(self).__name__}({', '.join(fields)})"


# ---------------------------------------------------------------------------
# Local errors
# ---------------------------------------------------------------------------

class NotionkitValidationError(NotionkitError):
    """A request failed a pre-flight limit check and was never sent.

    Context keys: ``field``, ``limit``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

    @property
    def field(self) -> str | None:
        return self.context.get("field")

    @property
    def limit(self) -> int | None:
        return self.context.get("limit")

    @property
    def value(self) -> Any:
        return self.context.get("value")


# ---------------------------------------------------------------------------
# API errors
# ---------------------------------------------------------------------------

class NotionkitApiError(NotionkitError):
    """Notion API answered with a non-2xx status.

    Parameters
    ----------
    message:
        Human-readable description, including the method and path.
    status:
        HTTP status code of the failing response.
    api_code:
        Notion's own error code (``"validation_error"``,
        ``"object_not_found"``, ``"rate_limited"`` ...), or ``""`` when the
        body did not carry one.
    details:
        Notion's error message from the response body, if any.

    Context keys: ``status_code``, ``api_code``, ``method``, ``path``.
    """

    default_code: str = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        status: int,
        api_code: str = "",
        details: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = {"status_code": status, "api_code": api_code}
        ctx.update(context or {})
        super().__init__(
            code=self.default_code,
            message=message,
            context=ctx,
            cause=cause,
        )
        self.status: int = status
        self.api_code: str = api_code
        self.details: str | None = details


class NotionkitAuthError(NotionkitApiError):
    """Notion API returned 401 -- the integration token is invalid or expired."""

    default_code = ErrorCode.AUTH_ERROR


class NotionkitPermissionError(NotionkitApiError):
    """Notion API returned 403 -- the integration lacks a capability or access."""

    default_code = ErrorCode.PERMISSION_ERROR


class NotionkitNotFoundError(NotionkitApiError):
    """Notion API returned 404 -- the resource does not exist or is not shared."""

    default_code = ErrorCode.NOT_FOUND


class NotionkitRateLimitError(NotionkitApiError):
    """Notion API kept returning 429 after every permitted retry.

    Context keys (in addition to the API ones): ``attempts``,
    ``retry_after_seconds``.
    """

    default_code = ErrorCode.RATE_LIMITED


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------

class NotionkitNetworkError(NotionkitError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    No response was received, so there is no status code.

    Context keys: ``method``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
