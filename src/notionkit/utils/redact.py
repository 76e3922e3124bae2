"""Scrub request and response payloads before they reach a log or a dump.

:func:`redact` walks a payload recursively and returns a sanitised copy:

* Values stored under a credential-like key (``Authorization``,
  ``api_key``, ``client_secret`` ...) are replaced.  String values keep a
  short hint (``Bearer <redacted>``, ``<redacted:...abcd>``); anything else
  becomes ``"<redacted>"``.
* The integration token never survives, whatever key it hides under.
* Upload bodies (``bytes`` or multipart ``(name, bytes, type)`` tuples)
  collapse to ``<binary:N_bytes>``.
* Strings longer than :data:`TEXT_PREVIEW_CHARS` keep their prefix and a
  ``<...N_chars>`` marker.
"""

from __future__ import annotations

import re
from typing import Any

# Substrings that mark a key as holding a credential (matched lower-case).
SENSITIVE_KEY_MARKERS: tuple[str, ...] = (
    "authorization",
    "token",
    "secret",
    "password",
    "credential",
    "cookie",
    "api_key",
    "api-key",
)

TEXT_PREVIEW_CHARS = 200

_BEARER = re.compile(r"(Bearer\s+)\S+")
_BINARY = (bytes, bytearray)


def _is_sensitive(key: object) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEY_MARKERS)


def _hide_token(text: str, token: str | None) -> str:
    if token and token in text:
        hint = f"<redacted:...{token[-4:]}>" if len(token) >= 4 else "<redacted>"
        text = text.replace(token, "<redacted>" if token in hint else hint)
    return _BEARER.sub(r"\1<redacted>", text)


def _scrub(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return {
            key: (
                (_hide_token(item, token) if isinstance(item, str) else "<redacted>")
                if _is_sensitive(key)
                else _scrub(item, token)
            )
            for key, item in value.items()
        }
    if isinstance(value, _BINARY):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, (list, tuple)):
        blobs = [item for item in value if isinstance(item, _BINARY)]
        if blobs:
            return f"<binary:{sum(map(len, blobs))}_bytes>"
        return [_scrub(item, token) for item in value]
    if isinstance(value, str):
        text = _hide_token(value, token)
        if len(text) <= TEXT_PREVIEW_CHARS:
            return text
        return f"{text[:TEXT_PREVIEW_CHARS]}<...{len(text)}_chars>"
    return value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a sanitised copy of *payload*; the input is left untouched.

    Parameters
    ----------
    payload:
        Request body, response body or header mapping.
    token:
        The integration token.  Every literal occurrence is masked.

    Examples
    --------
    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    >>> redact({"file": ("a.png", b"1234", "image/png")})
    {'file': '<binary:4_bytes>'}
    """
    return _scrub(payload, token)
