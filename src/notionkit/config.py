"""SDK configuration for notionkit.

:class:`NotionkitConfig` is a plain dataclass that captures every tuneable
knob exposed by the SDK.  Instances are passed to both
:class:`NotionkitClient` and :class:`AsyncNotionkitClient`.

None of these settings change how requests are *built*; they only
parameterise the transport (headers, timeouts, rate limiting, retries and
logging).
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from notionkit.notion_api.rate_limit import STRATEGY_PRESETS, RateLimitStrategy

DEFAULT_NOTION_VERSION = "2025-09-03"
DEFAULT_BASE_URL = "https://api.notion.com/v1"

_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotionkitConfig:
    """Complete configuration for a notionkit client.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    rate_limit_enabled:
        Track rate-limit headers, delay proactively when the budget runs
        low, and retry ``429`` responses.  When ``False`` every request is
        sent immediately and a ``429`` surfaces on first occurrence.
    rate_limit_strategy:
        Preset that supplies the low-water threshold, the delay multiplier
        and the default retry bounds below.

        * ``"conservative"`` -- longer delays, fewer retries.
        * ``"balanced"`` -- the default.
        * ``"aggressive"`` -- shorter delays, more retries.
        * ``"custom"`` -- balanced thresholds; retry bounds are expected
          to be given explicitly.
    max_retries:
        Maximum number of retries after a ``429``.  ``None`` takes the
        strategy preset.
    base_delay_ms:
        Base delay for exponential backoff, in milliseconds.
    max_delay_ms:
        Upper cap on a single backoff delay, in milliseconds.
    jitter_factor:
        Fraction (0.0 - 1.0) of the computed delay that is randomly added
        or removed.
    respect_retry_after:
        Sleep for the server's ``Retry-After`` value when present instead
        of the computed backoff.
    timeout_seconds:
        HTTP timeout applied to each attempt (not the whole retry cycle).
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    log_level:
        Level applied to the ``notionkit`` logger.
    metrics:
        Optional :class:`~notionkit.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) request/response pair of every call to
        *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = DEFAULT_NOTION_VERSION

    base_url: str = DEFAULT_BASE_URL

    # ── Rate limiting & retry ───────────────────────────────────────────
    rate_limit_enabled: bool = True

    rate_limit_strategy: RateLimitStrategy | str = RateLimitStrategy.BALANCED

    max_retries: int | None = None

    base_delay_ms: int | None = None

    max_delay_ms: int | None = None

    jitter_factor: float | None = None

    respect_retry_after: bool = True

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    log_level: int | str = logging.WARNING

    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Resolve strategy defaults and validate configuration."""
        if not self.token or not self.token.strip():
            raise ValueError("token must be a non-empty string")
        if not self.notion_version:
            raise ValueError("notion_version must be a non-empty string")

        url = urlsplit(self.base_url)
        if url.scheme == "http" and url.hostname not in _LOOPBACK_HOSTS:
            raise ValueError(
                f"base_url {self.base_url!r} is plain HTTP on a non-loopback host; "
                "the bearer token would travel unencrypted (insecure)"
            )

        self.rate_limit_strategy = RateLimitStrategy(self.rate_limit_strategy)
        preset = STRATEGY_PRESETS[self.rate_limit_strategy]
        if self.max_retries is None:
            self.max_retries = preset.max_retries
        if self.base_delay_ms is None:
            self.base_delay_ms = preset.base_delay_ms
        if self.max_delay_ms is None:
            self.max_delay_ms = preset.max_delay_ms
        if self.jitter_factor is None:
            self.jitter_factor = preset.jitter_factor

        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError(
                f"max_delay_ms must be >= base_delay_ms, got {self.max_delay_ms} "
                f"< {self.base_delay_ms}"
            )
        if not 0.0 <= self.jitter_factor <= 1.0:
            raise ValueError(f"jitter_factor must be between 0.0 and 1.0, got {self.jitter_factor}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def preset(self):
        """The :class:`StrategyPreset` selected by ``rate_limit_strategy``."""
        return STRATEGY_PRESETS[RateLimitStrategy(self.rate_limit_strategy)]

    def __repr__(self) -> str:
        """Show every field, with the token cut down to its last four characters."""
        shown = {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
        token = shown.pop("token")
        hint = f"...{token[-4:]}" if len(token) >= 4 else "****"
        rest = ", ".join(f"{name}={value!r}" for name, value in shown.items())
        return f"NotionkitConfig(token={hint!r}, {rest})"
