"""Header-driven rate-limit tracking for client-side pacing.

Notion reports its request budget on every response::

    x-ratelimit-limit      requests allowed in the current window
    x-ratelimit-remaining  requests left in the current window
    x-ratelimit-reset      Unix timestamp at which the window resets
    retry-after            seconds to wait (429 responses only)

:class:`RateLimitState` holds the last observed values together with a
:class:`RateLimitMode`.  :class:`RateLimitTracker` (thread-safe) and
:class:`AsyncRateLimitTracker` (async-safe) own one state per transport,
update it after each response and compute the proactive delay awaited
before the next request.  The delay is computed under the lock and slept
outside it so concurrent callers are not serialised behind a sleeper.
"""

from __future__ import annotations

import asyncio
import dataclasses
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from enum import Enum

# ---------------------------------------------------------------------------
# Strategy presets
# ---------------------------------------------------------------------------

class RateLimitStrategy(str, Enum):
    """Named bundles of retry bounds and pacing aggressiveness."""

    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"
    CUSTOM = "custom"


@dataclass(frozen=True)
class StrategyPreset:
    """Numbers behind a :class:`RateLimitStrategy`.

    Attributes
    ----------
    max_retries:
        Default number of retries after a ``429``.
    base_delay_ms, max_delay_ms:
        Default exponential backoff bounds.
    jitter_factor:
        Default fraction of the delay that is randomised.
    low_water_ratio:
        Start pacing once ``remaining / limit`` drops below this.
    delay_multiplier:
        Scales both proactive delays and backoff delays.
    """

    max_retries: int
    base_delay_ms: int
    max_delay_ms: int
    jitter_factor: float
    low_water_ratio: float
    delay_multiplier: float


_BALANCED = StrategyPreset(
    max_retries=3,
    base_delay_ms=1000,
    max_delay_ms=30000,
    jitter_factor=0.1,
    low_water_ratio=0.2,
    delay_multiplier=1.0,
)

STRATEGY_PRESETS: dict[RateLimitStrategy, StrategyPreset] = {
    RateLimitStrategy.CONSERVATIVE: StrategyPreset(
        max_retries=2,
        base_delay_ms=2000,
        max_delay_ms=60000,
        jitter_factor=0.2,
        low_water_ratio=0.3,
        delay_multiplier=1.5,
    ),
    RateLimitStrategy.BALANCED: _BALANCED,
    RateLimitStrategy.AGGRESSIVE: StrategyPreset(
        max_retries=5,
        base_delay_ms=500,
        max_delay_ms=15000,
        jitter_factor=0.05,
        low_water_ratio=0.1,
        delay_multiplier=0.7,
    ),
    RateLimitStrategy.CUSTOM: _BALANCED,
}


# ---------------------------------------------------------------------------
# Header parsing
# ---------------------------------------------------------------------------

def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value.strip())
    except ValueError:
        return None


def parse_retry_after(value: str | None, now: float | None = None) -> float | None:
    """Parse a ``Retry-After`` header into seconds.

    Accepts delta-seconds (``"2"``, ``"1.5"``) and HTTP-dates.  Negative
    or unparseable values yield ``None``.
    """
    if value is None:
        return None
    seconds = _parse_float(value)
    if seconds is None:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        seconds = when.timestamp() - (time.time() if now is None else now)
    return seconds if seconds >= 0 else None


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class RateLimitMode(str, Enum):
    """Where the client stands with respect to its request budget."""

    NORMAL = "normal"
    THROTTLED = "throttled"
    BACKOFF = "backoff"


@dataclass
class RateLimitState:
    """Last rate-limit information observed from the server.

    Fields stay ``None`` until a response carrying the matching header is
    seen.  ``retry_after`` is only set while in ``BACKOFF``.
    """

    limit: int | None = None
    remaining: int | None = None
    reset_epoch_seconds: float | None = None
    retry_after: float | None = None
    mode: RateLimitMode = RateLimitMode.NORMAL

    def time_until_reset(self, now: float | None = None) -> float:
        if self.reset_epoch_seconds is None:
            return 0.0
        now = time.time() if now is None else now
        return max(0.0, self.reset_epoch_seconds - now)

    @property
    def is_exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def is_approaching_limit(self, low_water_ratio: float) -> bool:
        if self.limit is None or self.remaining is None or self.limit <= 0:
            return False
        return self.remaining / self.limit < low_water_ratio

    def update(
        self,
        headers: Mapping[str, str],
        status_code: int,
        low_water_ratio: float,
        now: float | None = None,
    ) -> None:
        """Fold one response's headers and status into the state."""
        lowered = {k.lower(): v for k, v in headers.items()}

        limit = _parse_int(lowered.get("x-ratelimit-limit"))
        if limit is not None:
            self.limit = limit
        remaining = _parse_int(lowered.get("x-ratelimit-remaining"))
        if remaining is not None:
            self.remaining = remaining
        reset = _parse_float(lowered.get("x-ratelimit-reset"))
        if reset is not None:
            self.reset_epoch_seconds = reset

        if status_code == 429:
            self.retry_after = parse_retry_after(lowered.get("retry-after"), now)
            self.mode = RateLimitMode.BACKOFF
            return

        self.retry_after = None
        if self.is_exhausted or self.is_approaching_limit(low_water_ratio):
            self.mode = RateLimitMode.THROTTLED
        else:
            self.mode = RateLimitMode.NORMAL

    def proactive_delay(
        self,
        preset: StrategyPreset,
        max_delay: float | None = None,
        now: float | None = None,
    ) -> float:
        """Seconds to wait before the next request, ``0.0`` when unthrottled.

        With no budget left the full time to reset is returned; while below
        the low-water mark the time to reset is spread over the remaining
        requests and scaled by the preset's multiplier.  The result is
        capped at *max_delay* when given.
        """
        if self.remaining is None:
            return 0.0
        if self.is_exhausted:
            delay = self.time_until_reset(now)
        elif self.is_approaching_limit(preset.low_water_ratio):
            delay = self.time_until_reset(now) / self.remaining * preset.delay_multiplier
        else:
            return 0.0
        if max_delay is not None:
            delay = min(delay, max_delay)
        return delay


# ---------------------------------------------------------------------------
# Trackers
# ---------------------------------------------------------------------------

class RateLimitTracker:
    """Thread-safe owner of one :class:`RateLimitState`.

    Parameters
    ----------
    preset:
        Pacing parameters, usually ``config.preset``.
    max_delay:
        Upper bound (seconds) on a single proactive delay.
    clock:
        Wall-clock source returning epoch seconds.  Injected in tests.
    """

    __slots__ = ("_clock", "_lock", "max_delay", "preset", "state")

    def __init__(
        self,
        preset: StrategyPreset = _BALANCED,
        max_delay: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.preset: StrategyPreset = preset
        self.max_delay: float | None = max_delay
        self.state: RateLimitState = RateLimitState()
        self._clock = clock
        self._lock = threading.Lock()

    def observe(self, headers: Mapping[str, str], status_code: int) -> RateLimitState:
        """Update from a response and return a snapshot of the new state."""
        with self._lock:
            self.state.update(headers, status_code, self.preset.low_water_ratio, self._clock())
            return dataclasses.replace(self.state)

    def snapshot(self) -> RateLimitState:
        with self._lock:
            return dataclasses.replace(self.state)

    def wait(self) -> float:
        """Block for the proactive delay, if any.  Returns seconds waited."""
        with self._lock:
            delay = self.state.proactive_delay(self.preset, self.max_delay, self._clock())

        # Sleep outside the lock so other threads can read the state.
        if delay > 0:
            time.sleep(delay)
        return delay


class AsyncRateLimitTracker:
    """Async-safe owner of one :class:`RateLimitState`.

    Mirrors :class:`RateLimitTracker` but uses an :class:`asyncio.Lock` and
    :func:`asyncio.sleep`.  Cancelling a task while it waits propagates
    :class:`asyncio.CancelledError` and leaves the state untouched.
    """

    __slots__ = ("_clock", "_lock", "max_delay", "preset", "state")

    def __init__(
        self,
        preset: StrategyPreset = _BALANCED,
        max_delay: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.preset: StrategyPreset = preset
        self.max_delay: float | None = max_delay
        self.state: RateLimitState = RateLimitState()
        self._clock = clock
        self._lock = asyncio.Lock()

    async def observe(self, headers: Mapping[str, str], status_code: int) -> RateLimitState:
        async with self._lock:
            self.state.update(headers, status_code, self.preset.low_water_ratio, self._clock())
            return dataclasses.replace(self.state)

    async def snapshot(self) -> RateLimitState:
        async with self._lock:
            return dataclasses.replace(self.state)

    def peek(self) -> RateLimitState:
        """Copy the state without awaiting the lock.

        Updates under the lock contain no ``await``, so on the event loop
        thread a copy taken here always reflects whole responses.
        """
        return dataclasses.replace(self.state)

    async def wait(self) -> float:
        async with self._lock:
            delay = self.state.proactive_delay(self.preset, self.max_delay, self._clock())

        if delay > 0:
            await asyncio.sleep(delay)
        return delay
