"""
Per-license fixed-window rate limiter.

Each license key gets a window of ``window_seconds`` holding at most
``max_requests`` admitted requests. A window is created lazily on the first
request and replaced (not continued) once its reset time has passed. A
periodic sweep drops windows that expired more than one full window ago.

All table mutations happen synchronously between awaits, so no lock is
needed on a single event loop.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from config import settings
from sna.errors import IdentityRequired

logger = logging.getLogger(__name__)

HEADER_LIMIT = "RateLimit-Limit"
HEADER_REMAINING = "RateLimit-Remaining"
HEADER_RESET = "RateLimit-Reset"


@dataclass
class RateWindow:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateDecision:
    """Outcome of a single admission check."""

    admitted: bool
    limit: int
    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter keyed by license key."""

    def __init__(
        self,
        max_requests: Optional[int] = None,
        window_seconds: Optional[float] = None,
        sweep_interval_seconds: Optional[float] = None,
        timer: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests if max_requests is not None else settings.rate_max_requests
        self.window_seconds = window_seconds if window_seconds is not None else settings.rate_window_seconds
        self.sweep_interval_seconds = (
            sweep_interval_seconds if sweep_interval_seconds is not None else settings.rate_sweep_interval_seconds
        )
        self._timer = timer
        self.windows: Dict[str, RateWindow] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    def admit(self, identity: Optional[str]) -> RateDecision:
        """Count one request against ``identity``'s current window.

        Raises ``IdentityRequired`` when no key is given. A full window is
        reported as ``admitted=False`` and left unchanged.
        """
        if not identity:
            raise IdentityRequired("License key required", headers=self.fresh_headers())

        now = self._timer()
        window = self.windows.get(identity)
        if window is None or now >= window.reset_at:
            window = RateWindow(count=0, reset_at=now + self.window_seconds)
            self.windows[identity] = window

        if window.count >= self.max_requests:
            logger.info(f"Rate limit hit for {identity[:8]}... (resets in {self.seconds_until(window.reset_at)}s)")
            return RateDecision(admitted=False, limit=self.max_requests, remaining=0, reset_at=window.reset_at)

        window.count += 1
        return RateDecision(
            admitted=True,
            limit=self.max_requests,
            remaining=self.max_requests - window.count,
            reset_at=window.reset_at,
        )

    def seconds_until(self, reset_at: float) -> int:
        return max(0, math.ceil(reset_at - self._timer()))

    def headers_for(self, decision: RateDecision) -> Dict[str, str]:
        """Build the RateLimit-* response headers for a decision."""
        return {
            HEADER_LIMIT: str(decision.limit),
            HEADER_REMAINING: str(max(0, decision.remaining)),
            HEADER_RESET: str(self.seconds_until(decision.reset_at)),
        }

    def fresh_headers(self) -> Dict[str, str]:
        """Headers describing an untouched window, for requests that never reach admission."""
        return self.headers_for(
            RateDecision(
                admitted=True,
                limit=self.max_requests,
                remaining=self.max_requests,
                reset_at=self._timer() + self.window_seconds,
            )
        )

    def sweep(self, now: Optional[float] = None) -> int:
        """Delete windows that expired more than one full window ago."""
        now = self._timer() if now is None else now
        stale = [key for key, window in self.windows.items() if now > window.reset_at + self.window_seconds]
        for key in stale:
            del self.windows[key]
        if stale:
            logger.debug(f"Rate limiter sweep removed {len(stale)} stale windows")
        return len(stale)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop(self) -> None:
        """Cancel the periodic sweep."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()
