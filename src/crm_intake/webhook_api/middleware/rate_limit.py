"""In-memory fixed-window rate limiting keyed by client address."""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


def client_address(request: Request) -> str:
    """Resolve the source address used as the rate-limit key.

    Checked in order: first hop of ``X-Forwarded-For``, ``CF-Connecting-IP``,
    then the shared ``"unknown"`` bucket.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    connecting = request.headers.get("CF-Connecting-IP")
    if connecting and connecting.strip():
        return connecting.strip()
    return UNKNOWN_ADDRESS


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Fixed-window counter per address.

    The window opens on the first request from an address and resets once
    the clock passes ``reset_at``. The table is capped at ``max_entries``:
    expired windows are swept first, then the least recently seen addresses
    are dropped.
    """

    def __init__(
        self,
        limit: int = 10,
        window_seconds: float = 60,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, RateLimitEntry]" = OrderedDict()
        # Lower bound on every stored reset_at; no window can have expired before it
        self._next_expiry = float("inf")
        self._lock = threading.Lock()

    def allow(self, address: str) -> bool:
        """Count a request from ``address`` and report whether it may proceed."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(address)
            if entry is None or now > entry.reset_at:
                reset_at = now + self.window_seconds
                self._entries[address] = RateLimitEntry(count=1, reset_at=reset_at)
                self._next_expiry = min(self._next_expiry, reset_at)
                self._entries.move_to_end(address)
                self._evict(now)
                return True

            entry.count += 1
            self._entries.move_to_end(address)
            return entry.count <= self.limit

    def _evict(self, now: float):
        if len(self._entries) <= self.max_entries:
            return
        if now > self._next_expiry:
            self._sweep_expired(now)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def _sweep_expired(self, now: float):
        expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
        for key in expired:
            del self._entries[key]
        self._next_expiry = min(
            (entry.reset_at for entry in self._entries.values()), default=float("inf")
        )

    def __len__(self) -> int:
        return len(self._entries)

    def reset(self):
        """Forget every address."""
        with self._lock:
            self._entries.clear()
            self._next_expiry = float("inf")
