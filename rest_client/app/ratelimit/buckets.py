"""
Per-bucket locks and cooldowns, and the global throttle.

Timestamps are monotonic milliseconds as returned by the dispatcher's clock.
"""

import asyncio
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from shared.logging import get_logger


class Bucket:
    """One rate-limit bucket: a FIFO lock plus the time its cooldown ends."""

    __slots__ = ("key", "lock", "reset_at", "_pins")

    def __init__(self, key: str):
        self.key = key
        self.lock = asyncio.Lock()
        self.reset_at: Optional[float] = None
        self._pins = 0

    def remaining(self, now: float) -> float:
        """Milliseconds left on the cooldown, 0 when it has passed."""
        if self.reset_at is None:
            return 0.0
        return max(0.0, self.reset_at - now)

    def cool_down(self, delay_ms: float, now: float) -> None:
        self.reset_at = now + delay_ms

    def is_idle(self, now: float) -> bool:
        """True when nobody uses the bucket and forgetting it loses nothing live."""
        return self._pins == 0 and not self.lock.locked() and self.remaining(now) == 0

    def __repr__(self) -> str:
        return f"Bucket(key={self.key!r}, locked={self.lock.locked()}, reset_at={self.reset_at})"


class BucketLease:
    """Tracks whether the calling task currently holds a bucket lock.

    The commit loop releases and reacquires the lock around retry sleeps; if
    the task is cancelled mid-reacquire the lease knows it holds nothing and
    the final release is a no-op.
    """

    def __init__(self, lock: asyncio.Lock):
        self._lock = lock
        self.held = False

    async def acquire(self) -> None:
        await self._lock.acquire()
        self.held = True

    def release(self) -> None:
        if self.held:
            self.held = False
            self._lock.release()

    async def __aenter__(self) -> "BucketLease":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()


class BucketRegistry:
    """Lazily provisions one Bucket per key.

    Lookups and inserts never await, so under asyncio they are atomic with
    respect to other tasks and need no guard of their own.
    """

    def __init__(self):
        self._buckets: Dict[str, Bucket] = {}
        self.logger = get_logger("rest_client.buckets")

    def get(self, key: str) -> Bucket:
        """Get or create the bucket for a key."""
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = Bucket(key)
            self.logger.debug("Created bucket", bucket=key)
        return bucket

    @contextmanager
    def checkout(self, key: str) -> Iterator[Bucket]:
        """Pin a bucket so pruning cannot drop it while a dispatch uses it."""
        bucket = self.get(key)
        bucket._pins += 1
        try:
            yield bucket
        finally:
            bucket._pins -= 1

    def prune(self, now: float) -> int:
        """Evict idle buckets and return how many were dropped."""
        idle = [key for key, bucket in self._buckets.items() if bucket.is_idle(now)]
        for key in idle:
            del self._buckets[key]
        if idle:
            self.logger.debug("Pruned idle buckets", count=len(idle), remaining=len(self._buckets))
        return len(idle)

    def __contains__(self, key: str) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)


class GlobalThrottle:
    """Process-wide deadline before which no request may start."""

    def __init__(self):
        self.reset_at: float = 0.0

    def remaining(self, now: float) -> float:
        return max(0.0, self.reset_at - now)

    def cool_down(self, delay_ms: float, now: float) -> None:
        self.reset_at = now + delay_ms
