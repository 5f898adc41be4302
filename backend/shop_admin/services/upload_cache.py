"""
Short-lived, in-process memory of recent uploads keyed by content hash.

Suppresses re-uploading identical bytes submitted twice in quick succession
(double-clicked upload buttons, resubmitted forms). It is an optimization
only: the asset store existence check is the authoritative dedup guard.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from cachetools import TTLCache

from shop_admin.schemas.image import UploadResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60.0
DEFAULT_MAX_ENTRIES = 1024


class DuplicateUploadCache:
    """Content hash -> UploadResult, expiring after ``ttl_seconds``."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        # TTLCache is not task-safe on its own; every access goes through the lock
        self._entries: TTLCache = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=clock)
        self._lock = asyncio.Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, content_hash: str) -> Optional[UploadResult]:
        async with self._lock:
            return self._entries.get(content_hash)

    async def put(self, content_hash: str, result: UploadResult) -> None:
        async with self._lock:
            self._entries[content_hash] = result

    async def sweep(self) -> int:
        """Evict expired entries, returning how many were removed."""
        async with self._lock:
            expired = self._entries.expire()
        if expired:
            logger.debug("Upload cache sweep evicted %d entries", len(expired))
        return len(expired)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    # --- background sweep ---
    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            try:
                await self.sweep()
            except Exception:
                logger.exception("Upload cache sweep failed")

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_forever())
            logger.info(
                "Upload cache sweep started (ttl=%ss, interval=%ss)",
                self.ttl_seconds, self.sweep_interval_seconds,
            )

    async def stop(self) -> None:
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
        logger.info("Upload cache sweep stopped")
