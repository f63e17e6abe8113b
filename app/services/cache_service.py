import logging
import threading
import time
from typing import Any, Callable, Optional, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)


class CategoryCache:
    """Single-slot, time-boxed snapshot of the full categories listing.

    The cache is not keyed: any write anywhere invalidates the whole
    snapshot. The slot holds one ``(data, created_at)`` tuple so that
    ``get``/``set``/``clear`` are each a single reference read or swap and
    a reader never observes a half-updated snapshot.

    ``generation`` is bumped by every ``clear``. A reader that captures it
    before computing and passes it back to ``set`` cannot store a result
    that a write invalidated while it was being computed.
    """

    def __init__(
        self,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._slot: Optional[Tuple[Any, float]] = None
        self._lock = threading.Lock()
        self.generation = 0

    def get(self) -> Optional[Any]:
        slot = self._slot
        if slot is None:
            return None
        data, created_at = slot
        if self._clock() - created_at >= self.ttl_seconds:
            return None
        return data

    def set(self, data: Any, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self.generation:
                logger.info("Discarding categories snapshot computed before a write")
                return False
            self._slot = (data, self._clock())
            return True

    def clear(self) -> None:
        with self._lock:
            self.generation += 1
            self._slot = None
        logger.info("Categories cache cleared")

    @property
    def age(self) -> Optional[float]:
        """Seconds since the snapshot was stored, or None when empty."""
        slot = self._slot
        if slot is None:
            return None
        return self._clock() - slot[1]


def get_category_cache(request: Request) -> CategoryCache:
    return request.app.state.category_cache
