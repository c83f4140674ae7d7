"""In-memory cache of generated plans keyed by normalized prompt."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from layr.models.plan import ProjectPlan

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_MAX_ENTRIES = 20


@dataclass(slots=True)
class CacheEntry:
    """A cached plan and when it was stored."""

    plan: ProjectPlan
    stored_at: float


class PlanCache:
    """TTL cache with least-recently-used eviction.

    Entries are ordered oldest first; a hit moves the entry to the end, so
    the front of the mapping is always the next eviction candidate. Every
    operation completes without suspending, which keeps interleaved async
    callers from observing a half-applied check or eviction.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @staticmethod
    def normalize_key(prompt: str) -> str:
        """Cache key for a prompt: trimmed and lowercased."""
        return prompt.strip().lower()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, prompt: object) -> bool:
        if not isinstance(prompt, str):
            return False
        return self.normalize_key(prompt) in self._entries

    def get(self, prompt: str) -> ProjectPlan | None:
        """Return a fresh copy of the cached plan, or None.

        Expired entries are removed on access. A hit refreshes the copy's
        ``generated_at`` and marks the entry most recently used.
        """
        key = self.normalize_key(prompt)
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Plan cache miss")
            return None

        if self._clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[key]
            logger.debug("Plan cache entry expired")
            return None

        self._entries.move_to_end(key)
        plan = entry.plan.copy()
        plan.generated_at = datetime.now()
        logger.debug("Plan cache hit")
        return plan

    def set(self, prompt: str, plan: ProjectPlan) -> None:
        """Store a copy of a plan, evicting the oldest entry at capacity."""
        key = self.normalize_key(prompt)
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)
            logger.debug("Plan cache full; evicted oldest entry")
        self._entries[key] = CacheEntry(plan=plan.copy(), stored_at=self._clock())

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
