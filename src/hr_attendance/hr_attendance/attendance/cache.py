from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# (employee_id, tenant_id, "YYYY-MM")
CacheKey = Tuple[int, int, str]


@dataclass(frozen=True)
class _Entry:
    branch_id: Optional[int]
    value: Any


class MonthlyCalendarCache:
    """Per-employee monthly tallies keyed by (employee_id, tenant_id, year_month).

    Writers invalidate only the keys they affect: one employee-month, one
    tenant-month (optionally one branch), or one tenant's config scope.

    Every invalidation also bumps the tenant's generation. A reader takes
    ``generation(tenant_id)`` before it loads anything from storage and hands
    it back to ``put``; if a write invalidated the tenant in between, the
    computed value is returned to the caller but never stored.
    """

    def __init__(self, *, enabled: bool = True):
        self._enabled = enabled
        self._entries: Dict[CacheKey, _Entry] = {}
        self._generations: Dict[int, int] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(employee_id: int, tenant_id: int, year_month: str) -> CacheKey:
        return (int(employee_id), int(tenant_id), year_month)

    def generation(self, tenant_id: int) -> int:
        with self._lock:
            return self._generations.get(int(tenant_id), 0)

    def get(self, key: CacheKey) -> Any:
        if not self._enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry else None

    def put(
        self,
        key: CacheKey,
        value: Any,
        *,
        branch_id: Optional[int] = None,
        generation: Optional[int] = None,
    ) -> bool:
        """Store ``value`` unless the tenant was invalidated since ``generation``."""
        if not self._enabled:
            return False
        with self._lock:
            if generation is not None and self._generations.get(key[1], 0) != generation:
                logger.debug("cache put skipped for %s: invalidated while computing", key)
                return False
            self._entries[key] = _Entry(branch_id=branch_id, value=value)
        return True

    def invalidate(self, key: CacheKey) -> bool:
        with self._lock:
            self._bump(key[1])
            removed = self._entries.pop(key, None) is not None
        logger.debug("cache invalidate %s removed=%s", key, removed)
        return removed

    def invalidate_scope(
        self,
        *,
        tenant_id: int,
        year_month: Optional[str] = None,
        branch_id: Optional[int] = None,
    ) -> int:
        """Drop every key of a tenant, narrowed by month and/or branch."""

        def _matches(key: CacheKey, entry: _Entry) -> bool:
            if key[1] != int(tenant_id):
                return False
            if year_month is not None and key[2] != year_month:
                return False
            if branch_id is not None and entry.branch_id != branch_id:
                return False
            return True

        with self._lock:
            self._bump(int(tenant_id))
            doomed = [k for k, e in self._entries.items() if _matches(k, e)]
            for k in doomed:
                del self._entries[k]
        logger.debug(
            "cache invalidate tenant=%s month=%s branch=%s removed=%d", tenant_id, year_month, branch_id, len(doomed)
        )
        return len(doomed)

    def _bump(self, tenant_id: int) -> None:
        # Caller holds the lock.
        self._generations[tenant_id] = self._generations.get(tenant_id, 0) + 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
