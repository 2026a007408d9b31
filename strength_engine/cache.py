"""Memoization of PR results at the HTTP boundary, keyed by history version."""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Iterable, Optional

from strength_engine.models import Session

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 512


def _canonical_session(session: Session) -> list:
    return [
        session.session_id,
        session.user_id,
        session.created_at.isoformat(),
        [
            [
                e.exercise_id,
                e.exercise_name,
                [[s.set_index, s.reps, s.weight, s.is_warmup] for s in e.sets],
            ]
            for e in session.exercises
        ],
    ]


def history_version(sessions: Iterable[Session], user_id: Optional[str] = None) -> str:
    """
    Content hash of a lifter's history. Any added, removed or edited set
    changes the version; input order does not.
    """
    canonical = sorted(
        (_canonical_session(s) for s in sessions if user_id is None or s.user_id == user_id),
        key=lambda row: (row[2], row[0]),
    )
    payload = json.dumps(canonical, separators=(',', ':'), default=str)
    return hashlib.sha1(payload.encode('utf-8')).hexdigest()


class ResultCache:
    """Thread-safe LRU cache of computed results."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._cache: "OrderedDict[Hashable, Dict[str, Any]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get(self, key: Hashable) -> Optional[Dict[str, Any]]:
        with self._lock:
            if key not in self._cache:
                self.misses += 1
                return None
            self._cache.move_to_end(key)
            self.hits += 1
            return copy.deepcopy(self._cache[key])

    def set(self, key: Hashable, value: Dict[str, Any]) -> None:
        with self._lock:
            self._cache[key] = copy.deepcopy(value)
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_entries:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted cached result %s", evicted)

    def get_or_compute(self, key: Hashable, compute: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        cached = self.get(key)
        if cached is not None:
            return cached
        # Computed outside the lock; concurrent misses on one key just recompute
        result = compute()
        self.set(key, result)
        return result

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {'entries': len(self._cache), 'hits': self.hits, 'misses': self.misses}
