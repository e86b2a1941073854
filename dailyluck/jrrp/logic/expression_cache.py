# dailyluck/jrrp/logic/expression_cache.py
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class ScoreCacheEntry:
    target: int
    expressions: Tuple[str, ...]
    created_at: float


class ExpressionCache:
    """
    Validated expressions per target, plus memoized binary renderings.
    Stale entries are not evicted on read; ``get`` simply reports them absent
    until ``put`` replaces them or ``purge_expired`` sweeps them.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl)
        self.clock = clock
        self._entries: Dict[int, ScoreCacheEntry] = {}
        self._binary: Dict[int, str] = {}
        self._lock = threading.Lock()

    def _fresh(self, entry: ScoreCacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl

    def get(self, target: int) -> Optional[Tuple[str, ...]]:
        with self._lock:
            entry = self._entries.get(target)
        if entry is None or not self._fresh(entry, self.clock()):
            return None
        return entry.expressions

    def put(self, target: int, expressions: Sequence[str]) -> ScoreCacheEntry:
        entry = ScoreCacheEntry(target=target, expressions=tuple(expressions), created_at=self.clock())
        with self._lock:
            self._entries[target] = entry
        return entry

    def binary(self, target: int) -> str:
        with self._lock:
            rendered = self._binary.get(target)
            if rendered is None:
                rendered = format(target, "b")
                self._binary[target] = rendered
            return rendered

    def purge_expired(self) -> int:
        now = self.clock()
        with self._lock:
            stale = [t for t, e in self._entries.items() if not self._fresh(e, now)]
            for t in stale:
                del self._entries[t]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def report(self) -> Dict[str, int]:
        now = self.clock()
        with self._lock:
            fresh = sum(1 for e in self._entries.values() if self._fresh(e, now))
            return {"entries": len(self._entries), "fresh": fresh, "binary": len(self._binary)}
