# dailyluck/jrrp/logic/formatter.py
from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from dailyluck.core.dates import parse_month_day

from .digits import check_base
from .expression_cache import DEFAULT_TTL_SECONDS, ExpressionCache
from .generator import ExpressionGenerator

logger = logging.getLogger(__name__)

DEFAULT_BASE_NUMBER = 6


class DisplayMode(str, Enum):
    PLAIN = "plain"
    BINARY = "binary"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class DisplayConfig:
    mode: DisplayMode = DisplayMode.PLAIN
    restricted_date: Optional[str] = None   # "MM-DD"; obfuscate only on that day
    base_number: int = DEFAULT_BASE_NUMBER

    def __post_init__(self):
        object.__setattr__(self, "mode", DisplayMode(self.mode))
        if self.restricted_date:
            parse_month_day(self.restricted_date)
        else:
            object.__setattr__(self, "restricted_date", None)
        check_base(self.base_number)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "DisplayConfig":
        """Build from Flask-style config keys (JRRP_DISPLAY_MODE, ...)."""
        mode = str(cfg.get("JRRP_DISPLAY_MODE") or DisplayMode.PLAIN.value).strip().lower()
        base = cfg.get("JRRP_BASE_NUMBER")
        return cls(
            mode=DisplayMode(mode),
            restricted_date=(cfg.get("JRRP_RESTRICTED_DATE") or None),
            base_number=DEFAULT_BASE_NUMBER if base in (None, "") else int(base),
        )

    def active_on(self, day: date) -> bool:
        if not self.restricted_date:
            return True
        month, dom = parse_month_day(self.restricted_date)
        return day.month == month and day.day == dom


class ScoreFormatter:
    """
    Turns a luck score into what the user sees. Owns the expression generator
    and one ExpressionCache per base number; build one per process and inject it.
    """

    def __init__(
        self,
        generator: Optional[ExpressionGenerator] = None,
        rng: Optional[random.Random] = None,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rng = rng or random.Random()
        self.generator = generator or ExpressionGenerator(rng=self.rng)
        self.ttl = ttl
        self.clock = clock
        self._caches: Dict[int, ExpressionCache] = {}
        self._binary = ExpressionCache(ttl=ttl, clock=clock)
        self._lock = threading.Lock()

    # -------- public API --------
    def format(self, score: int, day: date, config: DisplayConfig) -> str:
        if config.mode is DisplayMode.PLAIN or not config.active_on(day):
            return str(score)
        try:
            if config.mode is DisplayMode.BINARY:
                return self._binary.binary(score)
            return self.rng.choice(self.candidates(score, config.base_number))
        except Exception:
            logger.exception("Error formatting score %r (mode=%s, base=%r)",
                             score, config.mode.value, config.base_number)
            return str(score)

    def candidates(self, score: int, base: int) -> Tuple[str, ...]:
        cache = self.cache(base)
        cached = cache.get(score)
        if cached is not None:
            return cached
        logger.debug("Expression cache miss for %d (base %d)", score, base)
        expressions = self.generator.generate(score, base)
        return cache.put(score, expressions).expressions

    def cache(self, base: int) -> ExpressionCache:
        with self._lock:
            cache = self._caches.get(base)
            if cache is None:
                cache = ExpressionCache(ttl=self.ttl, clock=self.clock)
                self._caches[base] = cache
            return cache

    def warmup(self, base: int = DEFAULT_BASE_NUMBER) -> int:
        """Fill the cache for every score; returns how many scores were (re)generated."""
        generated = 0
        cache = self.cache(base)
        for score in range(0, 101):
            if cache.get(score) is None:
                self.candidates(score, base)
                generated += 1
        return generated

    def purge_expired(self) -> int:
        with self._lock:
            caches = list(self._caches.values())
        return sum(c.purge_expired() for c in caches)

    def report(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            caches = dict(self._caches)
        return {str(base): cache.report() for base, cache in sorted(caches.items())}
