# dailyluck/jrrp/logic/digits.py
from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .evaluator import ExpressionError, evaluate

logger = logging.getLogger(__name__)

MIN_BASE = 1
MAX_BASE = 9
TABLE_KEYS = tuple(range(0, 11)) + (100,)


@dataclass(frozen=True)
class Operator:
    symbol: str
    apply: Callable[[int, int], int]
    weight: int


# Weights only steer random choices; correctness always comes from the evaluator.
OPERATORS: Sequence[Operator] = (
    Operator("+", lambda a, b: a + b, 10),
    Operator("-", lambda a, b: a - b, 8),
    Operator("*", lambda a, b: a * b, 6),
    Operator("<<", lambda a, b: a << b, 4),
    Operator(">>", lambda a, b: a >> b, 4),
    Operator("|", lambda a, b: a | b, 3),
    Operator("&", lambda a, b: a & b, 3),
    Operator("^", lambda a, b: a ^ b, 2),
)
OPERATORS_BY_SYMBOL: Dict[str, Operator] = {op.symbol: op for op in OPERATORS}


def pick_operator(rng: random.Random, symbols: Optional[Sequence[str]] = None) -> Operator:
    """Weighted random choice, optionally restricted to ``symbols``."""
    pool = [OPERATORS_BY_SYMBOL[s] for s in symbols] if symbols else list(OPERATORS)
    return rng.choices(pool, weights=[op.weight for op in pool], k=1)[0]


def weighted_order(rng: random.Random, symbols: Optional[Sequence[str]] = None) -> List[Operator]:
    """All operators (or ``symbols``) in a weight-biased random order."""
    pool = [OPERATORS_BY_SYMBOL[s] for s in symbols] if symbols else list(OPERATORS)
    ordered: List[Operator] = []
    while pool:
        op = rng.choices(pool, weights=[o.weight for o in pool], k=1)[0]
        ordered.append(op)
        pool.remove(op)
    return ordered


def check_base(base: int) -> int:
    if not isinstance(base, int) or isinstance(base, bool) or not MIN_BASE <= base <= MAX_BASE:
        raise ValueError(f"base number must be an integer in [{MIN_BASE}, {MAX_BASE}], got {base!r}")
    return base


class DigitTable:
    """
    Expressions for 0..10 and 100 written with a single base digit.

    Entries are fixed once built. Composite values found later can be
    remembered, but only after they evaluate to their key.
    """

    def __init__(self, base: int):
        self.base = check_base(base)
        self._exprs: Dict[int, str] = {}
        self._lock = threading.Lock()
        self._build()

    # -------- public API --------
    def __getitem__(self, n: int) -> str:
        return self._exprs[n]

    def __contains__(self, n: int) -> bool:
        return n in self._exprs

    def lookup(self, n: int) -> Optional[str]:
        return self._exprs.get(n)

    def remember(self, n: int, expr: str) -> str:
        """Store ``expr`` for ``n`` unless an entry exists; returns the stored entry."""
        with self._lock:
            existing = self._exprs.get(n)
            if existing is not None:
                return existing
            if evaluate(expr) != n:
                raise ExpressionError(f"refusing to memoize {expr!r} for {n}")
            self._exprs[n] = expr
            return expr

    def snapshot(self) -> Dict[int, str]:
        return dict(self._exprs)

    # -------- internals --------
    def _build(self) -> None:
        b = self.base
        t = self._exprs
        one = f"({b} / {b})"

        # Fallback shapes that work for any base; each only uses smaller keys.
        generic: Dict[int, Callable[[], str]] = {
            0: lambda: f"({b} ^ {b})",
            1: lambda: one,
            2: lambda: f"({t[1]} << {t[1]})",
            3: lambda: f"({t[2]} + {t[1]})",
            4: lambda: f"({t[1]} << {t[2]})",
            5: lambda: f"({t[4]} + {t[1]})",
            6: lambda: f"({t[3]} << {t[1]})",
            7: lambda: f"({t[6]} + {t[1]})",
            8: lambda: f"({t[1]} << {t[3]})",
            9: lambda: f"({t[8]} + {t[1]})",
            10: lambda: f"({t[5]} << {t[1]})",
        }

        for n in range(0, 11):
            candidates = [generic[n]()]
            if n == b:
                candidates.append(str(b))
            for op in OPERATORS:
                if op.apply(b, b) == n:
                    candidates.append(f"({b} {op.symbol} {b})")
                for k in (1, 2):
                    if k in t and k != n and op.apply(b, k) == n:
                        candidates.append(f"({b} {op.symbol} {t[k]})")
            t[n] = self._shortest_valid(n, candidates)

        t[100] = self._shortest_valid(100, [f"({t[10]} * {t[10]})"])
        logger.debug("Digit table for base %d built: %d entries", b, len(t))

    @staticmethod
    def _shortest_valid(n: int, candidates: List[str]) -> str:
        valid = [c for c in candidates if evaluate(c) == n]
        if not valid:
            raise ExpressionError(f"no digit expression for {n}: {candidates!r}")
        return min(valid, key=len)
