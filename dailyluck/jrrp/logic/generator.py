# dailyluck/jrrp/logic/generator.py
"""
Expression synthesis for luck scores.

Every strategy takes ``(target, table)`` and returns an expression string or
None when it gives up within its own bound. ``ExpressionGenerator.generate``
runs all of them, keeps the ones that evaluate back to the target and falls
back to the plain decimal string when nothing survives.
"""
from __future__ import annotations

import logging
import math
import random
import threading
from typing import Callable, Dict, List, Optional

from .digits import DigitTable, check_base, pick_operator, weighted_order
from .evaluator import evaluate

logger = logging.getLogger(__name__)

MIN_TARGET = 0
MAX_TARGET = 100

MAX_FACTOR = 9
MAX_DEPTH = 4
MIX_OPERAND_LIMIT = 20

# Bits are disjoint, so any of these joins two fragments into their sum.
BIT_JOIN_SYMBOLS = ("+", "|", "^")

Strategy = Callable[[int, DigitTable], Optional[str]]


def check_target(target: int) -> int:
    if not isinstance(target, int) or isinstance(target, bool) or not MIN_TARGET <= target <= MAX_TARGET:
        raise ValueError(f"target must be an integer in [{MIN_TARGET}, {MAX_TARGET}], got {target!r}")
    return target


class ExpressionGenerator:
    """Owns the per-base digit tables and the strategy set."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._tables: Dict[int, DigitTable] = {}
        self._lock = threading.Lock()
        self.strategies: Dict[str, Strategy] = {
            "decimal": self.decimal,
            "factor": self.factor,
            "sqrt_factor": self.sqrt_factor,
            "binary": self.binary,
            "mixed": self.mixed,
            "operator_mix": self.operator_mix,
        }

    # -------- public API --------
    def table(self, base: int) -> DigitTable:
        check_base(base)
        with self._lock:
            table = self._tables.get(base)
            if table is None:
                table = DigitTable(base)
                self._tables[base] = table
            return table

    def generate(self, target: int, base: int) -> List[str]:
        """
        Validated candidate expressions for ``target``.
        Never empty: ``[str(target)]`` when no strategy produced anything.
        """
        check_target(target)
        table = self.table(base)
        candidates: List[str] = []
        for name in self.strategies:
            expr = self.run_strategy(name, target, base, table=table)
            if expr is not None and expr not in candidates:
                candidates.append(expr)
        if not candidates:
            logger.debug("No strategy produced an expression for %d (base %d)", target, base)
            return [str(target)]
        return candidates

    def run_strategy(self, name: str, target: int, base: int,
                     table: Optional[DigitTable] = None) -> Optional[str]:
        """Run one strategy and return its expression only if it evaluates to ``target``."""
        check_target(target)
        table = table or self.table(base)
        expr = self.strategies[name](target, table)
        if expr is None:
            logger.debug("Strategy %s exhausted for %d (base %d)", name, target, base)
            return None
        value = evaluate(expr)
        if value != target:
            logger.debug("Strategy %s produced %r = %d, wanted %d", name, expr, value, target)
            return None
        return expr

    # -------- decimal construction --------
    def decimal(self, target: int, table: DigitTable) -> Optional[str]:
        """
        Tens times ten plus ones. Above 50 the nearest ten is used instead:
        ones 1..5 add onto the ten below, ones 6..9 subtract from the ten above.
        """
        if not MIN_TARGET <= target <= MAX_TARGET:
            return None
        cached = table.lookup(target)
        if cached is not None:
            return cached

        ten = table[10]
        tens, ones = divmod(target, 10)
        if tens == 1:
            expr = f"({ten} + {table[ones]})"
        elif ones == 0:
            expr = f"({table[tens]} * {ten})"
        elif target <= 50:
            expr = f"(({table[tens]} * {ten}) + {table[ones]})"
        elif ones <= 5:
            expr = f"({self.decimal(tens * 10, table)} + {table[ones]})"
        else:
            expr = f"({self.decimal((tens + 1) * 10, table)} - {table[10 - ones]})"
        return table.remember(target, expr)

    # -------- factor decomposition --------
    def _small_factors(self, num: int, depth: int = 0) -> Optional[List[int]]:
        """Factors in [2, 9] whose product is ``num``, largest divisor first."""
        if depth >= MAX_DEPTH:
            return None
        for i in range(MAX_FACTOR, 1, -1):
            if num % i:
                continue
            quotient = num // i
            if quotient <= MAX_FACTOR:
                return [i, quotient]
            rest = self._small_factors(quotient, depth + 1)
            if rest:
                return [i] + rest
        return None

    def _product(self, factors: List[int], table: DigitTable) -> str:
        parts = [self.decimal(f, table) for f in factors]
        self.rng.shuffle(parts)
        return f"({' * '.join(parts)})"

    def factor(self, target: int, table: DigitTable) -> Optional[str]:
        """
        Product of single-digit factors; for targets with a large prime factor,
        the nearest factorable neighbour plus or minus the difference.
        """
        if target <= 1:
            return self.decimal(target, table)
        factors = self._small_factors(target)
        if factors:
            return self._product(factors, table)

        for distance in range(1, MAX_TARGET):
            lower, upper = target - distance, target + distance
            if lower > 1:
                factors = self._small_factors(lower)
                if factors:
                    return f"({self._product(factors, table)} + {self.decimal(distance, table)})"
            if upper <= MAX_TARGET:
                factors = self._small_factors(upper)
                if factors:
                    return f"({self._product(factors, table)} - {self.decimal(distance, table)})"
        return None

    def sqrt_factor(self, target: int, table: DigitTable, depth: int = 0) -> Optional[str]:
        """
        Divide by the largest factor up to min(9, isqrt(n)) and recurse on the
        quotient; primes fall back to the ten below plus the remainder.
        """
        if target <= 10:
            return table[target]
        if depth >= MAX_DEPTH:
            return self.decimal(target, table)
        for i in range(min(MAX_FACTOR, math.isqrt(target)), 1, -1):
            if target % i == 0:
                quotient = self.sqrt_factor(target // i, table, depth + 1)
                return f"({table[i]} * {quotient})"
        base = target // 10 * 10
        return f"({self.sqrt_factor(base, table, depth + 1)} + {table[target - base]})"

    # -------- binary decomposition --------
    def _bit_fragment(self, bit: int, table: DigitTable) -> str:
        value = 1 << bit
        if value in table and self.rng.random() < 0.5:
            return table[value]
        return f"({table[1]} << {table[bit]})"

    def _join(self, left: str, right: str) -> str:
        op = pick_operator(self.rng, BIT_JOIN_SYMBOLS)
        return f"({left} {op.symbol} {right})"

    def binary(self, target: int, table: DigitTable) -> Optional[str]:
        """One fragment per set bit, joined either as a balanced tree or a left-to-right chain."""
        if target == 0:
            return table[0]
        fragments = [self._bit_fragment(bit, table)
                     for bit in reversed(range(target.bit_length())) if target >> bit & 1]

        if self.rng.random() < 0.5:
            while len(fragments) > 1:
                paired = [self._join(fragments[i], fragments[i + 1])
                          for i in range(0, len(fragments) - 1, 2)]
                if len(fragments) % 2:
                    paired.append(fragments[-1])
                fragments = paired
            return fragments[0]

        expr = fragments[0]
        for fragment in fragments[1:]:
            expr = self._join(expr, fragment)
        return expr

    # -------- recursive / mixed decomposition --------
    def mixed(self, target: int, table: DigitTable, depth: int = 0) -> Optional[str]:
        """
        Tries a perfect-square split, a factor split and a power-of-two split in
        random order, recursing on the parts. Falls back to operator-mix, then
        decimal, once no split applies or the depth cap is reached.
        """
        if target <= 10:
            return table[target]
        if depth >= MAX_DEPTH:
            return self.decimal(target, table)

        splits = [self._square_split, self._factor_split, self._power_split]
        self.rng.shuffle(splits)
        for split in splits:
            expr = split(target, table, depth)
            if expr is not None:
                return expr
        return self.operator_mix(target, table) or self.decimal(target, table)

    def _square_split(self, target: int, table: DigitTable, depth: int) -> Optional[str]:
        root = math.isqrt(target)
        if root < 2 or root * root != target:
            return None
        side = self.mixed(root, table, depth + 1)
        return f"({side} * {side})"

    def _factor_split(self, target: int, table: DigitTable, depth: int) -> Optional[str]:
        divisors = [d for d in range(2, math.isqrt(target) + 1) if target % d == 0]
        if not divisors:
            return None
        d = self.rng.choice(divisors)
        return f"({self.mixed(d, table, depth + 1)} * {self.mixed(target // d, table, depth + 1)})"

    def _power_split(self, target: int, table: DigitTable, depth: int) -> Optional[str]:
        bit = target.bit_length() - 1
        if bit < 1:
            return None
        shifted = f"({table[1]} << {table[bit]})"
        remainder = target - (1 << bit)
        if remainder == 0:
            return shifted
        return f"({shifted} + {self.mixed(remainder, table, depth + 1)})"

    # -------- operator mix --------
    def operator_mix(self, target: int, table: DigitTable) -> Optional[str]:
        """
        Bounded search for ``((b op1 x) op2 y) == target`` with 1 <= x, y <= 20.
        Operators are tried in a weight-biased random order.
        """
        b = table.base
        first_ops = weighted_order(self.rng)
        second_ops = weighted_order(self.rng)
        operands = range(1, MIX_OPERAND_LIMIT + 1)
        for op1 in first_ops:
            for x in operands:
                partial = op1.apply(b, x)
                for op2 in second_ops:
                    if op2.symbol in ("<<", ">>") and partial < 0:
                        continue
                    for y in operands:
                        if op2.apply(partial, y) != target:
                            continue
                        left = f"({table[b]} {op1.symbol} {self.decimal(x, table)})"
                        return f"({left} {op2.symbol} {self.decimal(y, table)})"
        return None
