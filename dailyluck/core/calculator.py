# dailyluck/core/calculator.py
from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Tuple

from .hashing import hash_string

# Salts and divisors are a versioned format: changing any of them changes
# every score ever reported.
DATE_SALTS = ("asdfgbn", "12#3$45", "IUY")
USER_SALTS = ("0*8&6", "kjhg")
SPREAD_DIVISOR = 527.0
RAW_SPACE = 1001
JACKPOT_FLOOR = 970
MAX_SCORE = 100

MAX_DAYS_TO_CHECK = 365


def _round_half_up(value: float) -> int:
    # value + 0.5 is inexact from 2**52 up; value - floor(value) never is
    whole = math.floor(value)
    return whole + 1 if value - whole >= 0.5 else whole


def day_of_year(day: date) -> int:
    """1-based ordinal of ``day`` within its calendar year."""
    return day.timetuple().tm_yday


def date_hash(day: date) -> int:
    a, b, c = DATE_SALTS
    return hash_string(f"{a}{day_of_year(day)}{b}{day.year}{c}")


def user_hash(secret: str, code: str, day: date) -> int:
    d, e = USER_SALTS
    return hash_string(f"{secret}{code}{d}{day.day}{e}")


def raw_luck(secret: str, code: str, day: date) -> int:
    """Hash-derived value in [0, 1000] before it is mapped onto a score."""
    # divide each half before summing; summing first changes the distribution
    merged = date_hash(day) // 3 + user_hash(secret, code, day) // 3
    normalized = abs(float(merged) / SPREAD_DIVISOR)
    return _round_half_up(normalized) % RAW_SPACE


def luck(secret: str, code: str, day: date) -> int:
    """
    Deterministic luck score in [0, 100] for ``(secret, code, day)``.

    Raw values from 970 upwards form the jackpot band and always map to 100;
    the rest of the raw space [0, 969] is scaled onto [0, 99].
    """
    raw = raw_luck(secret, code, day)
    if raw >= JACKPOT_FLOOR:
        return MAX_SCORE
    return _round_half_up((raw / float(JACKPOT_FLOOR - 1)) * 99.0)


def find_next_date(
    secret: str,
    code: str,
    score: int,
    start: date,
    max_days: int = MAX_DAYS_TO_CHECK,
) -> Optional[Tuple[date, int]]:
    """
    First date after ``start`` (within ``max_days``) whose luck equals ``score``.
    Returns ``(date, days_ahead)`` or None.
    """
    for offset in range(1, max_days + 1):
        day = start + timedelta(days=offset)
        if luck(secret, code, day) == score:
            return day, offset
    return None
