# dailyluck/core/dates.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional, Tuple

_SEPARATORS_RE = re.compile(r"[\s./]")
_DASHES_RE = re.compile(r"-+")
_DIGITS_DASHES_RE = re.compile(r"^[\d-]+$")
_MONTH_DAY_RE = re.compile(r"^(\d{1,2})-(\d{1,2})$")


def parse_date(text: Optional[str], default: date) -> Optional[date]:
    """
    Parse ``YYYY-MM-DD``, ``YY-MM-DD`` or ``MM-DD`` (``.``, ``/`` and spaces
    also accepted as separators). Two-digit years pivot twenty years ahead of
    ``default``; ``MM-DD`` takes the year of ``default``.
    Returns None for anything that is not a real calendar date.
    """
    if not text or not text.strip():
        return None
    normalized = _DASHES_RE.sub("-", _SEPARATORS_RE.sub("-", text.strip()))
    if not _DIGITS_DASHES_RE.match(normalized):
        return None

    try:
        parts = [int(p) for p in normalized.split("-")]
    except ValueError:
        return None
    if not all(n > 0 for n in parts):
        return None

    if len(parts) == 3:
        year, month, day = parts
        if year < 100:
            threshold = (default.year % 100 + 20) % 100
            year = 1900 + year if year > threshold else 2000 + year
    elif len(parts) == 2:
        month, day = parts
        year = default.year
    else:
        return None

    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_month_day(text: str) -> Tuple[int, int]:
    """Parse an ``MM-DD`` string; raises ValueError when it is not a valid day of the year."""
    m = _MONTH_DAY_RE.match((text or "").strip())
    if not m:
        raise ValueError(f"Expected MM-DD, got {text!r}")
    month, day = int(m.group(1)), int(m.group(2))
    # 2024 is a leap year so 02-29 is accepted
    date(2024, month, day)
    return month, day


def month_day_key(day: date) -> str:
    return f"{day.month:02d}-{day.day:02d}"
