# dailyluck/jrrp/messages.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dailyluck.core.dates import month_day_key, parse_month_day

MAX_ENTRIES = 10

RESULT_TEMPLATE = "Your luck score today is: {display}{suffix}"

DEFAULT_RANGE_MESSAGES: Dict[str, str] = {
    "0-10": "...(It's percentage based)",
    "11-19": "?! No way...",
    "20-39": "! Ugh...",
    "40-49": "! Barely acceptable...?",
    "50-64": "! Not bad, not bad.",
    "65-89": "! Lucky day today!",
    "90-97": "! Excellent!",
    "98-100": "! Almost 100...",
}

DEFAULT_SPECIAL_MESSAGES: Dict[int, str] = {
    0: "! Terrible!",
    50: "! Fifty-fifty...",
    100: "! 100! 100!!!!",
}

DEFAULT_HOLIDAY_MESSAGES: Dict[str, str] = {
    "01-01": "Happy New Year!",
    "12-25": "Merry Christmas!",
}


def _parse_range(key: str) -> Tuple[int, int]:
    try:
        lo, hi = (int(p) for p in str(key).split("-"))
    except ValueError:
        raise ValueError(f"Invalid range format: {key}") from None
    if lo > hi or lo < 0 or hi > 100:
        raise ValueError(f"Invalid range format: {key}")
    return lo, hi


def validate_range_messages(ranges: Mapping[str, str]) -> List[Tuple[int, int, str]]:
    """
    Ranges must cover 0..100 with no gap or overlap.
    Returns ``(lo, hi, text)`` sorted by ``lo``.
    """
    if not ranges:
        raise ValueError("Ranges must completely cover 0 to 100")
    if len(ranges) > MAX_ENTRIES:
        raise ValueError(f"At most {MAX_ENTRIES} range messages are allowed")

    intervals = sorted((_parse_range(k) + (text,) for k, text in ranges.items()),
                       key=lambda r: r[0])
    if intervals[0][0] != 0 or intervals[-1][1] != 100:
        raise ValueError("Ranges must completely cover 0 to 100")
    for prev, cur in zip(intervals, intervals[1:]):
        if cur[0] != prev[1] + 1:
            raise ValueError(f"Overlap or gap between ranges {prev[1]} and {cur[0]}")
    return intervals


class MessageBook:
    """Suffixes per score range / exact score, plus greetings per calendar day."""

    def __init__(
        self,
        ranges: Optional[Mapping[str, str]] = None,
        specials: Optional[Mapping[Any, str]] = None,
        holidays: Optional[Mapping[str, str]] = None,
    ):
        self.ranges = validate_range_messages(DEFAULT_RANGE_MESSAGES if ranges is None else ranges)

        specials = DEFAULT_SPECIAL_MESSAGES if specials is None else specials
        holidays = DEFAULT_HOLIDAY_MESSAGES if holidays is None else holidays
        if len(specials) > MAX_ENTRIES or len(holidays) > MAX_ENTRIES:
            raise ValueError(f"At most {MAX_ENTRIES} special and holiday messages are allowed")

        self.specials: Dict[int, str] = {}
        for score, text in specials.items():
            score = int(score)
            if not 0 <= score <= 100:
                raise ValueError(f"Special message score out of range: {score}")
            self.specials[score] = text

        self.holidays: Dict[str, str] = {}
        for key, text in holidays.items():
            month, day = parse_month_day(key)
            self.holidays[f"{month:02d}-{day:02d}"] = text

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "MessageBook":
        return cls(
            ranges=cfg.get("JRRP_RANGE_MESSAGES"),
            specials=cfg.get("JRRP_SPECIAL_MESSAGES"),
            holidays=cfg.get("JRRP_HOLIDAY_MESSAGES"),
        )

    def suffix_for(self, score: int) -> str:
        if score in self.specials:
            return self.specials[score]
        for lo, hi, text in self.ranges:
            if lo <= score <= hi:
                return text
        return ""

    def holiday_for(self, day: date) -> Optional[str]:
        return self.holidays.get(month_day_key(day))

    def compose(self, display: str, score: int, day: date) -> str:
        line = RESULT_TEMPLATE.format(display=display, suffix=self.suffix_for(score))
        greeting = self.holiday_for(day)
        return f"{greeting}\n{line}" if greeting else line
