# dailyluck/jrrp/services.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from flask import current_app

from dailyluck.core.calculator import find_next_date, luck
from dailyluck.core.store_registry import get_store

from .logic.formatter import DisplayConfig, ScoreFormatter
from .messages import MessageBook
from .records import LuckRecordStore

FORMATTER_KEY = "jrrp_formatter"
DISPLAY_KEY = "jrrp_display"
MESSAGES_KEY = "jrrp_messages"
RECORDS_KEY = "jrrp_records"


def get_formatter() -> ScoreFormatter:
    ttl = current_app.config.get("JRRP_EXPRESSION_TTL", 24 * 60 * 60)
    return get_store(FORMATTER_KEY, lambda: ScoreFormatter(ttl=ttl))


def get_display_config() -> DisplayConfig:
    return get_store(DISPLAY_KEY, lambda: DisplayConfig.from_mapping(current_app.config))


def get_messages() -> MessageBook:
    return get_store(MESSAGES_KEY, lambda: MessageBook.from_mapping(current_app.config))


def get_records() -> LuckRecordStore:
    return get_store(RECORDS_KEY, LuckRecordStore)


@dataclass(frozen=True)
class UserLuck:
    user_id: str
    day: date
    score: int
    bound: bool


def _seed_for(user_id: str):
    """(secret, code) for a user; the user id stands in for an unbound code."""
    code = get_records().identification_code(user_id)
    secret = current_app.config.get("JRRP_IDENTIFICATION_KEY") or ""
    return secret, (code or user_id), bool(code)


def luck_for_user(user_id: str, day: date) -> UserLuck:
    secret, code, bound = _seed_for(user_id)
    return UserLuck(user_id=user_id, day=day, score=luck(secret, code, day), bound=bound)


def next_date_for_user(user_id: str, score: int, start: date) -> Optional[tuple]:
    secret, code, _ = _seed_for(user_id)
    return find_next_date(secret, code, score, start)
