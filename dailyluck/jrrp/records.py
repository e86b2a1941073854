# dailyluck/jrrp/records.py
from __future__ import annotations

import logging
import re
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from dailyluck.db import db
from dailyluck.models import LuckRecord

logger = logging.getLogger(__name__)

_IDENTIFICATION_CODE_RE = re.compile(r"^[0-9A-F]{4}(-[0-9A-F]{4}){3}$", re.IGNORECASE)

BIND_BOUND = "bound"
BIND_REBOUND = "rebound"
BIND_ALREADY = "already_bound"


def validate_identification_code(code: Optional[str]) -> bool:
    """``XXXX-XXXX-XXXX-XXXX`` with hex digits, case-insensitive, whitespace trimmed."""
    return bool(code) and bool(_IDENTIFICATION_CODE_RE.match(code.strip()))


def normalize_identification_code(code: str) -> str:
    return code.strip().upper()


class LuckRecordStore:
    """Reads and writes LuckRecord rows through the Flask-SQLAlchemy session."""

    def get(self, user_id: str) -> Optional[LuckRecord]:
        return db.session.get(LuckRecord, user_id)

    def _get_or_create(self, user_id: str) -> LuckRecord:
        rec = self.get(user_id)
        if rec is None:
            rec = LuckRecord(user_id=user_id, perfect_score=False)
            db.session.add(rec)
        return rec

    def _commit(self, action: str, user_id: str) -> None:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to %s for user %s", action, user_id)
            raise

    # -------- identification codes --------
    def identification_code(self, user_id: str) -> Optional[str]:
        rec = self.get(user_id)
        return rec.identification_code if rec else None

    def bind(self, user_id: str, code: str) -> str:
        if not validate_identification_code(code):
            raise ValueError(f"Invalid identification code: {code!r}")
        code = normalize_identification_code(code)

        rec = self._get_or_create(user_id)
        if rec.identification_code == code:
            return BIND_ALREADY
        status = BIND_REBOUND if rec.identification_code else BIND_BOUND
        rec.identification_code = code
        self._commit("bind identification code", user_id)
        logger.info("User %s %s identification code", user_id, status)
        return status

    def unbind(self, user_id: str) -> bool:
        rec = self.get(user_id)
        if rec is None or not rec.identification_code:
            return False
        rec.identification_code = None
        self._commit("remove identification code", user_id)
        return True

    # -------- perfect score --------
    def is_perfect_score_first(self, user_id: str) -> bool:
        rec = self.get(user_id)
        return not (rec and rec.perfect_score)

    def mark_perfect_score(self, user_id: str) -> None:
        rec = self._get_or_create(user_id)
        rec.perfect_score = True
        self._commit("mark perfect score", user_id)
