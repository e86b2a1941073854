# dailyluck/jrrp/routes.py
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from dailyluck import limiter
from dailyluck.core.dates import parse_date

from . import bp
from .records import validate_identification_code
from .services import (
    get_display_config,
    get_formatter,
    get_messages,
    get_records,
    luck_for_user,
    next_date_for_user,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Small per-request helpers
# -----------------------------------------------------------------------------
def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _user_id(data: Optional[dict] = None) -> Optional[str]:
    uid = (data or {}).get("user_id") or request.args.get("user_id")
    uid = str(uid).strip()[:64] if uid is not None else ""
    return uid or None

def _day() -> Optional[date]:
    """Date from ?date=, today when absent; None when present but unparseable."""
    today = date.today()
    raw = request.args.get("date")
    if raw is None or not raw.strip():
        return today
    return parse_date(raw, today)

def _bad_request(reason: str):
    return jsonify({"ok": False, "reason": reason}), 400

def _storage_error():
    return jsonify({"ok": False, "reason": "Storage unavailable, try again later"}), 500

# -----------------------------------------------------------------------------
# API: today's luck
# -----------------------------------------------------------------------------
@bp.get("/api/luck")
def api_luck():
    user_id = _user_id()
    if not user_id:
        return _bad_request("Missing user_id")
    day = _day()
    if day is None:
        return _bad_request("Invalid date format, please use YYYY-MM-DD or MM-DD format")

    result = luck_for_user(user_id, day)
    display = get_formatter().format(result.score, day, get_display_config())
    message = get_messages().compose(display, result.score, day)

    first_perfect = False
    if result.bound and result.score == 100:
        records = get_records()
        if records.is_perfect_score_first(user_id):
            try:
                records.mark_perfect_score(user_id)
                first_perfect = True
            except SQLAlchemyError:
                return _storage_error()

    logger.info("Luck for %s on %s: %d (bound=%s)", user_id, day.isoformat(), result.score, result.bound)
    return jsonify({
        "ok": True,
        "user_id": user_id,
        "date": day.isoformat(),
        "score": result.score,
        "display": display,
        "message": message,
        "bound": result.bound,
        "perfect_score_first": first_perfect,
    }), 200

# -----------------------------------------------------------------------------
# API: identification codes
# -----------------------------------------------------------------------------
@bp.post("/api/bind")
@limiter.limit("10 per minute")
def api_bind():
    data = _payload()
    user_id = _user_id(data)
    code = (data.get("code") or "").strip()
    if not user_id:
        return _bad_request("Missing user_id")
    if not validate_identification_code(code):
        return _bad_request("Invalid identification code format! Please use XXXX-XXXX-XXXX-XXXX format")
    try:
        status = get_records().bind(user_id, code)
    except SQLAlchemyError:
        return _storage_error()
    return jsonify({"ok": True, "status": status}), 200

@bp.post("/api/unbind")
@limiter.limit("10 per minute")
def api_unbind():
    user_id = _user_id(_payload())
    if not user_id:
        return _bad_request("Missing user_id")
    try:
        removed = get_records().unbind(user_id)
    except SQLAlchemyError:
        return _storage_error()
    return jsonify({"ok": True, "removed": removed}), 200

# -----------------------------------------------------------------------------
# API: when will a score show up next
# -----------------------------------------------------------------------------
@bp.get("/api/find")
def api_find():
    user_id = _user_id()
    if not user_id:
        return _bad_request("Missing user_id")
    try:
        score = int(request.args.get("score", ""))
    except ValueError:
        score = -1
    if not 0 <= score <= 100:
        return _bad_request("Please enter an integer between 0-100")
    start = _day()
    if start is None:
        return _bad_request("Invalid date format, please use YYYY-MM-DD or MM-DD format")

    found = next_date_for_user(user_id, score, start)
    if not found:
        return jsonify({"ok": False, "score": score,
                        "reason": f"You won't get {score} points in the next year"}), 200
    day, days_ahead = found
    return jsonify({"ok": True, "score": score, "date": day.isoformat(), "days_ahead": days_ahead}), 200

@bp.get("/api/debug/cache")
def api_debug_cache():
    cfg = get_display_config()
    return jsonify({
        "mode": cfg.mode.value,
        "base_number": cfg.base_number,
        "restricted_date": cfg.restricted_date,
        "caches": get_formatter().report(),
    })
