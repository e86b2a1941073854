# dailyluck/models.py
from datetime import datetime, timezone
from .db import db


def _utcnow():
    return datetime.now(timezone.utc)


class LuckRecord(db.Model):
    """Per-user flags the luck service keeps between days."""
    __tablename__ = "daily_user_data"

    user_id             = db.Column(db.Text, primary_key=True)
    identification_code = db.Column(db.Text)                  # XXXX-XXXX-XXXX-XXXX, upper-case
    perfect_score       = db.Column(db.Boolean, nullable=False, default=False)
    created_at          = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at          = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<LuckRecord {self.user_id} code={self.identification_code!r} perfect={self.perfect_score}>"
