# dailyluck/config.py
import os


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///daily_luck.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    RATELIMIT_DEFAULT = "200 per hour; 50 per minute"
    RATELIMIT_ENABLED = True

    # Luck calculation
    JRRP_IDENTIFICATION_KEY = os.environ.get("JRRP_IDENTIFICATION_KEY", "")

    # Score display: plain | binary | expression
    JRRP_DISPLAY_MODE = os.environ.get("JRRP_DISPLAY_MODE", "plain")
    JRRP_RESTRICTED_DATE = os.environ.get("JRRP_RESTRICTED_DATE") or None   # "MM-DD", e.g. "04-01"
    JRRP_BASE_NUMBER = int(os.environ.get("JRRP_BASE_NUMBER", "6"))
    JRRP_EXPRESSION_TTL = int(os.environ.get("JRRP_EXPRESSION_TTL", str(24 * 60 * 60)))
    JRRP_WARMUP = _env_bool("JRRP_WARMUP", False)

    # None -> built-in defaults (see dailyluck.jrrp.messages)
    JRRP_RANGE_MESSAGES = None
    JRRP_SPECIAL_MESSAGES = None
    JRRP_HOLIDAY_MESSAGES = None


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RATELIMIT_ENABLED = False
    JRRP_IDENTIFICATION_KEY = "test-key"
    JRRP_DISPLAY_MODE = "plain"
    JRRP_RESTRICTED_DATE = None
    JRRP_BASE_NUMBER = 6
    JRRP_WARMUP = False
