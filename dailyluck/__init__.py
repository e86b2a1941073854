# dailyluck/__init__.py
from __future__ import annotations
import logging
from datetime import date

import click
from flask import Flask
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .db import db

# --- extensions ---
migrate = Migrate()
# in-memory limiter; point RATELIMIT_STORAGE_URI at redis in prod
limiter = Limiter(get_remote_address, storage_uri="memory://")


def create_app(config_object="dailyluck.config.Config") -> Flask:
    app = Flask(__name__, instance_relative_config=True)

    # ---------------------------
    # Config
    # ---------------------------
    app.config.from_object(config_object)
    app.config.from_pyfile("config.py", silent=True)  # instance/config.py (optional)

    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("JRRP_WARMUP", False)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError(
            "Missing SQLALCHEMY_DATABASE_URI (or DATABASE_URL). "
            "Set it via env or instance/config.py."
        )

    # ---------------------------
    # Logging
    # ---------------------------
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    app.logger.setLevel(level)
    logging.getLogger("dailyluck").setLevel(level)

    # ---------------------------
    # Extensions init
    # ---------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # ---------------------------
    # Blueprints
    # ---------------------------
    from .jrrp import bp as jrrp_bp
    from .jrrp import routes  # noqa: F401  (registers the views on jrrp_bp)
    app.register_blueprint(jrrp_bp)

    # ---------------------------
    # Startup: tables, config validation, optional warmup
    # ---------------------------
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

        from .jrrp.services import get_display_config, get_formatter, get_messages
        display = get_display_config()   # raises on bad mode / base / date
        get_messages()                   # raises on bad range messages

        if app.config.get("JRRP_WARMUP"):
            generated = get_formatter().warmup(display.base_number)
            app.logger.info("Expression cache warmed up for base %d (%d scores).",
                            display.base_number, generated)

    # ---------------------------
    # CLI commands
    # ---------------------------
    @app.cli.command("jrrp-luck")
    @click.option("--secret", default=None, help="Host secret (defaults to JRRP_IDENTIFICATION_KEY).")
    @click.option("--code", required=True, help="Identification code or user id.")
    @click.option("--date", "day", default=None, help="YYYY-MM-DD, YY-MM-DD or MM-DD (default today).")
    @click.option("--mode", type=click.Choice(["plain", "binary", "expression"]), default=None)
    @click.option("--base", type=click.IntRange(1, 9), default=None)
    def jrrp_luck(secret, code, day, mode, base):
        """Print the luck score for a code and how it would be displayed."""
        from .core.calculator import luck
        from .core.dates import parse_date
        from .jrrp.logic.formatter import DisplayConfig
        from .jrrp.services import get_display_config, get_formatter

        when = parse_date(day, date.today()) if day else date.today()
        if when is None:
            raise click.BadParameter(f"unrecognised date {day!r}", param_hint="--date")
        if secret is None:
            secret = app.config.get("JRRP_IDENTIFICATION_KEY") or ""
        current = get_display_config()
        cfg = DisplayConfig(
            mode=mode or current.mode,
            restricted_date=None if mode else current.restricted_date,
            base_number=base or current.base_number,
        )
        score = luck(secret, code, when)
        click.echo(f"{when.isoformat()} score={score}")
        click.echo(get_formatter().format(score, when, cfg))

    @app.cli.command("jrrp-warmup")
    @click.option("--base", type=click.IntRange(1, 9), default=None)
    def jrrp_warmup(base):
        """Pre-generate obfuscated expressions for every score."""
        from .jrrp.services import get_display_config, get_formatter
        base = base or get_display_config().base_number
        generated = get_formatter().warmup(base)
        click.echo(f"✅ Warmed expression cache for base {base}: {generated} scores generated")

    @app.cli.command("jrrp-cache-stats")
    def jrrp_cache_stats():
        """Print expression cache stats."""
        from .jrrp.services import get_formatter
        formatter = get_formatter()
        purged = formatter.purge_expired()
        click.echo(f"Expression caches: {formatter.report()} (purged {purged} stale)")

    return app
