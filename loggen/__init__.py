import os
from importlib.metadata import PackageNotFoundError, version as _dist_version

from flask import Flask
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .errors import register_error_handlers
from .extensions import cache
from .models import db
from .storage import BlobStore

DEFAULT_REACTIONS = "👍,❤️,😊,🎉,👀,🙏"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _package_version() -> str:
    try:
        return _dist_version("loggen")
    except PackageNotFoundError:
        return "0.0.0"


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(overrides: dict | None = None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get(
        "LOGGEN_SECRET_KEY", "dev-secret-key-change-me"
    )
    # Database & Cache config
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get(
        "DATABASE_URL", "sqlite:///loggen.db"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config.setdefault("CACHE_TYPE", "SimpleCache")
    app.config.setdefault("CACHE_DEFAULT_TIMEOUT", 60)
    # Auth
    app.config["SHARED_PASSWORD"] = os.environ.get("LOGGEN_PASSWORD", "")
    app.config["TOKEN_TTL_HOURS"] = _env_int("LOGGEN_TOKEN_TTL_HOURS", 720)
    app.config["ADMIN_TOKEN_TTL_HOURS"] = _env_int("LOGGEN_ADMIN_TOKEN_TTL_HOURS", 24)
    # Retention window for unpinned posts (days)
    app.config["ARCHIVE_AFTER_DAYS"] = _env_int("LOGGEN_ARCHIVE_AFTER_DAYS", 30)
    # Uploads
    app.config["UPLOAD_DIR"] = os.environ.get("LOGGEN_UPLOAD_DIR", "uploads")
    app.config["MAX_CONTENT_LENGTH"] = _env_int("LOGGEN_MAX_UPLOAD_MB", 10) * 1024 * 1024
    app.config["APP_VERSION"] = os.environ.get("LOGGEN_VERSION") or _package_version()
    app.config["CHANGELOG_PATH"] = os.environ.get("LOGGEN_CHANGELOG", "CHANGELOG.md")
    # Create missing tables on startup; migrations turn this off
    app.config["AUTO_CREATE_TABLES"] = os.environ.get(
        "LOGGEN_AUTO_CREATE", "1"
    ) in ("1", "true", "yes", "on")
    reactions = os.environ.get("LOGGEN_REACTIONS", DEFAULT_REACTIONS)
    app.config["REACTION_EMOJIS"] = [e.strip() for e in reactions.split(",") if e.strip()]

    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    cache.init_app(app)
    app.extensions["loggen_blobs"] = BlobStore(
        os.path.abspath(app.config["UPLOAD_DIR"])
    )

    # Blueprints: posts, meetings and admin kept separate
    from .admin import admin_bp
    from .api import api_bp, serve_upload
    from .meetings_api import meetings_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(meetings_bp, url_prefix="/api/meetings")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.add_url_rule("/uploads/<path:filename>", "uploads", serve_upload)
    register_error_handlers(app)

    if app.config["AUTO_CREATE_TABLES"]:
        with app.app_context():
            db.create_all()

    if not app.config["SHARED_PASSWORD"]:
        app.logger.warning("LOGGEN_PASSWORD is not set; staff login is disabled")

    return app
