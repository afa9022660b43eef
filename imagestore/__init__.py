import os
from flask import Flask, redirect, url_for
from dotenv import load_dotenv

load_dotenv()


def create_app(config_name=None, overrides=None):
    flask_app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    from imagestore.config import config_map

    config_cls = config_map.get(config_name, config_map["development"])
    flask_app.config.from_object(config_cls)
    if overrides:
        flask_app.config.update(overrides)

    if hasattr(config_cls, "init_app"):
        config_cls.init_app(flask_app)

    # Initialize extensions
    from imagestore.extensions import db, migrate, init_blob_root

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    init_blob_root(flask_app)

    # Import models so Alembic sees them
    from imagestore.models import User, Image  # noqa: F401

    # Register blueprints
    from imagestore.blueprints.auth import auth_bp
    from imagestore.blueprints.images import images_bp

    flask_app.register_blueprint(auth_bp)
    flask_app.register_blueprint(images_bp, url_prefix="/images")

    from imagestore.errors import register_error_handlers

    register_error_handlers(flask_app)

    # Register CLI commands
    from imagestore.cli import register_cli

    register_cli(flask_app)

    @flask_app.route("/")
    def home():
        return redirect(url_for("images.index"))

    # Health check
    @flask_app.route("/health")
    def health():
        checks = {"status": "ok"}
        try:
            db.session.execute(db.text("SELECT 1"))
            checks["db"] = "ok"
        except Exception:
            flask_app.logger.exception("Health check DB probe failed")
            checks["db"] = "error"
            checks["status"] = "degraded"
        blob_dir = os.path.join(flask_app.config["BLOB_ROOT"], "images")
        if os.path.isdir(blob_dir) and os.access(blob_dir, os.W_OK):
            checks["blob_store"] = "ok"
        else:
            flask_app.logger.error("Blob directory %s is not writable", blob_dir)
            checks["blob_store"] = "error"
            checks["status"] = "degraded"
        status_code = 200 if checks["status"] == "ok" else 503
        return checks, status_code

    return flask_app
