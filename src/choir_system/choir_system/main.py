from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .common.guards import CONTAINER_KEY
from .common.http import register_error_handlers
from .container import Container, build_container
from .contributions.controller import register as register_contributions
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .database.connection import DBConfig
from .events.controller import register as register_events
from .permissions.controller import register as register_permissions
from .songs.controller import register as register_songs
from .users.controller import register as register_users

logger = logging.getLogger("choir_system")

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        password = getattr(settings, "ADMIN_PASSWORD", "")
        if not password:
            logger.warning("AUTO_SEED_DB is on but ADMIN_PASSWORD is empty; admin not seeded")
            return
        ensure_admin_user(
            db_config,
            username=getattr(settings, "ADMIN_USERNAME"),
            password=password,
            email=getattr(settings, "ADMIN_EMAIL"),
            name=getattr(settings, "ADMIN_NAME"),
        )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API app.

    A prebuilt `container` skips database bootstrap entirely (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        _bootstrap_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
        )

    app.extensions[CONTAINER_KEY] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_users(app, container)
    register_permissions(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_songs(app, container)
    register_announcements(app, container)
    register_contributions(app, container)

    return app
