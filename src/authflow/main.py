from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, send_from_directory

from .config import get_settings_module
from .database.bootstrap import apply_schema, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .storage.blob import LocalBlobStorage
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_CONTENT_LENGTH", 5 * 1024 * 1024))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        container = build_container(settings=settings)
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            container.conn.config.user,
            container.conn.config.host,
            container.conn.config.port,
            container.conn.config.database,
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["authflow"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    if isinstance(container.storage, LocalBlobStorage):
        upload_root = container.storage.root

        @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploads")
        def uploads(filename: str):
            return send_from_directory(upload_root, filename)

    return app
