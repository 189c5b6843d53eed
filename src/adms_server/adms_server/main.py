from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

import mysql.connector
from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_COMMAND_INFLIGHT_TIMEOUT
from .database.bootstrap import init_schema
from .devices.controller import register as register_devices
from .iclock.controller import register as register_iclock

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            init_schema(db_config)

        container = build_container(
            db_config=db_config,
            inflight_timeout_seconds=int(getattr(settings, "COMMAND_INFLIGHT_TIMEOUT", DEFAULT_COMMAND_INFLIGHT_TIMEOUT)),
        )
        if container.conn is not None:
            try:
                container.conn.open()
            except mysql.connector.Error:
                # The pool is opened lazily on the first request instead.
                logger.warning("Store not reachable at startup", exc_info=True)
        atexit.register(container.close)

    app.extensions["adms_container"] = container

    register_iclock(app, container)
    register_devices(app, container)
    register_attendance(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
