from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_STORE_MAX_RETRIES, DEFAULT_TIMEZONE, LATE_WINDOW_MINUTES, ON_TIME_WINDOW_MINUTES
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a ready ``container`` (e.g. in tests) to skip database setup.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            tz_name=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            on_time_minutes=int(getattr(settings, "ON_TIME_WINDOW_MINUTES", ON_TIME_WINDOW_MINUTES)),
            late_minutes=int(getattr(settings, "LATE_WINDOW_MINUTES", LATE_WINDOW_MINUTES)),
            store_max_retries=int(getattr(settings, "STORE_MAX_RETRIES", DEFAULT_STORE_MAX_RETRIES)),
        )

    register_attendance(app, container)

    return app
