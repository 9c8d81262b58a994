from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.constants import RECLOCKIN_THRESHOLD_MINUTES, STANDARD_WORK_MINUTES
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("[kintai-system] schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        standard_work_minutes=int(getattr(settings, "STANDARD_WORK_MINUTES", STANDARD_WORK_MINUTES)),
        reclockin_threshold_minutes=int(
            getattr(settings, "RECLOCKIN_THRESHOLD_MINUTES", RECLOCKIN_THRESHOLD_MINUTES)
        ),
    )
    logger.info("[kintai-system] settings=%s db=%s", settings_module, container.conn.description)

    register_attendance(app, container)
    register_payroll(app, container)

    return app
