"""Apply database/schema.sql to the database of the current APP_ENV.

Usage: APP_ENV=testing python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module
from src.kintai_system.kintai_system.database.bootstrap import apply_schema, list_tables
from src.kintai_system.kintai_system.database.connection import DBConfig


def main() -> int:
    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = importlib.import_module(get_settings_module())
    target = DBConfig.from_mapping(settings.DB_CONFIG)

    count = apply_schema(settings.DB_CONFIG, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(settings.DB_CONFIG)
    print(f"OK: {count} statement(s) -> {target.description}")
    print("tables: " + ", ".join(tables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
