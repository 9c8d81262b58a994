from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, time, timedelta
from typing import Any, Dict, Iterator, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """One connection per unit of work: commit on success, rollback on any error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def time_to_str(value: Any) -> Optional[str]:
    """TIME column -> ``HH:MM:SS``.

    The pure-Python connector hands back ``timedelta`` for TIME, the C
    extension may give ``time``; strings come from JSON imports.
    """
    if value is None:
        return None
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        value = time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, str):
        h, m, *rest = (value.strip().split(":") + ["0"])[:3]
        return f"{int(h):02d}:{int(m):02d}:{int(rest[0] or 0):02d}"
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def date_to_str(value: Any) -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def load_json(value: Any, default: Any) -> Any:
    """JSON columns come back as str (pure connector) or bytes (C extension)."""
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value
