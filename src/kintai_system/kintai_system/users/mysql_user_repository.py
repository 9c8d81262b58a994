from __future__ import annotations

from typing import Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Employee
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_users(self, tenant_id: str) -> Mapping[str, Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, display_name, name, email
                FROM tenant_users
                WHERE tenant_id=%s
                """,
                (tenant_id,),
            )
            return {
                str(r["user_id"]): Employee(
                    user_id=str(r["user_id"]),
                    display_name=r.get("display_name") or r.get("name") or "",
                    email=r.get("email") or "",
                )
                for r in fetchall(cur)
            }

    def list_employee_codes(self, tenant_id: str) -> Mapping[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lookup_key, employee_code
                FROM employee_codes
                WHERE tenant_id=%s
                """,
                (tenant_id,),
            )
            return {r["lookup_key"]: r["employee_code"] for r in fetchall(cur) if r.get("employee_code")}
