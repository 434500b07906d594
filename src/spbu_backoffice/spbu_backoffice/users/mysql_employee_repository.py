from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_int_amount
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _store_ids(self, cur, user_id: str) -> tuple[int, ...]:
        cur.execute(
            """
            SELECT store_id
            FROM user_stores
            WHERE user_id=%s
            ORDER BY created_at, store_id
            """,
            (user_id,),
        )
        return tuple(int(r["store_id"]) for r in fetchall(cur))

    def _to_employee(self, cur, r: dict) -> Employee:
        return Employee(
            employee_id=str(r["user_id"]),
            name=r["name"],
            role=Role(r["role"]),
            store_ids=self._store_ids(cur, str(r["user_id"])),
            base_salary=to_int_amount(r["salary"]) if r.get("salary") is not None else None,
        )

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, salary
                FROM users
                WHERE user_id=%s
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_employee(cur, r)

    def list_by_store(self, store_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.name, u.role, u.salary
                FROM users u
                JOIN user_stores us ON us.user_id = u.user_id
                WHERE us.store_id=%s
                ORDER BY u.name
                """,
                (int(store_id),),
            )
            rows = fetchall(cur)
            return [self._to_employee(cur, r) for r in rows]
