from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import StoreShiftRepository


class MySQLStoreShiftRepository(StoreShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_custom_shifts(self, store_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shifts
                FROM stores
                WHERE store_id=%s
                """,
                (int(store_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return r.get("shifts") or None
