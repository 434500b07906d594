from __future__ import annotations

import uuid
from datetime import date
from typing import Sequence

from ..common.datetime_utils import normalize_date
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        employee_id=str(r["user_id"]),
        store_id=int(r["store_id"]) if r.get("store_id") is not None else None,
        work_date=normalize_date(r["work_date"]),
        shift=r.get("shift") or None,
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        lateness_minutes=int(r.get("lateness_minutes") or 0),
        early_arrival_minutes=int(r.get("early_arrival_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        attendance_status=AttendanceStatus(r.get("attendance_status") or AttendanceStatus.BELUM_DIATUR.value),
        notes=r.get("notes") or "",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, *, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, store_id, work_date, shift, check_in, check_out,
                       lateness_minutes, early_arrival_minutes, overtime_minutes,
                       attendance_status, notes
                FROM attendance
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (employee_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert(self, record: AttendanceRecord) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT attendance_id FROM attendance WHERE user_id=%s AND work_date=%s FOR UPDATE",
                (record.employee_id, record.work_date),
            )
            existing = fetchone(cur)
            params = (
                record.store_id,
                record.shift,
                record.check_in,
                record.check_out,
                int(record.lateness_minutes),
                int(record.early_arrival_minutes),
                int(record.overtime_minutes),
                record.attendance_status.value,
                record.notes or None,
            )
            if existing:
                attendance_id = str(existing["attendance_id"])
                cur.execute(
                    """
                    UPDATE attendance
                    SET store_id=COALESCE(%s, store_id), shift=%s, check_in=%s, check_out=%s,
                        lateness_minutes=%s, early_arrival_minutes=%s, overtime_minutes=%s,
                        attendance_status=%s, notes=%s
                    WHERE attendance_id=%s
                    """,
                    params + (attendance_id,),
                )
                return attendance_id

            attendance_id = record.attendance_id or str(uuid.uuid4())
            cur.execute(
                """
                INSERT INTO attendance(attendance_id, user_id, work_date, store_id, shift, check_in, check_out,
                                       lateness_minutes, early_arrival_minutes, overtime_minutes,
                                       attendance_status, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (attendance_id, record.employee_id, record.work_date) + params,
            )
            return attendance_id
