from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import PayrollStatus
from ..core.exceptions import WriteConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_int_amount
from .model import PayrollConfig, PayrollRecord, line_items_from_json, line_items_to_json
from .repository import PayrollConfigRepository, PayrollRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    payroll_id, user_id, store_id, month, base_salary, overtime_pay,
    bonuses, deductions, total_amount, status, paid_at, version
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=str(r["payroll_id"]),
        employee_id=str(r["user_id"]),
        store_id=int(r["store_id"]),
        month=str(r["month"]),
        base_salary=to_int_amount(r["base_salary"]),
        overtime_pay=to_int_amount(r.get("overtime_pay")),
        bonuses=line_items_from_json(r.get("bonuses")),
        deductions=line_items_from_json(r.get("deductions")),
        total_amount=to_int_amount(r["total_amount"]),
        status=PayrollStatus(r.get("status") or PayrollStatus.PENDING.value),
        paid_at=r.get("paid_at"),
        version=int(r.get("version") or 0),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll WHERE payroll_id=%s", (payroll_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_employee_store_month(self, *, employee_id: str, store_id: int, month: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll
                WHERE user_id=%s AND store_id=%s AND month=%s
                LIMIT 1
                """,
                (employee_id, int(store_id), month),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_by_stores_and_month(self, *, store_ids: Sequence[int], month: str) -> Sequence[PayrollRecord]:
        if not store_ids:
            return []
        placeholders = ",".join(["%s"] * len(store_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll
                WHERE store_id IN ({placeholders}) AND month=%s
                ORDER BY created_at DESC
                """,
                tuple(int(s) for s in store_ids) + (month,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: PayrollRecord) -> PayrollRecord:
        created = replace(record, payroll_id=record.payroll_id or str(uuid.uuid4()), version=1)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll(payroll_id, user_id, store_id, month, base_salary, overtime_pay,
                                        bonuses, deductions, total_amount, status, paid_at, version)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        created.payroll_id,
                        created.employee_id,
                        created.store_id,
                        created.month,
                        created.base_salary,
                        created.overtime_pay,
                        line_items_to_json(created.bonuses),
                        line_items_to_json(created.deductions),
                        created.total_amount,
                        created.status.value,
                        created.paid_at,
                        created.version,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            logger.warning(
                "Duplicate payroll for employee=%s store=%s month=%s", record.employee_id, record.store_id, record.month
            )
            raise WriteConflictError(
                "Data gaji untuk karyawan, toko dan bulan ini sudah ada",
                employee_id=record.employee_id,
                store_id=record.store_id,
                month=record.month,
            ) from e
        return created

    def update(self, record: PayrollRecord, *, expected_version: int) -> PayrollRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll
                SET base_salary=%s, overtime_pay=%s, bonuses=%s, deductions=%s,
                    total_amount=%s, status=%s, paid_at=%s, version=version + 1
                WHERE payroll_id=%s AND version=%s
                """,
                (
                    record.base_salary,
                    record.overtime_pay,
                    line_items_to_json(record.bonuses),
                    line_items_to_json(record.deductions),
                    record.total_amount,
                    record.status.value,
                    record.paid_at,
                    record.payroll_id,
                    int(expected_version),
                ),
            )
            if cur.rowcount == 0:
                logger.warning("Stale payroll write payroll_id=%s version=%s", record.payroll_id, expected_version)
                raise WriteConflictError(
                    "Data gaji telah diubah oleh pengguna lain, muat ulang lalu coba lagi",
                    payroll_id=record.payroll_id,
                    employee_id=record.employee_id,
                    store_id=record.store_id,
                    month=record.month,
                )
        return replace(record, version=int(expected_version) + 1)


class MySQLPayrollConfigRepository(PayrollConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[PayrollConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT overtime_rate
                FROM payroll_config
                WHERE is_active=1
                ORDER BY updated_at DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return PayrollConfig(overtime_rate_per_hour=to_int_amount(r["overtime_rate"]))
