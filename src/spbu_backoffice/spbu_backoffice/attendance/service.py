from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import month_bounds, parse_iso_date, parse_month
from ..core.enums import EDITOR_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..shifts.model import ShiftSchedule
from ..shifts.resolver import ShiftScheduleResolver
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .grid import build_attendance_grid, edit_record, placeholder, recalculate, summarize_month
from .model import AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceGrid:
    employee: Employee
    store_id: Optional[int]
    start: date
    end: date
    schedule: ShiftSchedule
    records: list[AttendanceRecord]
    summary: AttendanceSummary

    @property
    def has_persisted_rows(self) -> bool:
        return any(not r.is_placeholder for r in self.records)

    def to_dict(self) -> dict:
        return {
            "employee": {"id": self.employee.employee_id, "name": self.employee.name, "store_ids": list(self.employee.store_ids)},
            "store_id": self.store_id,
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "shifts": self.schedule.to_list(),
            "attendance_data": [r.to_dict() for r in self.records],
            "summary": self.summary.to_dict(),
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        resolver: ShiftScheduleResolver,
    ):
        self._attendance = attendance
        self._employees = employees
        self._resolver = resolver

    def _get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        return employee

    def _store_for(self, employee: Employee, store_id: Optional[int]) -> Optional[int]:
        if store_id is None:
            return employee.assigned_store_id
        if employee.store_ids and not employee.works_at(store_id):
            raise ValidationError("Karyawan tidak terdaftar di toko ini")
        return int(store_id)

    def get_range_grid(self, employee_id: str, start: date, end: date, *, store_id: Optional[int] = None) -> AttendanceGrid:
        employee = self._get_employee(employee_id)
        store_id = self._store_for(employee, store_id)
        schedule = self._resolver.resolve(store_id)

        persisted = self._attendance.list_range(employee_id=employee.employee_id, start=start, end=end)
        records = build_attendance_grid(
            employee.employee_id, start, end, persisted, schedule=schedule, store_id=store_id
        )
        records = [recalculate(r, schedule) if r.check_in is not None and r.shift else r for r in records]

        return AttendanceGrid(
            employee=employee,
            store_id=store_id,
            start=start,
            end=end,
            schedule=schedule,
            records=records,
            summary=summarize_month(records),
        )

    def get_monthly_grid(self, employee_id: str, month: str, *, store_id: Optional[int] = None) -> AttendanceGrid:
        year, month_no = parse_month(month)
        start, end = month_bounds(year, month_no)
        return self.get_range_grid(employee_id, start, end, store_id=store_id)

    def preview_row(self, employee_id: str, payload: Mapping, *, store_id: Optional[int] = None) -> AttendanceRecord:
        """Recompute one edited row without saving it."""

        schedule = self._resolver.resolve(store_id)
        return self._row_from_payload(employee_id, payload, schedule, store_id=store_id)

    def save_grid(
        self,
        *,
        current_role: Role,
        employee_id: str,
        rows: Iterable[Mapping],
        store_id: Optional[int] = None,
    ) -> int:
        """Persist edited rows; placeholders nobody touched are skipped.

        Minute fields are always re-derived here, client values are ignored.
        Returns the number of rows written.
        """

        if current_role not in EDITOR_ROLES:
            raise AuthorizationError("Anda tidak memiliki akses untuk mengubah absensi")

        employee = self._get_employee(employee_id)
        store_id = self._store_for(employee, store_id)
        schedule = self._resolver.resolve(store_id)

        records = [self._row_from_payload(employee.employee_id, row, schedule, store_id=store_id) for row in rows]
        seen: set[date] = set()
        for record in records:
            if record.work_date in seen:
                raise ValidationError(f"Tanggal ganda dalam data absensi: {record.work_date}")
            seen.add(record.work_date)

        saved = 0
        for record in records:
            if not record.is_persistable:
                continue
            self._attendance.upsert(record)
            saved += 1

        logger.info("Saved %d attendance rows for employee %s", saved, employee.employee_id)
        return saved

    def _row_from_payload(
        self,
        employee_id: str,
        payload: Mapping,
        schedule: ShiftSchedule,
        *,
        store_id: Optional[int],
    ) -> AttendanceRecord:
        if not isinstance(payload, Mapping):
            raise ValidationError("Setiap baris absensi harus berupa objek")

        raw_date = payload.get("date")
        if not raw_date:
            raise ValidationError("Tanggal wajib diisi")

        base = placeholder(employee_id, parse_iso_date(str(raw_date)), shift=None, store_id=store_id)
        if payload.get("id"):
            base = replace(base, attendance_id=str(payload["id"]))

        changes = {
            "shift": payload.get("shift") or None,
            "check_in": payload.get("check_in"),
            "check_out": payload.get("check_out"),
            "notes": payload.get("notes"),
        }
        record = edit_record(base, schedule, **changes)
        if payload.get("attendance_status"):
            record = edit_record(record, schedule, attendance_status=payload["attendance_status"])
        return record
