from __future__ import annotations

import json
from dataclasses import replace
from datetime import date

import pytest

from src.spbu_backoffice.spbu_backoffice.attendance.service import AttendanceService
from src.spbu_backoffice.spbu_backoffice.core.enums import AttendanceStatus, Role
from src.spbu_backoffice.spbu_backoffice.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.spbu_backoffice.spbu_backoffice.shifts.resolver import ShiftScheduleResolver
from src.spbu_backoffice.spbu_backoffice.users.model import Employee


class FakeAttendanceRepo:
    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def list_range(self, *, employee_id, start, end):
        return [
            r for (emp, day), r in sorted(self.rows.items())
            if emp == employee_id and start <= day <= end
        ]

    def upsert(self, record):
        key = (record.employee_id, record.work_date)
        existing = self.rows.get(key)
        attendance_id = existing.attendance_id if existing else f"att-{self._next_id}"
        if not existing:
            self._next_id += 1
        self.rows[key] = replace(record, attendance_id=attendance_id)
        return attendance_id


class FakeEmployeeRepo:
    def __init__(self, employees):
        self._employees = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._employees.get(employee_id)

    def list_by_store(self, store_id):
        return [e for e in self._employees.values() if e.works_at(store_id)]


class FakeStoreShiftRepo:
    def __init__(self, shifts_by_store):
        self._shifts = shifts_by_store

    def get_custom_shifts(self, store_id):
        return self._shifts.get(int(store_id))


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def service(attendance_repo):
    employees = FakeEmployeeRepo(
        [Employee("e1", "Budi", Role.STAFF, store_ids=(1,), base_salary=4_500_000)]
    )
    stores = FakeStoreShiftRepo(
        {2: json.dumps([{"name": "buka", "start": "05:00", "end": "13:00"}])}
    )
    return AttendanceService(attendance_repo, employees, ShiftScheduleResolver(stores))


def test_monthly_grid_fills_every_day(service):
    grid = service.get_monthly_grid("e1", "2024-02")

    assert len(grid.records) == 29
    assert grid.store_id == 1
    assert grid.schedule.is_default
    assert not grid.has_persisted_rows
    assert grid.summary.belum_diatur == 29


def test_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.get_monthly_grid("nobody", "2024-02")


def test_save_grid_persists_touched_rows_and_recomputes_minutes(service, attendance_repo):
    rows = [
        {"date": "2024-02-01", "shift": "pagi", "check_in": "06:45", "check_out": "15:20",
         "attendance_status": "hadir", "lateness_minutes": 99},
        {"date": "2024-02-02", "attendance_status": "alpha", "check_in": "07:00"},
        {"date": "2024-02-03", "shift": "pagi"},
    ]

    saved = service.save_grid(current_role=Role.MANAGER, employee_id="e1", rows=rows)

    assert saved == 2
    first = attendance_repo.rows[("e1", date(2024, 2, 1))]
    assert first.early_arrival_minutes == 15
    assert first.overtime_minutes == 20
    assert first.lateness_minutes == 0
    assert first.store_id == 1
    second = attendance_repo.rows[("e1", date(2024, 2, 2))]
    assert second.attendance_status == AttendanceStatus.ALPHA
    assert second.check_in is None

    grid = service.get_monthly_grid("e1", "2024-02")
    assert grid.has_persisted_rows
    assert grid.summary.hadir == 1
    assert grid.summary.alpha == 1


def test_save_grid_upserts_same_date(service, attendance_repo):
    service.save_grid(
        current_role=Role.ADMINISTRASI,
        employee_id="e1",
        rows=[{"date": "2024-02-05", "shift": "pagi", "check_in": "07:10", "attendance_status": "hadir"}],
    )
    service.save_grid(
        current_role=Role.ADMINISTRASI,
        employee_id="e1",
        rows=[{"date": "2024-02-05", "shift": "pagi", "check_in": "07:25", "attendance_status": "hadir"}],
    )

    assert len(attendance_repo.rows) == 1
    assert attendance_repo.rows[("e1", date(2024, 2, 5))].lateness_minutes == 25


def test_staff_cannot_save(service):
    with pytest.raises(AuthorizationError):
        service.save_grid(current_role=Role.STAFF, employee_id="e1", rows=[])


def test_duplicate_dates_are_rejected(service, attendance_repo):
    rows = [{"date": "2024-02-01", "attendance_status": "cuti"}, {"date": "2024-02-01", "attendance_status": "izin"}]
    with pytest.raises(ValidationError):
        service.save_grid(current_role=Role.MANAGER, employee_id="e1", rows=rows)
    assert attendance_repo.rows == {}


def test_store_not_assigned_is_rejected(service):
    with pytest.raises(ValidationError):
        service.get_monthly_grid("e1", "2024-02", store_id=2)


def test_preview_row_uses_store_schedule(service):
    row = service.preview_row("e1", {"date": "2024-02-01", "shift": "buka", "check_in": "05:20"}, store_id=2)

    assert row.lateness_minutes == 20
    assert row.attendance_id is None


def test_midnight_minute_count_is_kept(service):
    row = service.preview_row("e1", {"date": "2024-02-01", "shift": "malam", "check_in": 0})

    assert row.check_in is not None
    assert row.lateness_minutes == 60
