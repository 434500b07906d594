from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.spbu_backoffice.spbu_backoffice.attendance.model import AttendanceRecord
from src.spbu_backoffice.spbu_backoffice.core.enums import AttendanceStatus, PayrollStatus, Role, SuggestionKind
from src.spbu_backoffice.spbu_backoffice.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    WriteConflictError,
)
from src.spbu_backoffice.spbu_backoffice.payroll.model import PayrollConfig
from src.spbu_backoffice.spbu_backoffice.payroll.service import PayrollService
from src.spbu_backoffice.spbu_backoffice.users.model import Employee


class FakeAttendanceRepo:
    def __init__(self, records=()):
        self.records = list(records)

    def list_range(self, *, employee_id, start, end):
        return [r for r in self.records if r.employee_id == employee_id and start <= r.work_date <= end]

    def upsert(self, record):
        raise AssertionError("payroll must not write attendance")


class FakeEmployeeRepo:
    def __init__(self, employees):
        self._employees = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._employees.get(employee_id)

    def list_by_store(self, store_id):
        return [e for e in self._employees.values() if e.works_at(store_id)]


class FakePayrollRepo:
    def __init__(self):
        self.rows = {}
        self.writes = 0

    def get_by_id(self, payroll_id):
        return self.rows.get(payroll_id)

    def get_by_employee_store_month(self, *, employee_id, store_id, month):
        for r in self.rows.values():
            if (r.employee_id, r.store_id, r.month) == (employee_id, store_id, month):
                return r
        return None

    def list_by_stores_and_month(self, *, store_ids, month):
        return [r for r in self.rows.values() if r.store_id in store_ids and r.month == month]

    def create(self, record):
        if self.get_by_employee_store_month(employee_id=record.employee_id, store_id=record.store_id, month=record.month):
            raise WriteConflictError("duplicate", employee_id=record.employee_id)
        created = replace(record, payroll_id=f"p{len(self.rows) + 1}", version=1)
        self.rows[created.payroll_id] = created
        self.writes += 1
        return created

    def update(self, record, *, expected_version):
        stored = self.rows[record.payroll_id]
        if stored.version != expected_version:
            raise WriteConflictError("stale", payroll_id=record.payroll_id)
        saved = replace(record, version=expected_version + 1)
        self.rows[record.payroll_id] = saved
        self.writes += 1
        return saved


class FakeConfigRepo:
    def __init__(self, config=None):
        self._config = config

    def get(self):
        return self._config


def _attendance():
    return [
        AttendanceRecord("e1", date(2024, 4, 5), shift="pagi", check_in=time(7, 10), lateness_minutes=10,
                         attendance_status=AttendanceStatus.HADIR, attendance_id="a5"),
        AttendanceRecord("e1", date(2024, 4, 12), shift="pagi", check_in=time(7, 5), lateness_minutes=5,
                         attendance_status=AttendanceStatus.HADIR, attendance_id="a12"),
        AttendanceRecord("e1", date(2024, 4, 20), attendance_status=AttendanceStatus.ALPHA, attendance_id="a20"),
        AttendanceRecord("e1", date(2024, 4, 22), shift="pagi", check_in=time(7, 0), check_out=time(15, 30),
                         overtime_minutes=30, attendance_status=AttendanceStatus.HADIR, attendance_id="a22"),
    ]


@pytest.fixture
def payrolls():
    return FakePayrollRepo()


@pytest.fixture
def service(payrolls):
    employees = FakeEmployeeRepo(
        [
            Employee("e1", "Budi", Role.STAFF, store_ids=(1,), base_salary=9_000_000),
            Employee("e2", "Sari", Role.STAFF, store_ids=(1,), base_salary=None),
            Employee("e3", "Andi", Role.STAFF, store_ids=(2,), base_salary=3_000_000),
        ]
    )
    return PayrollService(
        payrolls,
        employees,
        FakeAttendanceRepo(_attendance()),
        config=FakeConfigRepo(PayrollConfig(overtime_rate_per_hour=12_000)),
        clock=lambda: datetime(2024, 5, 1, 10, 0),
    )


def _payroll_for(payrolls, employee_id):
    return next(r for r in payrolls.rows.values() if r.employee_id == employee_id)


def test_generate_creates_one_record_per_employee(service, payrolls):
    report = service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)

    assert len(report.created) == 2
    budi = _payroll_for(payrolls, "e1")
    assert budi.base_salary == 9_000_000
    assert budi.overtime_pay == 6_000
    assert budi.total_amount == 9_006_000
    assert _payroll_for(payrolls, "e2").base_salary == 0


def test_generate_twice_keeps_line_items(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    service.add_line_item(current_role=Role.MANAGER, payroll_id=budi.payroll_id, kind=SuggestionKind.BONUS,
                          name="Bonus target", amount=100_000)

    report = service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)

    assert report.created == []
    assert len(report.updated) == 2
    assert len(payrolls.rows) == 2
    budi = _payroll_for(payrolls, "e1")
    assert budi.total_bonus == 100_000
    assert budi.total_amount == 9_106_000


def test_generate_skips_paid_records(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    service.mark_paid(current_role=Role.ADMINISTRASI, payroll_id=budi.payroll_id)

    report = service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)

    assert report.skipped_paid == [budi.payroll_id]


def test_staff_cannot_generate(service):
    with pytest.raises(AuthorizationError):
        service.generate_monthly(current_role=Role.STAFF, month="2024-04", store_id=1)


def test_suggestions_for_payroll(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")

    result = service.get_suggestions(budi.payroll_id)

    assert [i.amount for i in result.items] == [10_000, 5_000, 300_000, 45_000]


def test_apply_lateness_suggestions(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")

    updated = service.apply_suggestions(
        current_role=Role.MANAGER,
        payroll_id=budi.payroll_id,
        selected_ids=["2024-04-05:lateness", "2024-04-12:lateness"],
        expected_version=budi.version,
    )

    assert len(updated.deductions) == 2
    assert updated.total_amount == budi.total_amount - 15_000
    assert updated.version == budi.version + 1


def test_apply_with_stale_version_conflicts(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    service.update_amounts(current_role=Role.MANAGER, payroll_id=budi.payroll_id, base_salary=9_500_000)
    writes = payrolls.writes

    with pytest.raises(WriteConflictError) as excinfo:
        service.apply_suggestions(
            current_role=Role.MANAGER,
            payroll_id=budi.payroll_id,
            selected_ids=["2024-04-05:lateness"],
            expected_version=budi.version,
        )

    assert excinfo.value.payroll_id == budi.payroll_id
    assert payrolls.writes == writes
    assert _payroll_for(payrolls, "e1").deductions == ()


def test_apply_empty_selection_is_a_no_op(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    writes = payrolls.writes

    assert service.apply_suggestions(current_role=Role.MANAGER, payroll_id=budi.payroll_id, selected_ids=[]) == budi
    assert payrolls.writes == writes


def test_remove_line_item_and_update_amounts(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    record = service.add_line_item(current_role=Role.MANAGER, payroll_id=budi.payroll_id,
                                   kind=SuggestionKind.DEDUCTION, name="Kasbon", amount="50000")

    record = service.remove_line_item(current_role=Role.MANAGER, payroll_id=record.payroll_id,
                                      kind=SuggestionKind.DEDUCTION, index=0)
    record = service.update_amounts(current_role=Role.MANAGER, payroll_id=record.payroll_id, overtime_pay=0)

    assert record.deductions == ()
    assert record.total_amount == 9_000_000
    with pytest.raises(ValidationError):
        service.update_amounts(current_role=Role.MANAGER, payroll_id=record.payroll_id)


def test_mark_paid_twice_writes_once(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")

    first = service.mark_paid(current_role=Role.MANAGER, payroll_id=budi.payroll_id)
    writes = payrolls.writes
    second = service.mark_paid(current_role=Role.MANAGER, payroll_id=budi.payroll_id)

    assert first.status == PayrollStatus.PAID
    assert first.paid_at == datetime(2024, 5, 1, 10, 0)
    assert second == first
    assert payrolls.writes == writes


def test_summary_and_slip(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    service.mark_paid(current_role=Role.MANAGER, payroll_id=budi.payroll_id)

    summary = service.summarize(store_ids=[1, 2], month="2024-04")
    assert summary.count == 2
    assert summary.paid == 1
    assert summary.pending == 1
    assert summary.total == 9_006_000
    assert summary.average == 4_503_000

    slip = service.salary_slip(budi.payroll_id)
    assert slip.attendance.alpha == 1
    assert slip.attendance.late_days == 2
    assert slip.worked_minutes == 510


def test_unknown_payroll(service):
    with pytest.raises(NotFoundError):
        service.get_suggestions("missing")


class RacingPayrollRepo(FakePayrollRepo):
    """Another operator inserts the row for ``racing_employee`` first."""

    def __init__(self, racing_employee):
        super().__init__()
        self.racing_employee = racing_employee

    def create(self, record):
        if record.employee_id == self.racing_employee:
            raise WriteConflictError("duplicate", employee_id=record.employee_id)
        return super().create(record)


def test_generate_reports_conflict_and_continues():
    payrolls = RacingPayrollRepo("e1")
    employees = FakeEmployeeRepo(
        [
            Employee("e1", "Budi", Role.STAFF, store_ids=(1,), base_salary=9_000_000),
            Employee("e2", "Sari", Role.STAFF, store_ids=(1,), base_salary=2_000_000),
        ]
    )
    service = PayrollService(payrolls, employees, FakeAttendanceRepo())

    report = service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)

    assert report.conflicts == ["e1"]
    assert len(report.created) == 1
    assert _payroll_for(payrolls, "e2").base_salary == 2_000_000
    assert report.to_dict()["conflicts"] == ["e1"]


def test_generate_reports_stale_update_as_conflict(service, payrolls):
    service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)
    budi = _payroll_for(payrolls, "e1")
    original_update = payrolls.update

    def racing_update(record, *, expected_version):
        if record.employee_id == "e1":
            payrolls.rows[budi.payroll_id] = replace(budi, version=budi.version + 1)
        return original_update(record, expected_version=expected_version)

    payrolls.update = racing_update
    report = service.generate_monthly(current_role=Role.MANAGER, month="2024-04", store_id=1)

    assert report.conflicts == ["e1"]
    assert report.updated == [_payroll_for(payrolls, "e2").payroll_id]
