from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..attendance.grid import build_attendance_grid, summarize_month
from ..attendance.model import AttendanceRecord, AttendanceSummary
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_month, month_bounds, now_local, parse_month
from ..common.validators import require_int
from ..core.enums import EDITOR_ROLES, Role, SuggestionKind
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError, WriteConflictError
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from . import aggregator
from .applier import apply_selection
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord
from .repository import PayrollConfigRepository, PayrollRepository
from .suggestions import SuggestionResult, derive_suggestions

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    month: str
    store_id: int
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped_paid: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "store_id": self.store_id,
            "created": len(self.created),
            "updated": len(self.updated),
            "skipped_paid": len(self.skipped_paid),
            "conflicts": list(self.conflicts),
        }


@dataclass(frozen=True)
class PayrollSummary:
    total: int
    average: int
    paid: int
    pending: int
    count: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "average": self.average,
            "paid": self.paid,
            "pending": self.pending,
            "count": self.count,
        }


@dataclass(frozen=True)
class SalarySlip:
    payroll: PayrollRecord
    employee: Employee
    attendance: AttendanceSummary
    worked_minutes: int

    def to_dict(self) -> dict:
        return {
            "payroll": self.payroll.to_dict(),
            "employee": {"id": self.employee.employee_id, "name": self.employee.name, "role": self.employee.role.value},
            "attendance": self.attendance.to_dict(),
            "worked_hours": round(self.worked_minutes / 60, 2),
            "net_salary": self.payroll.total_amount,
        }


def summarize_payroll(records: Sequence[PayrollRecord]) -> PayrollSummary:
    total = sum(r.total_amount for r in records)
    paid = sum(1 for r in records if r.is_paid)
    return PayrollSummary(
        total=total,
        average=total // len(records) if records else 0,
        paid=paid,
        pending=len(records) - paid,
        count=len(records),
    )


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        config: Optional[PayrollConfigRepository] = None,
        calculator_factory: Optional[Callable[..., PayrollCalculator]] = None,
        default_overtime_rate: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._config = config
        self._calculator_factory = calculator_factory or StandardPayrollCalculator
        self._default_overtime_rate = default_overtime_rate
        self._clock = clock or now_local

    # -- helpers -------------------------------------------------------

    def _require_editor(self, current_role: Role) -> None:
        if current_role not in EDITOR_ROLES:
            raise AuthorizationError("Anda tidak memiliki akses untuk mengubah data gaji")

    def _get(self, payroll_id: str) -> PayrollRecord:
        record = self._payrolls.get_by_id(payroll_id)
        if not record:
            raise NotFoundError("Data gaji tidak ditemukan")
        return record

    def _get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        return employee

    def _calculator(self) -> PayrollCalculator:
        rate = None
        if self._config is not None:
            config = self._config.get()
            if config is not None:
                rate = config.overtime_rate_per_hour
        if rate is None:
            rate = self._default_overtime_rate
        if rate is None:
            return self._calculator_factory()
        return self._calculator_factory(rate)

    def _month_records(self, employee_id: str, month: str) -> list[AttendanceRecord]:
        year, month_no = parse_month(month)
        start, end = month_bounds(year, month_no)
        persisted = self._attendance.list_range(employee_id=employee_id, start=start, end=end)
        return build_attendance_grid(employee_id, start, end, persisted)

    def _save(self, current: PayrollRecord, updated: PayrollRecord, expected_version: Optional[int]) -> PayrollRecord:
        if expected_version is not None and require_int(expected_version, "Versi") != current.version:
            raise WriteConflictError(
                "Data gaji telah diubah oleh pengguna lain, muat ulang lalu coba lagi",
                payroll_id=current.payroll_id,
                employee_id=current.employee_id,
                store_id=current.store_id,
                month=current.month,
            )
        return self._payrolls.update(updated, expected_version=current.version)

    # -- queries -------------------------------------------------------

    def get(self, payroll_id: str) -> PayrollRecord:
        return self._get(payroll_id)

    def list_month(self, *, store_ids: Sequence[int], month: str) -> list[PayrollRecord]:
        year, month_no = parse_month(month)
        return list(self._payrolls.list_by_stores_and_month(store_ids=list(store_ids), month=format_month(year, month_no)))

    def summarize(self, *, store_ids: Sequence[int], month: str) -> PayrollSummary:
        return summarize_payroll(self.list_month(store_ids=store_ids, month=month))

    def get_suggestions(self, payroll_id: str) -> SuggestionResult:
        record = self._get(payroll_id)
        return derive_suggestions(self._month_records(record.employee_id, record.month), record.base_salary)

    def salary_slip(self, payroll_id: str) -> SalarySlip:
        record = self._get(payroll_id)
        employee = self._get_employee(record.employee_id)
        records = self._month_records(record.employee_id, record.month)
        calculator = self._calculator()
        return SalarySlip(
            payroll=record,
            employee=employee,
            attendance=summarize_month(records),
            worked_minutes=sum(calculator.worked_minutes(r) for r in records),
        )

    # -- generation ----------------------------------------------------

    def generate_monthly(self, *, current_role: Role, month: str, store_id: int) -> GenerationReport:
        """Create or recompute one payroll per employee assigned to the store.

        Existing pending records keep their bonuses and deductions and get a
        fresh base salary and overtime pay. Paid records are not touched.
        """

        self._require_editor(current_role)
        year, month_no = parse_month(month)
        month = format_month(year, month_no)
        calculator = self._calculator()
        report = GenerationReport(month=month, store_id=int(store_id))

        for employee in self._employees.list_by_store(int(store_id)):
            base_salary = max(employee.base_salary or 0, 0)
            overtime_pay = calculator.overtime_pay(self._month_records(employee.employee_id, month))

            existing = self._payrolls.get_by_employee_store_month(
                employee_id=employee.employee_id, store_id=int(store_id), month=month
            )
            if existing is not None and existing.is_paid:
                report.skipped_paid.append(existing.payroll_id)
                continue

            try:
                if existing is None:
                    created = self._payrolls.create(
                        aggregator.recompute(
                            PayrollRecord(
                                payroll_id=None,
                                employee_id=employee.employee_id,
                                store_id=int(store_id),
                                month=month,
                                base_salary=base_salary,
                                overtime_pay=overtime_pay,
                            )
                        )
                    )
                    report.created.append(created.payroll_id)
                else:
                    updated = aggregator.recompute(replace(existing, base_salary=base_salary, overtime_pay=overtime_pay))
                    self._payrolls.update(updated, expected_version=existing.version)
                    report.updated.append(existing.payroll_id)
            except WriteConflictError:
                logger.warning(
                    "Payroll generation conflict employee=%s store=%s month=%s", employee.employee_id, store_id, month
                )
                report.conflicts.append(employee.employee_id)

        logger.info(
            "Payroll generation store=%s month=%s created=%d updated=%d skipped_paid=%d conflicts=%d",
            store_id, month, len(report.created), len(report.updated), len(report.skipped_paid), len(report.conflicts),
        )
        return report

    # -- mutations -----------------------------------------------------

    def update_amounts(
        self,
        *,
        current_role: Role,
        payroll_id: str,
        base_salary=None,
        overtime_pay=None,
        expected_version: Optional[int] = None,
    ) -> PayrollRecord:
        self._require_editor(current_role)
        current = self._get(payroll_id)
        updated = current
        if base_salary is not None:
            updated = aggregator.with_base_salary(updated, base_salary)
        if overtime_pay is not None:
            updated = aggregator.with_overtime_pay(updated, overtime_pay)
        if updated is current:
            raise ValidationError("Tidak ada perubahan")
        return self._save(current, updated, expected_version)

    def add_line_item(
        self,
        *,
        current_role: Role,
        payroll_id: str,
        kind: SuggestionKind,
        name: str,
        amount,
        expected_version: Optional[int] = None,
    ) -> PayrollRecord:
        self._require_editor(current_role)
        current = self._get(payroll_id)
        if kind == SuggestionKind.BONUS:
            updated = aggregator.add_bonus(current, name, amount)
        else:
            updated = aggregator.add_deduction(current, name, amount)
        return self._save(current, updated, expected_version)

    def remove_line_item(
        self,
        *,
        current_role: Role,
        payroll_id: str,
        kind: SuggestionKind,
        index: int,
        expected_version: Optional[int] = None,
    ) -> PayrollRecord:
        self._require_editor(current_role)
        current = self._get(payroll_id)
        updated = aggregator.remove_line_item(current, kind, int(index))
        return self._save(current, updated, expected_version)

    def apply_suggestions(
        self,
        *,
        current_role: Role,
        payroll_id: str,
        selected_ids: Iterable[str],
        expected_version: Optional[int] = None,
    ) -> PayrollRecord:
        """Merge the selected suggestions into the record in one write.

        Suggestions are re-derived from the stored attendance; ids are stable
        so the operator's selection still points at the same items.
        """

        self._require_editor(current_role)
        current = self._get(payroll_id)
        selected_ids = list(selected_ids)
        if not selected_ids:
            return current

        result = derive_suggestions(self._month_records(current.employee_id, current.month), current.base_salary)
        bonuses, deductions = apply_selection(result.items, selected_ids, current.bonuses, current.deductions)
        saved = self._save(current, aggregator.merge_line_items(current, bonuses, deductions), expected_version)

        logger.info("Applied %d suggestions to payroll %s", len(selected_ids), payroll_id)
        return saved

    def mark_paid(self, *, current_role: Role, payroll_id: str) -> PayrollRecord:
        self._require_editor(current_role)
        current = self._get(payroll_id)
        if current.is_paid:
            return current
        return self._payrolls.update(aggregator.mark_paid(current, self._clock()), expected_version=current.version)
