from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollConfigRepository, MySQLPayrollRepository
from .payroll.service import PayrollService
from .shifts.mysql_shift_repository import MySQLStoreShiftRepository
from .shifts.resolver import ShiftScheduleResolver
from .users.mysql_employee_repository import MySQLEmployeeRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    store_shifts_repo: MySQLStoreShiftRepository
    attendance_repo: MySQLAttendanceRepository
    payroll_repo: MySQLPayrollRepository
    payroll_config_repo: MySQLPayrollConfigRepository

    shift_resolver: ShiftScheduleResolver
    attendance_service: AttendanceService
    payroll_service: PayrollService


def build_container(*, db_config: dict, overtime_rate_per_hour: Optional[int] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    store_shifts_repo = MySQLStoreShiftRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    payroll_config_repo = MySQLPayrollConfigRepository(conn)

    shift_resolver = ShiftScheduleResolver(store_shifts_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo, shift_resolver)
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        config=payroll_config_repo,
        calculator_factory=StandardPayrollCalculator,
        default_overtime_rate=overtime_rate_per_hour,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        store_shifts_repo=store_shifts_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        payroll_config_repo=payroll_config_repo,
        shift_resolver=shift_resolver,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
    )
