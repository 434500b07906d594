from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_clock
from ..core.enums import AttendanceStatus

DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu baris absensi per karyawan per hari."""

    employee_id: str
    work_date: date
    shift: Optional[str] = None
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    lateness_minutes: int = 0
    early_arrival_minutes: int = 0
    overtime_minutes: int = 0
    attendance_status: AttendanceStatus = AttendanceStatus.BELUM_DIATUR
    notes: str = ""
    attendance_id: Optional[str] = None
    store_id: Optional[int] = None

    @property
    def is_placeholder(self) -> bool:
        return self.attendance_id is None

    @property
    def is_persistable(self) -> bool:
        """A row is worth saving once any of check-in, check-out or status is set."""
        return (
            self.check_in is not None
            or self.check_out is not None
            or self.attendance_status != AttendanceStatus.BELUM_DIATUR
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "store_id": self.store_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "day": DAY_NAMES[self.work_date.weekday()],
            "shift": self.shift or "",
            "check_in": format_clock(self.check_in),
            "check_out": format_clock(self.check_out),
            "lateness_minutes": self.lateness_minutes,
            "early_arrival_minutes": self.early_arrival_minutes,
            "overtime_minutes": self.overtime_minutes,
            "attendance_status": self.attendance_status.value,
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model: rekap absensi satu bulan."""

    total_days: int
    hadir: int
    cuti: int
    izin: int
    sakit: int
    alpha: int
    belum_diatur: int
    total_lateness_minutes: int
    total_early_arrival_minutes: int
    total_overtime_minutes: int
    late_days: int

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "hadir": self.hadir,
            "cuti": self.cuti,
            "izin": self.izin,
            "sakit": self.sakit,
            "alpha": self.alpha,
            "belum_diatur": self.belum_diatur,
            "total_lateness_minutes": self.total_lateness_minutes,
            "total_early_arrival_minutes": self.total_early_arrival_minutes,
            "total_overtime_minutes": self.total_overtime_minutes,
            "late_days": self.late_days,
        }
