from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import iter_days, normalize_date, parse_clock
from ..core.constants import DEFAULT_SHIFT_KEY
from ..core.enums import AttendanceStatus
from ..core.exceptions import DateRangeError, ValidationError
from ..shifts.model import ShiftSchedule
from .model import AttendanceRecord, AttendanceSummary
from .time_delta import compute_deltas, detect_shift

ABSENCE_STATUSES = frozenset(
    {AttendanceStatus.CUTI, AttendanceStatus.IZIN, AttendanceStatus.SAKIT, AttendanceStatus.ALPHA}
)

_EDITABLE_FIELDS = {"shift", "check_in", "check_out", "attendance_status", "notes"}
_TIME_FIELDS = {"shift", "check_in", "check_out"}


def placeholder(employee_id: str, work_date: date, *, shift: str = DEFAULT_SHIFT_KEY, store_id: Optional[int] = None) -> AttendanceRecord:
    return AttendanceRecord(employee_id=employee_id, work_date=work_date, shift=shift, store_id=store_id)


def build_attendance_grid(
    employee_id: str,
    start: date,
    end: date,
    persisted: Iterable[AttendanceRecord],
    *,
    schedule: Optional[ShiftSchedule] = None,
    store_id: Optional[int] = None,
) -> list[AttendanceRecord]:
    """One record per calendar day in ``[start, end]``, ascending.

    Persisted rows are overlaid by date; every other day gets an empty
    placeholder on the first shift of the schedule.
    """

    if end < start:
        raise DateRangeError(f"Tanggal akhir {end} sebelum tanggal awal {start}")

    by_date: dict[date, AttendanceRecord] = {}
    for record in persisted:
        if record.employee_id != employee_id:
            continue
        work_date = normalize_date(record.work_date)
        by_date.setdefault(work_date, replace(record, work_date=work_date))

    default_shift = schedule.first_key if schedule else DEFAULT_SHIFT_KEY
    return [
        by_date.get(day) or placeholder(employee_id, day, shift=default_shift, store_id=store_id)
        for day in iter_days(start, end)
    ]


def _parse_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or AttendanceStatus.BELUM_DIATUR.value))
    except ValueError:
        raise ValidationError(f"Status absensi tidak dikenal: {value!r}") from None


def edit_record(record: AttendanceRecord, schedule: Optional[ShiftSchedule] = None, **changes) -> AttendanceRecord:
    """Apply an operator edit to one row and re-derive its minute fields.

    Only this row is recomputed. Moving a row to an absence status clears
    its clock times, shift and minutes.
    """

    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Kolom tidak dapat diubah: {', '.join(sorted(unknown))}")

    values = {}
    if "attendance_status" in changes:
        values["attendance_status"] = _parse_status(changes["attendance_status"])
    if "notes" in changes:
        notes = changes["notes"]
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("Catatan harus berupa teks")
        values["notes"] = (notes or "").strip()
    for field_name in ("check_in", "check_out"):
        if field_name in changes:
            values[field_name] = parse_clock(changes[field_name])
    if "shift" in changes:
        shift = changes["shift"] or None
        if shift and schedule is not None and shift not in schedule:
            raise ValidationError(f"Shift tidak dikenal: {shift!r}")
        values["shift"] = shift

    updated = replace(record, **values)

    if updated.attendance_status in ABSENCE_STATUSES and "attendance_status" in changes:
        return replace(
            updated,
            check_in=None,
            check_out=None,
            shift=None,
            lateness_minutes=0,
            early_arrival_minutes=0,
            overtime_minutes=0,
        )

    if _TIME_FIELDS & set(changes):
        return recalculate(updated, schedule)
    return updated


def recalculate(record: AttendanceRecord, schedule: Optional[ShiftSchedule] = None) -> AttendanceRecord:
    """Re-derive lateness, early arrival and overtime from the row's own clock values."""

    shift = record.shift
    if not shift and record.check_in is not None:
        shift = detect_shift(record.check_in, schedule)
    deltas = compute_deltas(record.check_in, record.check_out, shift, schedule)
    return replace(
        record,
        shift=shift,
        lateness_minutes=deltas.lateness_minutes,
        early_arrival_minutes=deltas.early_arrival_minutes,
        overtime_minutes=deltas.overtime_minutes,
    )


def summarize_month(records: Sequence[AttendanceRecord]) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    for record in records:
        counts[record.attendance_status] += 1

    return AttendanceSummary(
        total_days=len(records),
        hadir=counts[AttendanceStatus.HADIR],
        cuti=counts[AttendanceStatus.CUTI],
        izin=counts[AttendanceStatus.IZIN],
        sakit=counts[AttendanceStatus.SAKIT],
        alpha=counts[AttendanceStatus.ALPHA],
        belum_diatur=counts[AttendanceStatus.BELUM_DIATUR],
        total_lateness_minutes=sum(r.lateness_minutes for r in records),
        total_early_arrival_minutes=sum(r.early_arrival_minutes for r in records),
        total_overtime_minutes=sum(r.overtime_minutes for r in records),
        late_days=sum(1 for r in records if r.lateness_minutes > 0),
    )
