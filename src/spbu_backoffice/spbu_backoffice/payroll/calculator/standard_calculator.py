from __future__ import annotations

from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...attendance.time_delta import working_minutes
from ...common.validators import round_half_up
from ...core.constants import DEFAULT_OVERTIME_RATE_PER_HOUR
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: overtime minutes of the month paid at an hourly rate."""

    def __init__(self, overtime_rate_per_hour: int = DEFAULT_OVERTIME_RATE_PER_HOUR):
        self.overtime_rate_per_hour = int(overtime_rate_per_hour)

    def worked_minutes(self, record: AttendanceRecord) -> int:
        minutes = working_minutes(record.check_in, record.check_out)
        return max(minutes or 0, 0)

    def overtime_pay(self, records: Sequence[AttendanceRecord]) -> int:
        total_minutes = sum(max(int(r.overtime_minutes or 0), 0) for r in records)
        return round_half_up(total_minutes * self.overtime_rate_per_hour / 60)
