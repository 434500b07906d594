from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...attendance.time_delta import working_minutes
from ...common.validators import round_half_up
from ...core.constants import EARLY_LEAVE_RATE_PER_MINUTE, STANDARD_WORKING_HOURS
from ...core.enums import AttendanceStatus, SuggestionKind, SuggestionSource
from ..model import SuggestionItem
from .base import SuggestionRule


class EarlyLeaveRule(SuggestionRule):
    """Deduction for a present day shorter than the standard working hours.

    Only evaluated for status ``hadir`` with both check-in and check-out
    recorded; a missing check-out is "not evaluable", not an early leave.
    """

    source = SuggestionSource.EARLY_LEAVE
    kind = SuggestionKind.DEDUCTION
    label = "Potongan Pulang Cepat"

    def __init__(self, rate_per_minute: int = EARLY_LEAVE_RATE_PER_MINUTE, standard_hours: int = STANDARD_WORKING_HOURS):
        self.rate_per_minute = rate_per_minute
        self.standard_hours = standard_hours

    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        if record.attendance_status != AttendanceStatus.HADIR:
            return None

        worked = working_minutes(record.check_in, record.check_out)
        if worked is None:
            return None

        working_hours = worked / 60
        if working_hours >= self.standard_hours:
            return None

        minutes = round_half_up((self.standard_hours - working_hours) * 60)
        if minutes <= 0:
            return None
        return self._item(
            record,
            minutes=minutes,
            amount=minutes * self.rate_per_minute,
            reason=f"Jam kerja {working_hours:.2f} jam, kurang {minutes} menit dari {self.standard_hours} jam",
        )
