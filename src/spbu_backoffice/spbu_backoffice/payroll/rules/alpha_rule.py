from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...common.validators import round_half_up
from ...core.constants import SALARY_DAYS_PER_MONTH
from ...core.enums import AttendanceStatus, SuggestionKind, SuggestionSource
from ..model import SuggestionItem
from .base import SuggestionRule


class AlphaRule(SuggestionRule):
    """One pro-rated day of base salary for an unexcused absence.

    Without a base salary the item is still listed, with amount 0.
    """

    source = SuggestionSource.ALPHA
    kind = SuggestionKind.DEDUCTION
    label = "Potongan Alpha"

    def __init__(self, days_per_month: int = SALARY_DAYS_PER_MONTH):
        self.days_per_month = days_per_month

    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        if record.attendance_status != AttendanceStatus.ALPHA:
            return None

        amount = round_half_up(Decimal(max(base_salary or 0, 0)) / self.days_per_month)
        return self._item(
            record,
            amount=amount,
            reason=f"Tidak hadir tanpa keterangan (1/{self.days_per_month} gaji pokok)",
        )
