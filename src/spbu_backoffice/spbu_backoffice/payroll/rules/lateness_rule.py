from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import LATENESS_RATE_PER_MINUTE
from ...core.enums import SuggestionKind, SuggestionSource
from ..model import SuggestionItem
from .base import SuggestionRule


class LatenessRule(SuggestionRule):
    source = SuggestionSource.LATENESS
    kind = SuggestionKind.DEDUCTION
    label = "Potongan Terlambat"

    def __init__(self, rate_per_minute: int = LATENESS_RATE_PER_MINUTE):
        self.rate_per_minute = rate_per_minute

    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        minutes = int(record.lateness_minutes or 0)
        if minutes <= 0:
            return None
        return self._item(
            record,
            minutes=minutes,
            amount=minutes * self.rate_per_minute,
            reason=f"Terlambat {minutes} menit",
        )
