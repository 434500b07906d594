from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import EARLY_ARRIVAL_RATE_PER_MINUTE
from ...core.enums import SuggestionKind, SuggestionSource
from ..model import SuggestionItem
from .base import SuggestionRule


class EarlyArrivalRule(SuggestionRule):
    """Bonus for arriving before the shift starts."""

    source = SuggestionSource.EARLY_ARRIVAL
    kind = SuggestionKind.BONUS
    label = "Bonus Datang Awal"

    def __init__(self, rate_per_minute: int = EARLY_ARRIVAL_RATE_PER_MINUTE):
        self.rate_per_minute = rate_per_minute

    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        minutes = int(record.early_arrival_minutes or 0)
        if minutes <= 0:
            return None
        return self._item(
            record,
            minutes=minutes,
            amount=minutes * self.rate_per_minute,
            reason=f"Datang {minutes} menit sebelum shift {record.shift or '-'}",
        )
