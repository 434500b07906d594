from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import LATE_DEPARTURE_RATE_PER_MINUTE
from ...core.enums import SuggestionKind, SuggestionSource
from ..model import SuggestionItem
from .base import SuggestionRule


class LateDepartureRule(SuggestionRule):
    """Bonus for staying past the shift end (overtime minutes)."""

    source = SuggestionSource.LATE_DEPARTURE
    kind = SuggestionKind.BONUS
    label = "Bonus Pulang Lambat"

    def __init__(self, rate_per_minute: int = LATE_DEPARTURE_RATE_PER_MINUTE):
        self.rate_per_minute = rate_per_minute

    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        minutes = int(record.overtime_minutes or 0)
        if minutes <= 0:
            return None
        return self._item(
            record,
            minutes=minutes,
            amount=minutes * self.rate_per_minute,
            reason=f"Pulang {minutes} menit setelah shift {record.shift or '-'} berakhir",
        )
