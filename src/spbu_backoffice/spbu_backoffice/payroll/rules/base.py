from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.enums import SuggestionKind, SuggestionSource
from ..model import SuggestionItem


def suggestion_id(record: AttendanceRecord, source: SuggestionSource) -> str:
    """Stable per (date, source) so re-derivation keeps the same ids."""
    return f"{record.work_date:%Y-%m-%d}:{source.value}"


class SuggestionRule(ABC):
    """Strategy Pattern: one attendance anomaly -> at most one suggestion."""

    source: SuggestionSource
    kind: SuggestionKind
    label: str

    @abstractmethod
    def derive(self, record: AttendanceRecord, *, base_salary: Optional[int]) -> Optional[SuggestionItem]:
        raise NotImplementedError

    def _item(self, record: AttendanceRecord, *, amount: int, reason: str, minutes: Optional[int] = None) -> SuggestionItem:
        return SuggestionItem(
            id=suggestion_id(record, self.source),
            kind=self.kind,
            source=self.source,
            work_date=record.work_date,
            minutes=minutes,
            amount=amount,
            name=f"{self.label} {record.work_date:%d/%m/%Y}",
            reason=reason,
        )
