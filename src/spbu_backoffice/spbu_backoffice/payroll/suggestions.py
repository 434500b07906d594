from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import normalize_date
from ..core.enums import SuggestionKind
from .model import SuggestionItem
from .rules.alpha_rule import AlphaRule
from .rules.base import SuggestionRule
from .rules.early_arrival_rule import EarlyArrivalRule
from .rules.early_leave_rule import EarlyLeaveRule
from .rules.late_departure_rule import LateDepartureRule
from .rules.lateness_rule import LatenessRule


def default_rules() -> tuple[SuggestionRule, ...]:
    """Rule order is also the order of items derived from the same day."""
    return (
        EarlyArrivalRule(),
        LateDepartureRule(),
        LatenessRule(),
        EarlyLeaveRule(),
        AlphaRule(),
    )


@dataclass(frozen=True)
class SuggestionResult:
    items: tuple[SuggestionItem, ...]
    has_attendance_data: bool

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def empty_reason(self) -> Optional[str]:
        """Why the list is empty: no attendance at all vs. nothing to adjust."""
        if self.items:
            return None
        if not self.has_attendance_data:
            return "no_attendance_data"
        return "no_anomalies"


def derive_suggestions(
    records: Optional[Iterable[AttendanceRecord]],
    base_salary: Optional[int],
    *,
    rules: Optional[Sequence[SuggestionRule]] = None,
) -> SuggestionResult:
    """Scan a month of attendance and list candidate bonuses and deductions.

    Each record is checked against every rule independently, so one day may
    produce several items. Output is ordered by date, then by rule order.
    """

    rules = tuple(rules) if rules is not None else default_rules()
    rows = sorted(records or (), key=lambda r: normalize_date(r.work_date))
    has_data = any(r.is_persistable for r in rows)

    items: list[SuggestionItem] = []
    seen: set[str] = set()
    for record in rows:
        for rule in rules:
            item = rule.derive(record, base_salary=base_salary)
            if item is None or item.id in seen:
                continue
            seen.add(item.id)
            items.append(item)

    return SuggestionResult(items=tuple(items), has_attendance_data=has_data)


@dataclass(frozen=True)
class SuggestionTotals:
    bonus_total: int
    deduction_total: int
    selected_count: int

    @property
    def net(self) -> int:
        return self.bonus_total - self.deduction_total

    def to_dict(self) -> dict:
        return {
            "bonus_total": self.bonus_total,
            "deduction_total": self.deduction_total,
            "net": self.net,
            "selected_count": self.selected_count,
        }


@dataclass(frozen=True)
class SuggestionSelection:
    """Ids the operator has ticked in the suggestion dialog."""

    selected_ids: frozenset[str] = frozenset()
    known_ids: frozenset[str] = frozenset()

    @classmethod
    def initial(cls, items: Iterable[SuggestionItem]) -> "SuggestionSelection":
        items = list(items)
        return cls(
            selected_ids=frozenset(i.id for i in items if i.is_applicable),
            known_ids=frozenset(i.id for i in items),
        )

    def refresh(self, items: Iterable[SuggestionItem]) -> "SuggestionSelection":
        """Carry the selection over to a fresh derivation.

        Ids seen before keep their state, new ids start selected, vanished
        ids are dropped.
        """

        items = list(items)
        selected = set()
        for item in items:
            if item.id in self.known_ids:
                if item.id in self.selected_ids and item.is_applicable:
                    selected.add(item.id)
            elif item.is_applicable:
                selected.add(item.id)
        return SuggestionSelection(selected_ids=frozenset(selected), known_ids=frozenset(i.id for i in items))

    def toggle(self, item_id: str) -> "SuggestionSelection":
        if item_id in self.selected_ids:
            return SuggestionSelection(self.selected_ids - {item_id}, self.known_ids)
        return SuggestionSelection(self.selected_ids | {item_id}, self.known_ids)

    def select_all(self, items: Iterable[SuggestionItem]) -> "SuggestionSelection":
        return SuggestionSelection.initial(items)

    def clear(self) -> "SuggestionSelection":
        return SuggestionSelection(frozenset(), self.known_ids)

    def totals(self, items: Iterable[SuggestionItem]) -> SuggestionTotals:
        return selection_totals(items, self.selected_ids)


def selection_totals(items: Iterable[SuggestionItem], selected_ids: Iterable[str]) -> SuggestionTotals:
    selected = set(selected_ids)
    chosen = [item for item in items if item.id in selected]
    return SuggestionTotals(
        bonus_total=sum(i.amount for i in chosen if i.kind == SuggestionKind.BONUS),
        deduction_total=sum(i.amount for i in chosen if i.kind == SuggestionKind.DEDUCTION),
        selected_count=len(chosen),
    )
