"""Payroll aggregation.

Every mutator returns a new :class:`PayrollRecord` whose ``total_amount`` is
recomputed from scratch out of the four contributing fields, so the total can
never drift from ``base + overtime + bonuses - deductions``.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_negative_int
from ..core.enums import PayrollStatus, SuggestionKind
from ..core.exceptions import ValidationError
from .model import LineItem, PayrollRecord


def compute_total(base_salary: int, overtime_pay: int, bonuses: Iterable[LineItem], deductions: Iterable[LineItem]) -> int:
    return (
        int(base_salary)
        + int(overtime_pay)
        + sum(item.amount for item in bonuses)
        - sum(item.amount for item in deductions)
    )


def recompute(record: PayrollRecord) -> PayrollRecord:
    return replace(
        record,
        total_amount=compute_total(record.base_salary, record.overtime_pay, record.bonuses, record.deductions),
    )


def _update(record: PayrollRecord, **changes) -> PayrollRecord:
    return recompute(replace(record, **changes))


def with_base_salary(record: PayrollRecord, base_salary) -> PayrollRecord:
    return _update(record, base_salary=require_non_negative_int(base_salary, "Gaji pokok"))


def with_overtime_pay(record: PayrollRecord, overtime_pay) -> PayrollRecord:
    return _update(record, overtime_pay=require_non_negative_int(overtime_pay, "Uang lembur"))


def add_bonus(record: PayrollRecord, name: str, amount) -> PayrollRecord:
    return _update(record, bonuses=record.bonuses + (LineItem(name=name, amount=amount),))


def add_deduction(record: PayrollRecord, name: str, amount) -> PayrollRecord:
    return _update(record, deductions=record.deductions + (LineItem(name=name, amount=amount),))


def remove_line_item(record: PayrollRecord, kind: SuggestionKind, index: int) -> PayrollRecord:
    items = record.bonuses if kind == SuggestionKind.BONUS else record.deductions
    if not (0 <= index < len(items)):
        raise ValidationError(f"Item ke-{index} tidak ditemukan")
    remaining = items[:index] + items[index + 1:]
    if kind == SuggestionKind.BONUS:
        return _update(record, bonuses=remaining)
    return _update(record, deductions=remaining)


def merge_line_items(record: PayrollRecord, bonuses: Iterable[LineItem], deductions: Iterable[LineItem]) -> PayrollRecord:
    """Replace both lists with already-merged ones (see ``apply_selection``)."""
    return _update(record, bonuses=tuple(bonuses), deductions=tuple(deductions))


def mark_paid(record: PayrollRecord, paid_at: Optional[datetime] = None) -> PayrollRecord:
    """pending -> paid. Already paid records are returned unchanged."""

    if record.status == PayrollStatus.PAID:
        return record
    return replace(record, status=PayrollStatus.PAID, paid_at=paid_at or now_local())
