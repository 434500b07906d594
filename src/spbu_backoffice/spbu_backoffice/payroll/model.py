from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_OVERTIME_RATE_PER_HOUR
from ..core.enums import PayrollStatus, SuggestionKind, SuggestionSource
from ..core.exceptions import MalformedInputError, ValidationError


@dataclass(frozen=True)
class LineItem:
    """Bonus or deduction entry stored on a payroll record."""

    name: str
    amount: int

    def __post_init__(self):
        object.__setattr__(self, "name", require_non_empty(self.name, "Nama item"))
        object.__setattr__(self, "amount", require_positive_int(self.amount, "Jumlah"))

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": self.amount}


def line_items_from_json(raw) -> tuple[LineItem, ...]:
    """Decode the JSON list kept in the ``bonuses``/``deductions`` columns."""

    if raw in (None, ""):
        return ()
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except ValueError:
        raise MalformedInputError("Daftar item gaji bukan JSON yang valid") from None
    if not isinstance(data, list):
        raise MalformedInputError("Daftar item gaji harus berupa list")
    try:
        return tuple(LineItem(name=str(item["name"]), amount=item["amount"]) for item in data)
    except (KeyError, TypeError):
        raise MalformedInputError("Item gaji harus memiliki name dan amount") from None


def line_items_to_json(items) -> str:
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


@dataclass(frozen=True)
class PayrollRecord:
    """Entitas domain: gaji satu karyawan, satu toko, satu bulan."""

    payroll_id: Optional[str]
    employee_id: str
    store_id: int
    month: str
    base_salary: int
    overtime_pay: int = 0
    bonuses: tuple[LineItem, ...] = ()
    deductions: tuple[LineItem, ...] = ()
    total_amount: int = 0
    status: PayrollStatus = PayrollStatus.PENDING
    paid_at: Optional[datetime] = None
    version: int = 0

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID

    @property
    def total_bonus(self) -> int:
        return sum(item.amount for item in self.bonuses)

    @property
    def total_deduction(self) -> int:
        return sum(item.amount for item in self.deductions)

    def to_dict(self) -> dict:
        return {
            "id": self.payroll_id,
            "employee_id": self.employee_id,
            "store_id": self.store_id,
            "month": self.month,
            "base_salary": self.base_salary,
            "overtime_pay": self.overtime_pay,
            "bonuses": [b.to_dict() for b in self.bonuses],
            "deductions": [d.to_dict() for d in self.deductions],
            "total_bonus": self.total_bonus,
            "total_deduction": self.total_deduction,
            "total_amount": self.total_amount,
            "status": self.status.value,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "version": self.version,
        }


@dataclass(frozen=True)
class SuggestionItem:
    """Usulan bonus/potongan dari satu anomali absensi (tidak disimpan)."""

    id: str
    kind: SuggestionKind
    source: SuggestionSource
    work_date: date
    amount: int
    name: str
    reason: str
    minutes: Optional[int] = None

    @property
    def is_applicable(self) -> bool:
        return self.amount > 0

    def to_line_item(self) -> LineItem:
        if not self.is_applicable:
            raise ValidationError(f"Usulan {self.id} bernilai 0 dan tidak dapat diterapkan")
        return LineItem(name=self.name, amount=self.amount)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.kind.value,
            "source": self.source.value,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "minutes": self.minutes,
            "amount": self.amount,
            "name": self.name,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class PayrollConfig:
    overtime_rate_per_hour: int = DEFAULT_OVERTIME_RATE_PER_HOUR

    def __post_init__(self):
        if self.overtime_rate_per_hour < 0:
            raise ValidationError("Tarif lembur tidak boleh negatif")
