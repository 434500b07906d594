from datetime import date

import pytest

from src.spbu_backoffice.spbu_backoffice.core.enums import SuggestionKind, SuggestionSource
from src.spbu_backoffice.spbu_backoffice.core.exceptions import ValidationError
from src.spbu_backoffice.spbu_backoffice.payroll.applier import apply_selection
from src.spbu_backoffice.spbu_backoffice.payroll.model import LineItem, SuggestionItem


def _item(source, kind, amount, day=1):
    return SuggestionItem(
        id=f"2024-05-{day:02d}:{source.value}",
        kind=kind,
        source=source,
        work_date=date(2024, 5, day),
        amount=amount,
        name=f"{source.value} {day}",
        reason="",
    )


ITEMS = (
    _item(SuggestionSource.EARLY_ARRIVAL, SuggestionKind.BONUS, 15_000, 1),
    _item(SuggestionSource.LATENESS, SuggestionKind.DEDUCTION, 10_000, 2),
    _item(SuggestionSource.ALPHA, SuggestionKind.DEDUCTION, 0, 3),
)
EXISTING_BONUS = (LineItem("Bonus Lebaran", 500_000),)
EXISTING_DEDUCTION = (LineItem("Kasbon", 200_000),)


def test_empty_selection_changes_nothing():
    assert apply_selection(ITEMS, [], EXISTING_BONUS, EXISTING_DEDUCTION) == (EXISTING_BONUS, EXISTING_DEDUCTION)


def test_selection_is_appended_after_existing_items():
    bonuses, deductions = apply_selection(ITEMS, [ITEMS[1].id, ITEMS[0].id], EXISTING_BONUS, EXISTING_DEDUCTION)

    assert bonuses == EXISTING_BONUS + (LineItem("early_arrival 1", 15_000),)
    assert deductions == EXISTING_DEDUCTION + (LineItem("lateness 2", 10_000),)


def test_applying_twice_duplicates_items():
    bonuses, deductions = apply_selection(ITEMS, [ITEMS[1].id], (), ())
    bonuses, deductions = apply_selection(ITEMS, [ITEMS[1].id], bonuses, deductions)

    assert len(deductions) == 2


def test_unknown_id_is_rejected():
    with pytest.raises(ValidationError):
        apply_selection(ITEMS, ["2024-05-09:lateness"], (), ())


def test_zero_amount_item_cannot_be_applied():
    with pytest.raises(ValidationError):
        apply_selection(ITEMS, [ITEMS[2].id], (), ())
