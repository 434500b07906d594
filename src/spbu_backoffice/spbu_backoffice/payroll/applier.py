from __future__ import annotations

from typing import Iterable, Sequence

from ..core.enums import SuggestionKind
from ..core.exceptions import ValidationError
from .model import LineItem, SuggestionItem


def apply_selection(
    items: Sequence[SuggestionItem],
    selected_ids: Iterable[str],
    bonuses: Sequence[LineItem],
    deductions: Sequence[LineItem],
) -> tuple[tuple[LineItem, ...], tuple[LineItem, ...]]:
    """Append the selected suggestions to the existing bonus/deduction lists.

    Strictly additive: existing entries are kept in place and never
    de-duplicated. Selected items keep the order they have in ``items``
    (date order). Every id is checked before anything is merged.
    """

    selected = set(selected_ids)
    known = {item.id for item in items}
    unknown = selected - known
    if unknown:
        raise ValidationError(f"Usulan tidak dikenal: {', '.join(sorted(unknown))}")

    new_bonuses: list[LineItem] = []
    new_deductions: list[LineItem] = []
    for item in items:
        if item.id not in selected:
            continue
        line_item = item.to_line_item()
        if item.kind == SuggestionKind.BONUS:
            new_bonuses.append(line_item)
        elif item.kind == SuggestionKind.DEDUCTION:
            new_deductions.append(line_item)
        else:
            raise ValidationError(f"Jenis usulan tidak dikenal: {item.kind!r}")

    return tuple(bonuses) + tuple(new_bonuses), tuple(deductions) + tuple(new_deductions)
