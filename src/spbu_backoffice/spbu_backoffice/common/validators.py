from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..core.exceptions import MalformedInputError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak boleh kosong")
    return value.strip()


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise MalformedInputError(f"{field_name} harus berupa angka")
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise MalformedInputError(f"{field_name} harus berupa angka") from None
    if not number.is_finite():
        raise MalformedInputError(f"{field_name} harus berupa angka")
    return round_half_up(number)


def require_non_negative_int(value, field_name: str) -> int:
    number = require_int(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} tidak boleh negatif")
    return number


def require_positive_int(value, field_name: str) -> int:
    number = require_int(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} harus lebih dari 0")
    return number
