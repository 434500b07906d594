from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

from ..core.constants import MAX_SUPPORTED_YEAR, MIN_SUPPORTED_YEAR
from ..core.exceptions import DateRangeError, MalformedInputError, OutOfRangeError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise MalformedInputError(f"Tanggal tidak valid: {value!r}") from None


def normalize_date(value) -> date:
    """Drop the time part of datetimes; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def validate_year_month(year: int, month: int) -> tuple[int, int]:
    if not (MIN_SUPPORTED_YEAR <= year <= MAX_SUPPORTED_YEAR):
        raise OutOfRangeError(f"Tahun di luar jangkauan: {year}")
    if not (1 <= month <= 12):
        raise OutOfRangeError(f"Bulan di luar jangkauan: {month}")
    return year, month


def parse_month(value: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` month identifier into ``(year, month)``.

    A value with the wrong shape raises :class:`MalformedInputError`; a
    well-formed value outside the calendar bounds raises
    :class:`OutOfRangeError`.
    """

    match = _MONTH_RE.match((value or "").strip())
    if not match:
        raise MalformedInputError(f"Format bulan tidak valid (YYYY-MM): {value!r}")
    return validate_year_month(int(match.group(1)), int(match.group(2)))


def parse_clock(value) -> Optional[time]:
    """Parse a wall-clock value (``"HH:MM"``, ``"HH:MM:SS"``, time or minute-of-day).

    Empty values mean "not recorded" and return None.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.time().replace(second=0, microsecond=0)
    if isinstance(value, time):
        return value
    if isinstance(value, bool):
        raise MalformedInputError(f"Jam tidak valid: {value!r}")
    if isinstance(value, int):
        if not (0 <= value < 24 * 60):
            raise OutOfRangeError(f"Menit dalam hari di luar jangkauan: {value!r}")
        return time(hour=value // 60, minute=value % 60)

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise MalformedInputError(f"Jam tidak valid: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise OutOfRangeError(f"Jam di luar jangkauan: {value!r}")
    return time(hour=hours, minute=minutes, second=seconds)


def format_clock(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else ""


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    validate_year_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in ``[start, end]``, ascending."""
    if end < start:
        raise DateRangeError(f"Rentang tanggal terbalik: {start} > {end}")
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
