from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_range(self, *, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Persisted rows for one employee with ``start <= work_date <= end``."""

        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> str:
        """Create or update the row keyed by employee + work_date.

        Returns attendance_id.
        """

        raise NotImplementedError
