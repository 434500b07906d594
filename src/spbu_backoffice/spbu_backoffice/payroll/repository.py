from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollConfig, PayrollRecord


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_by_employee_store_month(self, *, employee_id: str, store_id: int, month: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_by_stores_and_month(self, *, store_ids: Sequence[int], month: str) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def create(self, record: PayrollRecord) -> PayrollRecord:
        """Insert a new record (version 1).

        Raises WriteConflictError when employee+store+month already exists.
        """

        raise NotImplementedError

    def update(self, record: PayrollRecord, *, expected_version: int) -> PayrollRecord:
        """Write every mutable field if the stored version still matches.

        Returns the stored record (version incremented). Raises
        WriteConflictError when another write got there first.
        """

        raise NotImplementedError


class PayrollConfigRepository(Protocol):
    def get(self) -> Optional[PayrollConfig]:
        raise NotImplementedError
