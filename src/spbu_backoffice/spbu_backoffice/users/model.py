from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Entitas domain: karyawan pada roster toko.

    Catatan: objek data murni (tanpa kode akses DB).
    """

    employee_id: str
    name: str
    role: Role
    store_ids: tuple[int, ...] = ()
    base_salary: Optional[int] = None

    @property
    def assigned_store_id(self) -> Optional[int]:
        return self.store_ids[0] if self.store_ids else None

    def works_at(self, store_id: int) -> bool:
        return int(store_id) in self.store_ids
