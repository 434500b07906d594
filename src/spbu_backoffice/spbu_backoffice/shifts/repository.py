from __future__ import annotations

from typing import Optional, Protocol


class StoreShiftRepository(Protocol):
    def get_custom_shifts(self, store_id: int) -> Optional[str]:
        """Raw JSON array ``[{name, start, end}]`` configured for a store, if any."""

        raise NotImplementedError
