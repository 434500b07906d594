from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..core.constants import DAY_RESET_HOUR, DEFAULT_SHIFT_KEY, MINUTES_PER_DAY


def business_minutes(value: time) -> int:
    """Minutes since the 03:00 business-day reset (00:00-02:59 count as +24h)."""

    total = value.hour * 60 + value.minute
    if value.hour < DAY_RESET_HOUR:
        total += MINUTES_PER_DAY
    return total - DAY_RESET_HOUR * 60


@dataclass(frozen=True)
class ShiftWindow:
    """Entitas domain: satu shift kerja (mis. pagi 07:00-15:00)."""

    key: str
    start: time
    end: time

    @property
    def crosses_midnight(self) -> bool:
        return business_minutes(self.end) <= business_minutes(self.start)

    def to_dict(self) -> dict:
        return {"key": self.key, "start": f"{self.start:%H:%M}", "end": f"{self.end:%H:%M}"}


@dataclass(frozen=True)
class ShiftSchedule:
    """Ordered, read-only mapping of shift key -> window for one store."""

    windows: Mapping[str, ShiftWindow] = field(default_factory=dict)
    is_default: bool = False

    def __post_init__(self):
        object.__setattr__(self, "windows", MappingProxyType(dict(self.windows)))

    @classmethod
    def from_windows(cls, windows, *, is_default: bool = False) -> "ShiftSchedule":
        return cls(windows={w.key: w for w in windows}, is_default=is_default)

    def get(self, key: Optional[str]) -> Optional[ShiftWindow]:
        if not key:
            return None
        return self.windows.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.windows

    def __iter__(self) -> Iterator[ShiftWindow]:
        return iter(self.windows.values())

    def __len__(self) -> int:
        return len(self.windows)

    def keys(self) -> list[str]:
        return list(self.windows)

    @property
    def first_key(self) -> str:
        return next(iter(self.windows), DEFAULT_SHIFT_KEY)

    def to_list(self) -> list[dict]:
        return [w.to_dict() for w in self]


DEFAULT_SHIFT_SCHEDULE = ShiftSchedule.from_windows(
    [
        ShiftWindow("pagi", time(7, 0), time(15, 0)),
        ShiftWindow("siang", time(15, 0), time(23, 0)),
        ShiftWindow("malam", time(23, 0), time(7, 0)),
    ],
    is_default=True,
)
