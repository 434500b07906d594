from __future__ import annotations

import json
import logging
import re
from typing import Optional

from ..common.datetime_utils import parse_clock
from ..core.exceptions import ValidationError
from .model import DEFAULT_SHIFT_SCHEDULE, ShiftSchedule, ShiftWindow
from .repository import StoreShiftRepository

logger = logging.getLogger(__name__)


def shift_key(name: str) -> str:
    """Normalise a store-configured shift name into a schedule key."""
    return re.sub(r"\s+", "_", name.strip().lower())


def parse_store_shifts(raw) -> Optional[ShiftSchedule]:
    """Parse a store's custom shift configuration.

    Accepts the JSON text stored on the store row or an already-decoded list
    of ``{name, start, end}`` objects. Returns None when there is nothing
    usable so the caller can fall back to the default schedule.
    """

    if not raw:
        return None

    try:
        entries = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except ValueError:
        logger.warning("Store shifts are not valid JSON, using default schedule")
        return None

    if not isinstance(entries, list) or not entries:
        return None

    windows = []
    for entry in entries:
        try:
            start = parse_clock(entry["start"])
            end = parse_clock(entry["end"])
            key = shift_key(str(entry["name"]))
        except (KeyError, TypeError, ValidationError):
            logger.warning("Invalid store shift entry %r, using default schedule", entry)
            return None
        if not key or start is None or end is None:
            logger.warning("Incomplete store shift entry %r, using default schedule", entry)
            return None
        windows.append(ShiftWindow(key=key, start=start, end=end))

    return ShiftSchedule.from_windows(windows)


class ShiftScheduleResolver:
    """Resolve the shift schedule that applies to a store.

    Absence of a custom schedule is not an error, it selects the default.
    """

    def __init__(self, stores: Optional[StoreShiftRepository] = None, *, default: ShiftSchedule = DEFAULT_SHIFT_SCHEDULE):
        self._stores = stores
        self._default = default

    @property
    def default(self) -> ShiftSchedule:
        return self._default

    def resolve(self, store_id: Optional[int] = None) -> ShiftSchedule:
        if store_id is None or self._stores is None:
            return self._default

        schedule = parse_store_shifts(self._stores.get_custom_shifts(int(store_id)))
        if schedule is None:
            return self._default
        return schedule
