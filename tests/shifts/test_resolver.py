import json
from datetime import time

from src.spbu_backoffice.spbu_backoffice.shifts.model import DEFAULT_SHIFT_SCHEDULE, business_minutes
from src.spbu_backoffice.spbu_backoffice.shifts.resolver import ShiftScheduleResolver, parse_store_shifts, shift_key


class FakeStoreShiftRepo:
    def __init__(self, shifts_by_store):
        self._shifts = shifts_by_store

    def get_custom_shifts(self, store_id):
        return self._shifts.get(int(store_id))


def test_default_schedule_has_three_shifts():
    assert DEFAULT_SHIFT_SCHEDULE.keys() == ["pagi", "siang", "malam"]
    assert DEFAULT_SHIFT_SCHEDULE.is_default
    assert DEFAULT_SHIFT_SCHEDULE.get("malam").crosses_midnight
    assert not DEFAULT_SHIFT_SCHEDULE.get("pagi").crosses_midnight


def test_business_minutes_moves_early_hours_to_previous_day():
    assert business_minutes(time(3, 0)) == 0
    assert business_minutes(time(7, 0)) == 240
    assert business_minutes(time(0, 15)) == 21 * 60 + 15
    assert business_minutes(time(2, 59)) > business_minutes(time(23, 59))


def test_resolver_uses_store_shifts():
    raw = json.dumps(
        [
            {"name": "Pagi", "start": "06:00", "end": "14:00"},
            {"name": "Sore Hari", "start": "14:00", "end": "22:00"},
        ]
    )
    resolver = ShiftScheduleResolver(FakeStoreShiftRepo({1: raw}))

    schedule = resolver.resolve(1)

    assert schedule.keys() == ["pagi", "sore_hari"]
    assert schedule.get("pagi").start == time(6, 0)
    assert not schedule.is_default


def test_resolver_falls_back_to_default():
    resolver = ShiftScheduleResolver(FakeStoreShiftRepo({2: "not json", 3: "[]"}))

    assert resolver.resolve(None) is DEFAULT_SHIFT_SCHEDULE
    assert resolver.resolve(2) is DEFAULT_SHIFT_SCHEDULE
    assert resolver.resolve(3) is DEFAULT_SHIFT_SCHEDULE
    assert resolver.resolve(99) is DEFAULT_SHIFT_SCHEDULE


def test_invalid_entry_falls_back_to_default():
    assert parse_store_shifts([{"name": "pagi", "start": "25:00", "end": "08:00"}]) is None
    assert parse_store_shifts([{"name": "pagi"}]) is None


def test_shift_key_normalises_names():
    assert shift_key("  Shift Malam ") == "shift_malam"
