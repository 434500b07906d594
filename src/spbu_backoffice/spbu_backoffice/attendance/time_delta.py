"""Time-delta calculator: lateness, early arrival and overtime in minutes.

All clock values are placed on the business-day timeline (see
``shifts.model.business_minutes``) before comparing, so a night-shift
check-in at 00:15 counts as 75 minutes late against a 23:00 start.

Missing clock values and unknown shift keys yield 0, never an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import parse_clock
from ..core.constants import MINUTES_PER_DAY
from ..shifts.model import DEFAULT_SHIFT_SCHEDULE, ShiftSchedule, ShiftWindow, business_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeDeltas:
    lateness_minutes: int = 0
    early_arrival_minutes: int = 0
    overtime_minutes: int = 0


def _clock_minutes(value) -> Optional[int]:
    clock = parse_clock(value)
    if clock is None:
        return None
    return business_minutes(clock)


def _window(shift: Optional[str], schedule: Optional[ShiftSchedule]) -> Optional[ShiftWindow]:
    schedule = schedule or DEFAULT_SHIFT_SCHEDULE
    window = schedule.get(shift)
    if window is None and shift:
        logger.warning("Shift %r not found in schedule %s, using 0 minutes", shift, schedule.keys())
    return window


def detect_shift(check_in, schedule: Optional[ShiftSchedule] = None) -> Optional[str]:
    """Guess the shift for a check-in when none was chosen.

    Picks the shift whose start is closest to the check-in; earlier shifts
    win ties. Returns None for an empty check-in.
    """

    schedule = schedule or DEFAULT_SHIFT_SCHEDULE
    check_in_minutes = _clock_minutes(check_in)
    if check_in_minutes is None:
        return None

    closest: Optional[str] = None
    best = None
    for window in schedule:
        difference = abs(check_in_minutes - business_minutes(window.start))
        if best is None or difference < best:
            best = difference
            closest = window.key
    return closest or schedule.first_key


def lateness(check_in, shift: Optional[str], schedule: Optional[ShiftSchedule] = None) -> int:
    window = _window(shift, schedule)
    check_in_minutes = _clock_minutes(check_in)
    if window is None or check_in_minutes is None:
        return 0
    return max(0, check_in_minutes - business_minutes(window.start))


def early_arrival(check_in, shift: Optional[str], schedule: Optional[ShiftSchedule] = None) -> int:
    window = _window(shift, schedule)
    check_in_minutes = _clock_minutes(check_in)
    if window is None or check_in_minutes is None:
        return 0
    return max(0, business_minutes(window.start) - check_in_minutes)


def overtime(check_out, shift: Optional[str], schedule: Optional[ShiftSchedule] = None) -> int:
    window = _window(shift, schedule)
    check_out_minutes = _clock_minutes(check_out)
    if window is None or check_out_minutes is None:
        return 0

    start = business_minutes(window.start)
    end = business_minutes(window.end)
    if window.crosses_midnight:
        end += MINUTES_PER_DAY
        if check_out_minutes < start:
            check_out_minutes += MINUTES_PER_DAY
    return max(0, check_out_minutes - end)


def compute_deltas(check_in, check_out, shift: Optional[str], schedule: Optional[ShiftSchedule] = None) -> TimeDeltas:
    return TimeDeltas(
        lateness_minutes=lateness(check_in, shift, schedule),
        early_arrival_minutes=early_arrival(check_in, shift, schedule),
        overtime_minutes=overtime(check_out, shift, schedule),
    )


def working_minutes(check_in, check_out) -> Optional[int]:
    """Minutes between check-in and check-out, wrapping past midnight.

    None when either side is missing (not evaluable).
    """

    start = parse_clock(check_in)
    end = parse_clock(check_out)
    if start is None or end is None:
        return None
    start_minutes = start.hour * 60 + start.minute
    end_minutes = end.hour * 60 + end.minute
    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY
    return end_minutes - start_minutes
