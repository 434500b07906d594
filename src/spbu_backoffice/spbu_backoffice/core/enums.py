from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk otorisasi."""

    STAFF = "staff"
    MANAGER = "manager"
    ADMINISTRASI = "administrasi"


EDITOR_ROLES = frozenset({Role.MANAGER, Role.ADMINISTRASI})


class AttendanceStatus(str, Enum):
    """Status kehadiran harian yang disimpan di basis data."""

    HADIR = "hadir"
    CUTI = "cuti"
    IZIN = "izin"
    SAKIT = "sakit"
    ALPHA = "alpha"
    BELUM_DIATUR = "belum_diatur"


class SuggestionKind(str, Enum):
    BONUS = "bonus"
    DEDUCTION = "deduction"


class SuggestionSource(str, Enum):
    """Anomaly a suggestion was derived from."""

    EARLY_ARRIVAL = "early_arrival"
    LATE_DEPARTURE = "late_departure"
    LATENESS = "lateness"
    EARLY_LEAVE = "early_leave"
    ALPHA = "alpha"


class PayrollStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
