from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"


class DayStatus(str, Enum):
    """Per-day classification in the attendance matrix."""

    ABSENT = "absent"
    CLOCKED_IN_ONLY = "clocked_in_only"
    VERY_SHORT = "very_short"
    SHORT_HOURS = "short_hours"
    PRESENT = "present"

    @property
    def color(self) -> str:
        return _DAY_STATUS_COLORS[self]


_DAY_STATUS_COLORS = {
    DayStatus.ABSENT: "red",
    DayStatus.CLOCKED_IN_ONLY: "yellow",
    DayStatus.VERY_SHORT: "red",
    DayStatus.SHORT_HOURS: "orange",
    DayStatus.PRESENT: "green",
}


class SessionState(str, Enum):
    """Attendance state of a user on one date."""

    NOT_CLOCKED_IN = "not_clocked_in"
    CLOCKED_IN = "clocked_in"
    CLOCKED_OUT = "clocked_out"


class CashSalesScope(str, Enum):
    """Which stores' cash sales feed a register's expected cash."""

    STORE = "store"
    SHARED_TILL = "shared_till"


class ReopenPolicy(str, Enum):
    """What a repeated open of the same (store, date) does."""

    UPDATE = "update"
    REJECT = "reject"
