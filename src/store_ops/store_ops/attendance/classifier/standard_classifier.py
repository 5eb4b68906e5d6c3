from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...core.constants import FULL_DAY_HOURS, SHORT_DAY_HOURS
from ...core.enums import DayStatus
from .base import DayClassifier


class StandardDayClassifier(DayClassifier):
    """Standard rule: >= 9h present, [8, 9) short hours, below 8h very short."""

    def __init__(self, *, full_day_hours: Decimal = FULL_DAY_HOURS, short_day_hours: Decimal = SHORT_DAY_HOURS):
        if short_day_hours > full_day_hours:
            raise ValueError("short_day_hours must not exceed full_day_hours")
        self._full = Decimal(full_day_hours)
        self._short = Decimal(short_day_hours)

    def classify(self, *, has_record: bool, has_logout: bool, hours: Optional[Decimal]) -> DayStatus:
        if not has_record:
            return DayStatus.ABSENT
        if not has_logout:
            return DayStatus.CLOCKED_IN_ONLY

        hours = hours or Decimal("0")
        if hours >= self._full:
            return DayStatus.PRESENT
        if hours >= self._short:
            return DayStatus.SHORT_HOURS
        return DayStatus.VERY_SHORT

    def missing_hours(self, hours: Decimal) -> Decimal:
        return max(Decimal("0"), self._full - hours)
