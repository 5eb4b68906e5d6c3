from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ...core.enums import DayStatus


class DayClassifier(ABC):
    """Classifier interface (Strategy Pattern for per-day attendance status)."""

    @abstractmethod
    def classify(self, *, has_record: bool, has_logout: bool, hours: Optional[Decimal]) -> DayStatus:
        raise NotImplementedError

    @abstractmethod
    def missing_hours(self, hours: Decimal) -> Decimal:
        raise NotImplementedError
