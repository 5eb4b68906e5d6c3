from __future__ import annotations

from abc import ABC, abstractmethod


class CashSalesScopeStrategy(ABC):
    """Strategy Pattern: which stores' cash sales count toward a register."""

    @abstractmethod
    def store_ids_for(self, store_id: int) -> tuple[int, ...]:
        raise NotImplementedError
