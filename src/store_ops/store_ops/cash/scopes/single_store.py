from __future__ import annotations

from .base import CashSalesScopeStrategy


class SingleStoreScope(CashSalesScopeStrategy):
    """Each register reconciles against its own store's cash sales."""

    def store_ids_for(self, store_id: int) -> tuple[int, ...]:
        return (int(store_id),)
