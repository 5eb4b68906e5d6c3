from __future__ import annotations

from typing import Iterable

from .base import CashSalesScopeStrategy


class SharedTillScope(CashSalesScopeStrategy):
    """One physical till serves a fixed set of stores.

    Every register in the set reconciles against the cash sales of all of them.
    A store outside the set falls back to its own sales.
    """

    def __init__(self, store_ids: Iterable[int]):
        self._store_ids = tuple(sorted({int(s) for s in store_ids}))
        if not self._store_ids:
            raise ValueError("SharedTillScope needs at least one store id")

    @property
    def store_ids(self) -> tuple[int, ...]:
        return self._store_ids

    def store_ids_for(self, store_id: int) -> tuple[int, ...]:
        if int(store_id) in self._store_ids:
            return self._store_ids
        return (int(store_id),)
