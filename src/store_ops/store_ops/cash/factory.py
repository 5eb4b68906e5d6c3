from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..core.constants import DEFAULT_SHARED_TILL_STORE_IDS
from ..core.enums import CashSalesScope
from .scopes.base import CashSalesScopeStrategy
from .scopes.shared_till import SharedTillScope
from .scopes.single_store import SingleStoreScope


@dataclass
class CashSalesScopeFactory:
    """Factory Pattern: choose the cash-sales scope from configuration."""

    shared_till_store_ids: Iterable[int] = DEFAULT_SHARED_TILL_STORE_IDS

    def for_scope(self, scope: CashSalesScope | str) -> CashSalesScopeStrategy:
        scope = CashSalesScope(scope)
        if scope == CashSalesScope.SHARED_TILL:
            return SharedTillScope(self.shared_till_store_ids)
        return SingleStoreScope()
