from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Collection, Optional, Protocol

from .model import PaymentAmounts, SaleRecord


class SalesRepository(Protocol):
    def create_sale(
        self,
        *,
        store_id: int,
        user_id: int,
        sale_date: date,
        sale_time: Optional[time],
        sale_datetime: Optional[datetime],
        amounts: PaymentAmounts,
        total_customers: int,
        product_description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, sale_id: int) -> Optional[SaleRecord]:
        raise NotImplementedError

    def update_amounts(self, *, sale_id: int, amounts: PaymentAmounts) -> bool:
        raise NotImplementedError

    def sum_cash(self, *, store_ids: Collection[int], sale_date: date) -> Decimal:
        """Sum of cash-method amounts across ``store_ids`` on ``sale_date`` (0 if none)."""

        raise NotImplementedError
