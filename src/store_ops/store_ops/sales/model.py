from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PaymentAmounts:
    cash: Decimal = Decimal("0")
    upi: Decimal = Decimal("0")
    card: Decimal = Decimal("0")
    booking: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.cash + self.upi + self.card + self.booking


@dataclass(frozen=True)
class SaleRecord:
    """Domain entity: one point-of-sale transaction."""

    sale_id: int
    store_id: int
    user_id: int
    sale_date: date
    sale_time: Optional[time]
    amounts: PaymentAmounts
    total_customers: int
    product_description: Optional[str] = None
    notes: Optional[str] = None

    @property
    def total_amount(self) -> Decimal:
        return self.amounts.total
