from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import Clock, SystemClock, parse_iso_date
from ..common.validators import money_str, optional_text, require_id, require_int, require_non_negative_amount
from ..core.exceptions import NotFoundError, ValidationError
from ..stores.repository import StoreRepository
from .model import PaymentAmounts
from .repository import SalesRepository

logger = logging.getLogger(__name__)


def amounts_as_dict(amounts: PaymentAmounts) -> dict:
    return {
        "cash_amount": money_str(amounts.cash),
        "upi_amount": money_str(amounts.upi),
        "card_amount": money_str(amounts.card),
        "booking_amount": money_str(amounts.booking),
        "total_amount": money_str(amounts.total),
    }


@dataclass(frozen=True)
class RecordedSale:
    sale_id: int
    store_id: int
    store_name: Optional[str]
    sale_date: date
    amounts: PaymentAmounts
    total_customers: int

    def as_dict(self) -> dict:
        return {
            "sale_id": self.sale_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "sale_date": self.sale_date.isoformat(),
            **amounts_as_dict(self.amounts),
            "total_customers": self.total_customers,
        }


def parse_amounts(payload: Mapping[str, Any]) -> PaymentAmounts:
    return PaymentAmounts(
        cash=require_non_negative_amount(payload.get("cash_amount", 0), "cash_amount"),
        upi=require_non_negative_amount(payload.get("upi_amount", 0), "upi_amount"),
        card=require_non_negative_amount(payload.get("card_amount", 0), "card_amount"),
        booking=require_non_negative_amount(payload.get("booking_amount", 0), "booking_amount"),
    )


class SalesService:
    """Use case: write point-of-sale records into the store ledger."""

    def __init__(self, sales: SalesRepository, stores: StoreRepository, *, clock: Clock | None = None):
        self._sales = sales
        self._stores = stores
        self._clock = clock or SystemClock()

    def record_sale(self, *, user_id: int, payload: Mapping[str, Any]) -> RecordedSale:
        store_id = require_id(payload.get("store_id"), "store_id")
        store = self._stores.get_by_id(store_id)
        if not store:
            raise NotFoundError(f"Store {store_id} does not exist")

        amounts = parse_amounts(payload)
        customers = require_int(payload.get("total_customers", 1), "total_customers", minimum=1)

        now = self._clock.now()
        sale_time = self._parse_time(payload.get("sale_time"))
        if payload.get("sale_date"):
            sale_date = parse_iso_date(payload["sale_date"], "sale_date")
        else:
            sale_date = now.date()
            sale_time = sale_time or now.time().replace(microsecond=0)
        sale_datetime = datetime.combine(sale_date, sale_time) if sale_time else None

        sale_id = self._sales.create_sale(
            store_id=store_id,
            user_id=int(user_id),
            sale_date=sale_date,
            sale_time=sale_time,
            sale_datetime=sale_datetime,
            amounts=amounts,
            total_customers=customers,
            product_description=optional_text(payload.get("product_description")),
            notes=optional_text(payload.get("notes")),
        )
        logger.info("sale recorded sale_id=%s store_id=%s date=%s total=%s", sale_id, store_id, sale_date, amounts.total)
        return RecordedSale(
            sale_id=sale_id,
            store_id=store_id,
            store_name=store.store_name,
            sale_date=sale_date,
            amounts=amounts,
            total_customers=customers,
        )

    def update_sale_amounts(self, *, sale_id: int, payload: Mapping[str, Any]) -> PaymentAmounts:
        """Replace the payment-method amounts of a sale; the total is recomputed."""

        sale = self._sales.get_by_id(int(sale_id))
        if not sale:
            raise NotFoundError(f"Sale {sale_id} does not exist")

        merged = {
            "cash_amount": payload.get("cash_amount", sale.amounts.cash),
            "upi_amount": payload.get("upi_amount", sale.amounts.upi),
            "card_amount": payload.get("card_amount", sale.amounts.card),
            "booking_amount": payload.get("booking_amount", sale.amounts.booking),
        }
        amounts = parse_amounts(merged)
        if not self._sales.update_amounts(sale_id=sale.sale_id, amounts=amounts):
            raise NotFoundError(f"Sale {sale_id} does not exist")
        logger.info("sale amounts updated sale_id=%s total=%s", sale.sale_id, amounts.total)
        return amounts

    @staticmethod
    def _parse_time(value) -> Optional[time]:
        v = (value or "").strip() if isinstance(value, str) else value
        if not v:
            return None
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(v, fmt).time()
            except ValueError:
                continue
        raise ValidationError("sale_time must be HH:MM or HH:MM:SS")
