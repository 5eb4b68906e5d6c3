from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Collection, Optional, Protocol, Sequence

from .model import CashRegisterEntry, MonthlyRegisterRow


class CashRegisterRepository(Protocol):
    def get_for_store_and_date(self, store_id: int, register_date: date) -> Optional[CashRegisterEntry]:
        raise NotImplementedError

    def create_open(
        self,
        *,
        store_id: int,
        user_id: int,
        register_date: date,
        opening_cash: Decimal,
        opening_time: datetime,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        """Insert the day's register; None when one already exists for (store, date)."""

        raise NotImplementedError

    def reopen(self, *, register_id: int, opening_cash: Decimal, notes: Optional[str] = None) -> bool:
        """Overwrite the opening balance and append notes while the register is still open."""

        raise NotImplementedError

    def close_if_open(
        self,
        *,
        register_id: int,
        closing_cash: Decimal,
        calculated_cash: Decimal,
        cash_difference: Decimal,
        closing_time: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        """Atomic close: only succeeds while closing_cash is still NULL."""

        raise NotImplementedError

    def list_for_date(
        self, register_date: date, *, store_ids: Optional[Collection[int]] = None
    ) -> Sequence[CashRegisterEntry]:
        raise NotImplementedError

    def list_history(
        self,
        *,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int,
        offset: int,
    ) -> Sequence[CashRegisterEntry]:
        raise NotImplementedError

    def count_history(
        self,
        *,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_month(
        self,
        *,
        start_date: date,
        end_date: date,
        store_ids: Optional[Collection[int]] = None,
    ) -> Sequence[MonthlyRegisterRow]:
        raise NotImplementedError
