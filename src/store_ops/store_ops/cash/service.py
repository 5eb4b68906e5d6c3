from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import Clock, SystemClock, month_bounds, parse_iso_date
from ..common.validators import optional_text, require_id, require_int, require_non_negative_amount
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT, MAX_REPORT_YEAR, MIN_REPORT_YEAR
from ..core.enums import ReopenPolicy
from ..core.exceptions import (
    AlreadyClosedError,
    AlreadyOpenedConflict,
    AuthorizationError,
    NotFoundError,
    NotOpenedError,
    ValidationError,
)
from ..sales.repository import SalesRepository
from ..stores.repository import StoreRepository
from ..users.model import User
from .model import (
    CashRegisterEntry,
    CloseResult,
    HistoryPage,
    MonthlyReport,
    OpenResult,
    RegisterStatus,
    join_notes,
)
from .repository import CashRegisterRepository
from .scopes.base import CashSalesScopeStrategy
from .scopes.single_store import SingleStoreScope
from .statistics import summarize_month

logger = logging.getLogger(__name__)


class CashRegisterService:
    """Daily open/close lifecycle of store cash registers and their reconciliation.

    Expected cash is ``opening + cash sales`` where the set of stores whose
    cash sales count is decided by ``scope``. Variance is ``closing - expected``.
    All arithmetic is exact ``Decimal``.
    """

    def __init__(
        self,
        registers: CashRegisterRepository,
        sales: SalesRepository,
        stores: StoreRepository,
        *,
        scope: CashSalesScopeStrategy | None = None,
        reopen_policy: ReopenPolicy = ReopenPolicy.UPDATE,
        clock: Clock | None = None,
    ):
        self._registers = registers
        self._sales = sales
        self._stores = stores
        self._scope = scope or SingleStoreScope()
        self._reopen_policy = ReopenPolicy(reopen_policy)
        self._clock = clock or SystemClock()

    # ----- lifecycle -----

    def open_register(
        self,
        *,
        user_id: int,
        store_id: Any,
        register_date: Any,
        opening_cash: Any,
        notes: Optional[str] = None,
    ) -> OpenResult:
        store_id = require_id(store_id, "store_id")
        register_date = self._date_or_today(register_date)
        opening_cash = require_non_negative_amount(opening_cash, "opening_cash")
        notes = optional_text(notes)

        store = self._stores.get_by_id(store_id)
        if not store:
            raise NotFoundError(f"Store {store_id} does not exist")

        existing = self._registers.get_for_store_and_date(store_id, register_date)
        if existing is None:
            register_id = self._registers.create_open(
                store_id=store_id,
                user_id=int(user_id),
                register_date=register_date,
                opening_cash=opening_cash,
                opening_time=self._clock.now(),
                notes=notes,
            )
            if register_id is not None:
                logger.info(
                    "register opened register_id=%s store_id=%s date=%s opening=%s",
                    register_id, store_id, register_date, opening_cash,
                )
                return OpenResult(
                    register_id=register_id,
                    store_id=store_id,
                    store_name=store.store_name,
                    register_date=register_date,
                    opening_cash=opening_cash,
                    notes=notes,
                )
            # lost the insert race to a concurrent open of the same day
            existing = self._registers.get_for_store_and_date(store_id, register_date)
            if existing is None:
                raise NotOpenedError(store_id, register_date)

        raise self._reopen(existing, opening_cash=opening_cash, notes=notes, store_name=store.store_name)

    def _reopen(
        self, existing: CashRegisterEntry, *, opening_cash: Decimal, notes: Optional[str], store_name: str
    ) -> AlreadyOpenedConflict:
        """Apply the re-open policy; returns the conflict for the caller to raise."""
        if existing.is_closed:
            raise AlreadyClosedError(existing.store_id, existing.register_date)

        if self._reopen_policy == ReopenPolicy.REJECT:
            return AlreadyOpenedConflict(self._open_result(existing, store_name), updated=False)

        if not self._registers.reopen(register_id=existing.register_id, opening_cash=opening_cash, notes=notes):
            raise AlreadyClosedError(existing.store_id, existing.register_date)

        logger.info(
            "register re-opened register_id=%s store_id=%s date=%s opening=%s",
            existing.register_id, existing.store_id, existing.register_date, opening_cash,
        )
        result = OpenResult(
            register_id=existing.register_id,
            store_id=existing.store_id,
            store_name=store_name,
            register_date=existing.register_date,
            opening_cash=opening_cash,
            notes=join_notes(existing.notes, notes),
        )
        return AlreadyOpenedConflict(result, updated=True)

    @staticmethod
    def _open_result(entry: CashRegisterEntry, store_name: str) -> OpenResult:
        return OpenResult(
            register_id=entry.register_id,
            store_id=entry.store_id,
            store_name=entry.store_name or store_name,
            register_date=entry.register_date,
            opening_cash=entry.opening_cash,
            notes=entry.notes,
        )

    def close_register(
        self,
        *,
        store_id: Any,
        register_date: Any,
        closing_cash: Any,
        notes: Optional[str] = None,
    ) -> CloseResult:
        store_id = require_id(store_id, "store_id")
        register_date = self._date_or_today(register_date)
        closing_cash = require_non_negative_amount(closing_cash, "closing_cash")
        notes = optional_text(notes)

        entry = self._registers.get_for_store_and_date(store_id, register_date)
        if entry is None:
            raise NotOpenedError(store_id, register_date)
        if entry.is_closed:
            raise AlreadyClosedError(store_id, register_date)

        cash_sales = self.cash_sales_for(store_id, register_date)
        expected = entry.opening_cash + cash_sales
        variance = closing_cash - expected

        closed = self._registers.close_if_open(
            register_id=entry.register_id,
            closing_cash=closing_cash,
            calculated_cash=expected,
            cash_difference=variance,
            closing_time=self._clock.now(),
            notes=notes,
        )
        if not closed:
            raise AlreadyClosedError(store_id, register_date)

        logger.info(
            "register closed register_id=%s store_id=%s date=%s expected=%s closing=%s variance=%s",
            entry.register_id, store_id, register_date, expected, closing_cash, variance,
        )
        store_name = entry.store_name
        if store_name is None:
            store = self._stores.get_by_id(store_id)
            store_name = store.store_name if store else None

        return CloseResult(
            register_id=entry.register_id,
            store_id=store_id,
            store_name=store_name,
            register_date=register_date,
            opening_cash=entry.opening_cash,
            closing_cash=closing_cash,
            cash_sales_sum=cash_sales,
            expected_cash=expected,
            variance=variance,
        )

    def cash_sales_for(self, store_id: int, register_date: date) -> Decimal:
        return self._sales.sum_cash(store_ids=self._scope.store_ids_for(store_id), sale_date=register_date)

    # ----- reads -----

    def visible_store_ids(self, viewer: User) -> Optional[list[int]]:
        """None means every store."""
        if not viewer.is_store_restricted:
            return None
        return [int(s) for s in self._stores.list_ids_by_type(viewer.assigned_store)]

    def _scoped_store_ids(self, viewer: User, store_id: Optional[int]) -> Optional[list[int]]:
        visible = self.visible_store_ids(viewer)
        if store_id is None:
            return visible
        if visible is not None and store_id not in visible:
            raise AuthorizationError("You are not authorized to view this store")
        return [store_id]

    def get_status(self, *, viewer: User, register_date: Any, store_id: Any = None) -> list[RegisterStatus]:
        if not register_date:
            raise ValidationError("Date parameter is required")
        register_date = parse_iso_date(register_date)
        store_id = require_id(store_id, "store_id") if store_id else None

        entries = self._registers.list_for_date(register_date, store_ids=self._scoped_store_ids(viewer, store_id))
        return [RegisterStatus(entry=e, cash_sales_today=self.cash_sales_for(e.store_id, register_date)) for e in entries]

    def history(
        self,
        *,
        store_id: Any = None,
        start_date: Any = None,
        end_date: Any = None,
        page: Any = 1,
        limit: Any = DEFAULT_HISTORY_LIMIT,
    ) -> HistoryPage:
        store_id = require_id(store_id, "store_id") if store_id else None
        start = parse_iso_date(start_date, "start_date") if start_date else None
        end = parse_iso_date(end_date, "end_date") if end_date else None
        if start and end and end < start:
            raise ValidationError("start_date must not be after end_date")
        page = require_int(page, "page", minimum=1)
        limit = require_int(limit, "limit", minimum=1, maximum=MAX_HISTORY_LIMIT)

        registers = self._registers.list_history(
            store_id=store_id,
            start_date=start,
            end_date=end,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = self._registers.count_history(store_id=store_id, start_date=start, end_date=end)
        return HistoryPage(registers=list(registers), page=page, limit=limit, total=total)

    def monthly_report(self, *, viewer: User, year: Any, month: Any, store_id: Any = None) -> MonthlyReport:
        if not year or not month:
            raise ValidationError("Year and month parameters are required")
        year = require_int(year, "year", minimum=MIN_REPORT_YEAR, maximum=MAX_REPORT_YEAR)
        month = require_int(month, "month", minimum=1, maximum=12)
        store_id = require_id(store_id, "store_id") if store_id else None

        start, end = month_bounds(year, month)
        rows = list(
            self._registers.list_for_month(
                start_date=start, end_date=end, store_ids=self._scoped_store_ids(viewer, store_id)
            )
        )

        return MonthlyReport(
            year=year,
            month=month,
            start_date=start,
            end_date=end,
            registers=rows,
            statistics=summarize_month(rows),
        )

    def _date_or_today(self, value: Any) -> date:
        if not value:
            return self._clock.now().date()
        return parse_iso_date(value, "register_date")
