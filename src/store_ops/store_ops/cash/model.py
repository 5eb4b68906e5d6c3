from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.validators import money_str
from ..core.constants import NOTES_SEPARATOR


def join_notes(existing: Optional[str], addition: Optional[str]) -> Optional[str]:
    """Append-only notes, same semantics as ``CONCAT_WS(' | ', notes, ?)``."""
    parts = [p for p in (existing, addition) if p is not None]
    return NOTES_SEPARATOR.join(parts) if parts else None


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class CashRegisterEntry:
    """Domain entity: one store's cash drawer for one calendar date."""

    register_id: int
    store_id: int
    user_id: int
    register_date: date
    opening_cash: Decimal
    opening_time: datetime
    closing_cash: Optional[Decimal] = None
    calculated_cash: Optional[Decimal] = None
    cash_difference: Optional[Decimal] = None
    closing_time: Optional[datetime] = None
    notes: Optional[str] = None
    store_name: Optional[str] = None
    opened_by_name: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.closing_cash is not None

    def as_dict(self) -> dict:
        return {
            "register_id": self.register_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "user_id": self.user_id,
            "opened_by_name": self.opened_by_name,
            "register_date": self.register_date.isoformat(),
            "opening_cash": money_str(self.opening_cash),
            "closing_cash": money_str(self.closing_cash),
            "calculated_cash": money_str(self.calculated_cash),
            "cash_difference": money_str(self.cash_difference),
            "opening_time": _iso(self.opening_time),
            "closing_time": _iso(self.closing_time),
            "notes": self.notes,
            "status": "closed" if self.is_closed else "open",
        }


@dataclass(frozen=True)
class OpenResult:
    register_id: int
    store_id: int
    store_name: Optional[str]
    register_date: date
    opening_cash: Decimal
    notes: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "register_id": self.register_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "date": self.register_date.isoformat(),
            "opening_cash": money_str(self.opening_cash),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CloseResult:
    register_id: int
    store_id: int
    store_name: Optional[str]
    register_date: date
    opening_cash: Decimal
    closing_cash: Decimal
    cash_sales_sum: Decimal
    expected_cash: Decimal
    variance: Decimal

    @property
    def is_perfect_match(self) -> bool:
        return self.variance == 0

    def as_dict(self) -> dict:
        return {
            "register_id": self.register_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "date": self.register_date.isoformat(),
            "opening_cash": money_str(self.opening_cash),
            "closing_cash": money_str(self.closing_cash),
            "total_cash_sales": money_str(self.cash_sales_sum),
            "calculated_cash": money_str(self.expected_cash),
            "cash_difference": money_str(self.variance),
        }


@dataclass(frozen=True)
class RegisterStatus:
    """Register plus the live cash-sales figure for its date."""

    entry: CashRegisterEntry
    cash_sales_today: Decimal

    @property
    def expected_cash_preview(self) -> Decimal:
        return self.entry.opening_cash + self.cash_sales_today

    def as_dict(self) -> dict:
        data = self.entry.as_dict()
        data["cash_sales_today"] = money_str(self.cash_sales_today)
        data["expected_cash_preview"] = None if self.entry.is_closed else money_str(self.expected_cash_preview)
        return data


@dataclass(frozen=True)
class MonthlyRegisterRow:
    """Read-model for the monthly report: register + store type + that store's cash sales."""

    entry: CashRegisterEntry
    store_type: Optional[str]
    total_cash_sales: Decimal

    def as_dict(self) -> dict:
        data = self.entry.as_dict()
        data["store_type"] = self.store_type
        data["total_cash_sales"] = money_str(self.total_cash_sales)
        return data


@dataclass(frozen=True)
class RegisterTotals:
    total_opening_cash: Decimal = Decimal("0")
    total_closing_cash: Decimal = Decimal("0")
    total_calculated_cash: Decimal = Decimal("0")
    total_cash_difference: Decimal = Decimal("0")
    total_cash_sales: Decimal = Decimal("0")
    days_opened: int = 0
    days_closed: int = 0
    perfect_matches: int = 0
    variances: int = 0

    def as_dict(self) -> dict:
        return {
            "total_opening_cash": money_str(self.total_opening_cash),
            "total_closing_cash": money_str(self.total_closing_cash),
            "total_calculated_cash": money_str(self.total_calculated_cash),
            "total_cash_difference": money_str(self.total_cash_difference),
            "total_cash_sales": money_str(self.total_cash_sales),
            "days_opened": self.days_opened,
            "days_closed": self.days_closed,
            "perfect_matches": self.perfect_matches,
            "variances": self.variances,
        }


@dataclass(frozen=True)
class MonthlyStatistics:
    overall: RegisterTotals
    store_breakdown: Mapping[str, RegisterTotals] = field(default_factory=dict)

    @property
    def average_opening_cash(self) -> Decimal:
        if not self.overall.days_opened:
            return Decimal("0")
        return self.overall.total_opening_cash / self.overall.days_opened

    @property
    def average_cash_difference(self) -> Decimal:
        if not self.overall.days_closed:
            return Decimal("0")
        return self.overall.total_cash_difference / self.overall.days_closed

    def as_dict(self) -> dict:
        data = self.overall.as_dict()
        data["average_opening_cash"] = money_str(self.average_opening_cash)
        data["average_cash_difference"] = money_str(self.average_cash_difference)
        data["store_breakdown"] = {k: v.as_dict() for k, v in sorted(self.store_breakdown.items())}
        return data


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    start_date: date
    end_date: date
    registers: Sequence[MonthlyRegisterRow]
    statistics: MonthlyStatistics

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def as_dict(self) -> dict:
        return {
            "month": f"{self.year:04d}-{self.month:02d}",
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "data": [r.as_dict() for r in self.registers],
            "statistics": self.statistics.as_dict(),
        }


@dataclass(frozen=True)
class HistoryPage:
    registers: Sequence[CashRegisterEntry]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0

    def as_dict(self) -> dict:
        return {
            "data": [r.as_dict() for r in self.registers],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "pages": self.pages,
            },
        }
