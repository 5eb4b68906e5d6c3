"""Monthly register statistics as a pure fold over fetched rows."""

from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import Iterable

from .model import MonthlyRegisterRow, MonthlyStatistics, RegisterTotals

UNKNOWN_STORE_TYPE = "unknown"


def add_row(totals: RegisterTotals, row: MonthlyRegisterRow) -> RegisterTotals:
    entry = row.entry
    closed = entry.is_closed
    difference = entry.cash_difference or 0

    return replace(
        totals,
        total_opening_cash=totals.total_opening_cash + entry.opening_cash,
        total_closing_cash=totals.total_closing_cash + (entry.closing_cash or 0),
        total_calculated_cash=totals.total_calculated_cash + (entry.calculated_cash or 0),
        total_cash_difference=totals.total_cash_difference + difference,
        total_cash_sales=totals.total_cash_sales + row.total_cash_sales,
        days_opened=totals.days_opened + 1,
        days_closed=totals.days_closed + (1 if closed else 0),
        perfect_matches=totals.perfect_matches + (1 if closed and difference == 0 else 0),
        variances=totals.variances + (1 if closed and difference != 0 else 0),
    )


def _fold(stats: MonthlyStatistics, row: MonthlyRegisterRow) -> MonthlyStatistics:
    store_type = row.store_type or UNKNOWN_STORE_TYPE
    breakdown = dict(stats.store_breakdown)
    breakdown[store_type] = add_row(breakdown.get(store_type, RegisterTotals()), row)
    return MonthlyStatistics(overall=add_row(stats.overall, row), store_breakdown=breakdown)


def summarize_month(rows: Iterable[MonthlyRegisterRow]) -> MonthlyStatistics:
    return reduce(_fold, rows, MonthlyStatistics(overall=RegisterTotals()))
