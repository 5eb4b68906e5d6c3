from datetime import date, datetime
from decimal import Decimal

from src.store_ops.store_ops.cash.model import CashRegisterEntry, MonthlyRegisterRow
from src.store_ops.store_ops.cash.statistics import summarize_month


def _row(register_id, store_type, opening, closing=None, expected=None, sales="0"):
    entry = CashRegisterEntry(
        register_id=register_id,
        store_id=register_id,
        user_id=1,
        register_date=date(2025, 3, register_id),
        opening_cash=Decimal(opening),
        opening_time=datetime(2025, 3, register_id, 9, 0),
        closing_cash=Decimal(closing) if closing is not None else None,
        calculated_cash=Decimal(expected) if expected is not None else None,
        cash_difference=Decimal(closing) - Decimal(expected) if closing is not None else None,
    )
    return MonthlyRegisterRow(entry=entry, store_type=store_type, total_cash_sales=Decimal(sales))


def test_empty_month_has_zero_totals_and_averages():
    stats = summarize_month([])

    assert stats.overall.days_opened == 0
    assert stats.average_opening_cash == Decimal("0")
    assert stats.average_cash_difference == Decimal("0")
    assert stats.store_breakdown == {}


def test_fold_counts_matches_variances_and_open_days():
    rows = [
        _row(1, "arcade", "500", closing="700", expected="700", sales="200"),
        _row(2, "arcade", "300", closing="290", expected="300"),
        _row(3, "booking", "100"),
    ]

    stats = summarize_month(rows)

    assert stats.overall.days_opened == 3
    assert stats.overall.days_closed == 2
    assert stats.overall.perfect_matches == 1
    assert stats.overall.variances == 1
    assert stats.overall.total_opening_cash == Decimal("900")
    assert stats.overall.total_cash_difference == Decimal("-10")
    assert stats.overall.total_cash_sales == Decimal("200")
    assert stats.average_opening_cash == Decimal("300")
    assert stats.average_cash_difference == Decimal("-5")
    assert stats.store_breakdown["arcade"].days_opened == 2
    assert stats.store_breakdown["booking"].days_closed == 0


def test_rows_without_store_type_are_grouped_as_unknown():
    stats = summarize_month([_row(1, None, "10")])

    assert stats.store_breakdown["unknown"].days_opened == 1


def test_statistics_serialise_two_decimal_places():
    stats = summarize_month([_row(1, "arcade", "100", closing="100.5", expected="100")])

    data = stats.as_dict()

    assert data["total_cash_difference"] == "0.50"
    assert data["average_opening_cash"] == "100.00"
    assert data["store_breakdown"]["arcade"]["variances"] == 1
