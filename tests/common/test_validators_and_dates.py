from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from src.store_ops.store_ops.common.datetime_utils import date_range, month_bounds, parse_iso_date, parse_iso_datetime
from src.store_ops.store_ops.common.validators import (
    money_str,
    optional_text,
    require_coordinate,
    require_int,
    require_non_negative_amount,
    to_decimal,
)
from src.store_ops.store_ops.core.exceptions import ValidationError


def test_to_decimal_accepts_json_floats_without_binary_noise():
    assert to_decimal(120.5, "amount") == Decimal("120.5")
    assert to_decimal(0.1, "amount") + to_decimal(0.2, "amount") == Decimal("0.3")


def test_to_decimal_rejects_more_than_two_places():
    with pytest.raises(ValidationError):
        to_decimal("1.234", "amount")


@pytest.mark.parametrize(
    "value, message",
    [
        ("1e30", "too large"),
        ("10000000000", "too large"),
        ("-1e10", "too large"),
        ("1e-30", "2 decimal places"),
    ],
)
def test_to_decimal_rejects_out_of_range_amounts(value, message):
    with pytest.raises(ValidationError, match=message):
        to_decimal(value, "amount")


def test_to_decimal_accepts_largest_column_value():
    assert to_decimal("9999999999.99", "amount") == Decimal("9999999999.99")


def test_negative_amount_rejected():
    with pytest.raises(ValidationError):
        require_non_negative_amount("-0.01", "opening_cash")


@pytest.mark.parametrize("value", [True, "1.5", "", None])
def test_require_int_rejects_non_integers(value):
    with pytest.raises(ValidationError):
        require_int(value, "page")


def test_coordinate_bounds():
    assert require_coordinate("-90", "latitude", limit=90) == Decimal("-90")
    with pytest.raises(ValidationError):
        require_coordinate("-90.0001", "latitude", limit=90)


def test_text_and_money_helpers():
    assert optional_text("  ") is None
    assert optional_text(" hi ") == "hi"
    assert money_str(Decimal("2.005")) == "2.01"
    assert money_str(None) is None


def test_parse_iso_date():
    assert parse_iso_date("2025-03-14") == date(2025, 3, 14)
    assert parse_iso_date(date(2025, 3, 14)) == date(2025, 3, 14)
    with pytest.raises(ValidationError):
        parse_iso_date("2025-02-30")


@pytest.mark.parametrize("value", ["2025-3-4", "25-03-04", "2025-03-04T00:00", "2025/03/04"])
def test_parse_iso_date_requires_zero_padded_form(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value, "register_date")


def test_parse_iso_datetime_naive_and_aware():
    assert parse_iso_datetime("2025-03-14T17:30:00") == datetime(2025, 3, 14, 17, 30)
    aware = parse_iso_datetime("2025-03-14T12:00:00Z")
    assert aware.tzinfo is None
    assert aware == datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday", "logout_time")


def test_date_range_is_inclusive():
    days = date_range(date(2025, 2, 27), date(2025, 3, 2))

    assert days == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1), date(2025, 3, 2)]
    assert date_range(date(2025, 3, 1), date(2025, 3, 1)) == [date(2025, 3, 1)]
    with pytest.raises(ValidationError):
        date_range(date(2025, 3, 2), date(2025, 3, 1))


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))
