from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.store_ops.store_ops.cash.scopes.shared_till import SharedTillScope
from src.store_ops.store_ops.cash.service import CashRegisterService
from src.store_ops.store_ops.common.datetime_utils import FixedClock
from src.store_ops.store_ops.core.enums import ReopenPolicy, Role
from src.store_ops.store_ops.core.exceptions import (
    AlreadyClosedError,
    AlreadyOpenedConflict,
    AuthorizationError,
    NotFoundError,
    NotOpenedError,
    ValidationError,
)
from src.store_ops.store_ops.users.model import User
from tests.fakes import InMemoryCashRegisters, InMemorySales, InMemoryStores

DAY = date(2025, 3, 14)
ADMIN = User(user_id=1, full_name="Admin", username="admin", role=Role.ADMIN)
ARCADE_STAFF = User(user_id=3, full_name="Asha", username="asha", role=Role.STAFF, assigned_store="arcade")


def _make(*, scope=None, reopen_policy=ReopenPolicy.UPDATE):
    stores = InMemoryStores()
    sales = InMemorySales()
    registers = InMemoryCashRegisters(stores, sales)
    service = CashRegisterService(
        registers,
        sales,
        stores,
        scope=scope,
        reopen_policy=reopen_policy,
        clock=FixedClock(datetime(2025, 3, 14, 9, 0)),
    )
    return service, registers, sales


def test_open_sell_close_reconciles_exactly():
    service, registers, sales = _make()

    opened = service.open_register(user_id=3, store_id=1, register_date="2025-03-14", opening_cash="500.00")
    sales.add_cash(1, DAY, "120.50")
    sales.add_cash(1, DAY, "79.50")
    closed = service.close_register(store_id=1, register_date="2025-03-14", closing_cash="700.00")

    assert opened.store_name == "Arcade"
    assert closed.cash_sales_sum == Decimal("200.00")
    assert closed.expected_cash == Decimal("700.00")
    assert closed.variance == Decimal("0")
    assert closed.is_perfect_match

    report = service.monthly_report(viewer=ADMIN, year=2025, month=3)
    assert report.statistics.overall.perfect_matches == 1
    assert report.statistics.overall.variances == 0
    assert report.total_days == 31


def test_close_reports_shortage_as_negative_variance():
    service, _, sales = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash=100)
    sales.add_cash(1, DAY, "50")

    closed = service.close_register(store_id=1, register_date=DAY, closing_cash="140.25")

    assert closed.expected_cash == Decimal("150")
    assert closed.variance == Decimal("-9.75")
    assert closed.as_dict()["cash_difference"] == "-9.75"


def test_repeat_open_updates_balance_and_appends_notes():
    service, registers, _ = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="500", notes="float from safe")

    with pytest.raises(AlreadyOpenedConflict) as exc:
        service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="450", notes="recount")

    assert exc.value.updated is True
    entry = registers.get_for_store_and_date(1, DAY)
    assert entry.opening_cash == Decimal("450")
    assert entry.notes == "float from safe | recount"
    assert len(registers.entries) == 1


def test_reject_policy_leaves_existing_register_untouched():
    service, registers, _ = _make(reopen_policy=ReopenPolicy.REJECT)
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="500")

    with pytest.raises(AlreadyOpenedConflict) as exc:
        service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="450")

    assert exc.value.updated is False
    assert exc.value.result.opening_cash == Decimal("500")
    assert registers.reopen_calls == 0


def test_open_after_close_is_rejected_without_changes():
    service, registers, _ = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="500")
    service.close_register(store_id=1, register_date=DAY, closing_cash="500")

    with pytest.raises(AlreadyClosedError):
        service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="1")

    assert registers.get_for_store_and_date(1, DAY).opening_cash == Decimal("500")


def test_second_close_fails_and_keeps_first_values():
    service, registers, _ = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="500")
    service.close_register(store_id=1, register_date=DAY, closing_cash="510")

    with pytest.raises(AlreadyClosedError):
        service.close_register(store_id=1, register_date=DAY, closing_cash="9999")

    entry = registers.get_for_store_and_date(1, DAY)
    assert entry.closing_cash == Decimal("510")
    assert entry.cash_difference == Decimal("10")


def test_close_without_open_is_not_opened():
    service, _, _ = _make()

    with pytest.raises(NotOpenedError):
        service.close_register(store_id=2, register_date=DAY, closing_cash="10")


def test_open_for_unknown_store_is_not_found():
    service, _, _ = _make()

    with pytest.raises(NotFoundError):
        service.open_register(user_id=3, store_id=99, register_date=DAY, opening_cash="10")


@pytest.mark.parametrize("amount", ["-1", "abc", "1.005", None, ""])
def test_open_rejects_invalid_amounts(amount):
    service, _, _ = _make()

    with pytest.raises(ValidationError):
        service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash=amount)


def test_open_rejects_malformed_date():
    service, _, _ = _make()

    with pytest.raises(ValidationError):
        service.open_register(user_id=3, store_id=1, register_date="14/03/2025", opening_cash="10")


def test_open_without_date_uses_clock_date():
    service, _, _ = _make()

    result = service.open_register(user_id=3, store_id=1, register_date=None, opening_cash="10")

    assert result.register_date == DAY


def test_own_store_scope_ignores_other_stores_sales():
    service, _, sales = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="100")
    sales.add_cash(1, DAY, "10")
    sales.add_cash(2, DAY, "25")

    closed = service.close_register(store_id=1, register_date=DAY, closing_cash="110")

    assert closed.cash_sales_sum == Decimal("10")
    assert closed.is_perfect_match


def test_shared_till_scope_counts_every_store_in_the_till():
    service, _, sales = _make(scope=SharedTillScope([1, 2]))
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="100")
    sales.add_cash(1, DAY, "10")
    sales.add_cash(2, DAY, "25")
    sales.add_cash(3, DAY, "1000")

    closed = service.close_register(store_id=1, register_date=DAY, closing_cash="135")

    assert closed.cash_sales_sum == Decimal("35")
    assert closed.variance == Decimal("0")


def test_status_previews_expected_cash_while_open():
    service, _, sales = _make()
    service.open_register(user_id=3, store_id=1, register_date=DAY, opening_cash="200")
    sales.add_cash(1, DAY, "42.10")

    [status] = service.get_status(viewer=ADMIN, register_date="2025-03-14")

    assert status.cash_sales_today == Decimal("42.10")
    assert status.as_dict()["expected_cash_preview"] == "242.10"
    assert status.as_dict()["status"] == "open"


def test_status_is_limited_to_staff_store_type():
    service, _, _ = _make()
    service.open_register(user_id=1, store_id=1, register_date=DAY, opening_cash="1")
    service.open_register(user_id=1, store_id=2, register_date=DAY, opening_cash="1")

    visible = service.get_status(viewer=ARCADE_STAFF, register_date=DAY)

    assert [s.entry.store_id for s in visible] == [1]
    assert len(service.get_status(viewer=ADMIN, register_date=DAY)) == 2


def test_status_requires_date():
    service, _, _ = _make()

    with pytest.raises(ValidationError):
        service.get_status(viewer=ADMIN, register_date="")


def test_monthly_report_rejects_store_outside_staff_scope():
    service, _, _ = _make()

    with pytest.raises(AuthorizationError):
        service.monthly_report(viewer=ARCADE_STAFF, year=2025, month=3, store_id=2)


@pytest.mark.parametrize("year,month", [(1999, 1), (2101, 1), (2025, 0), (2025, 13), ("x", 1)])
def test_monthly_report_validates_period(year, month):
    service, _, _ = _make()

    with pytest.raises(ValidationError):
        service.monthly_report(viewer=ADMIN, year=year, month=month)


def test_history_is_paginated_newest_first():
    service, _, _ = _make()
    for day in range(1, 6):
        service.open_register(user_id=1, store_id=1, register_date=date(2025, 3, day), opening_cash="1")

    page = service.history(store_id=1, page=2, limit=2)

    assert [e.register_date.day for e in page.registers] == [3, 2]
    assert page.total == 5
    assert page.pages == 3


def test_history_rejects_inverted_range():
    service, _, _ = _make()

    with pytest.raises(ValidationError):
        service.history(start_date="2025-03-10", end_date="2025-03-01")


def test_status_can_be_narrowed_to_one_store():
    service, _, _ = _make()
    service.open_register(user_id=1, store_id=1, register_date=DAY, opening_cash="1")
    service.open_register(user_id=1, store_id=2, register_date=DAY, opening_cash="1")

    [status] = service.get_status(viewer=ADMIN, register_date=DAY, store_id="2")

    assert status.entry.store_name == "Dreamcube"
    with pytest.raises(AuthorizationError):
        service.get_status(viewer=ARCADE_STAFF, register_date=DAY, store_id=2)
