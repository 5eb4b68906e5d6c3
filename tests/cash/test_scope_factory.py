import pytest

from src.store_ops.store_ops.cash.factory import CashSalesScopeFactory
from src.store_ops.store_ops.cash.scopes.shared_till import SharedTillScope
from src.store_ops.store_ops.cash.scopes.single_store import SingleStoreScope
from src.store_ops.store_ops.core.enums import CashSalesScope


def test_factory_defaults_to_single_store():
    scope = CashSalesScopeFactory().for_scope("store")

    assert isinstance(scope, SingleStoreScope)
    assert tuple(scope.store_ids_for(3)) == (3,)


def test_factory_builds_shared_till_from_configured_ids():
    scope = CashSalesScopeFactory(shared_till_store_ids=(2, 1)).for_scope(CashSalesScope.SHARED_TILL)

    assert isinstance(scope, SharedTillScope)
    assert scope.store_ids_for(2) == (1, 2)


def test_store_outside_shared_till_only_counts_itself():
    assert SharedTillScope([1, 2, 3, 4]).store_ids_for(7) == (7,)


def test_unknown_scope_name_is_rejected():
    with pytest.raises(ValueError):
        CashSalesScopeFactory().for_scope("galaxy")


def test_shared_till_needs_members():
    with pytest.raises(ValueError):
        SharedTillScope([])
