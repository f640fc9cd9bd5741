"""Tests for stock snapshots and the guarded decrement."""

from decimal import Decimal

import pytest
from inventory.ledger import SqlInventoryLedger, StockSnapshot
from shared.errors import InsufficientStockError, NotFoundError, ValidationError


@pytest.fixture()
def ledger():
    return SqlInventoryLedger()


class TestRead:
    def test_read_returns_snapshot(self, ledger, coordinator, add_product):
        product_id = add_product(name="Kettle", price="24.99", stock=7)

        snapshot = coordinator.run(lambda tx: ledger.read(tx, product_id))

        assert snapshot == StockSnapshot(product_id=product_id, name="Kettle", price=Decimal("24.99"), stock=7)

    def test_read_missing_product_raises_not_found(self, ledger, coordinator):
        with pytest.raises(NotFoundError) as exc_info:
            coordinator.run(lambda tx: ledger.read(tx, 999))
        assert exc_info.value.identifier == 999
        assert exc_info.value.message == "Product with ID 999 not found"


class TestDecrement:
    def test_decrement_reduces_stock(self, ledger, coordinator, add_product, stock_of):
        product_id = add_product(stock=10)

        coordinator.run(lambda tx: ledger.decrement(tx, product_id, 4))

        assert stock_of(product_id) == 6

    def test_decrement_to_exactly_zero(self, ledger, coordinator, add_product, stock_of):
        product_id = add_product(stock=3)

        coordinator.run(lambda tx: ledger.decrement(tx, product_id, 3))

        assert stock_of(product_id) == 0

    def test_decrement_beyond_stock_raises_and_leaves_stock(self, ledger, coordinator, add_product, stock_of):
        product_id = add_product(stock=2)

        with pytest.raises(InsufficientStockError) as exc_info:
            coordinator.run(lambda tx: ledger.decrement(tx, product_id, 3))

        assert exc_info.value.product_id == product_id
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert stock_of(product_id) == 2

    def test_decrement_rechecks_stock_after_earlier_read(self, ledger, coordinator, add_product, stock_of):
        product_id = add_product(stock=5)

        with pytest.raises(InsufficientStockError) as exc_info:
            with coordinator.transaction() as tx:
                assert ledger.read(tx, product_id).stock == 5
                ledger.decrement(tx, product_id, 3)
                # The earlier read said 5; the second decrement sees only 2 left
                ledger.decrement(tx, product_id, 3)

        assert exc_info.value.available == 2
        assert stock_of(product_id) == 5

    def test_decrement_missing_product_raises_not_found(self, ledger, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.run(lambda tx: ledger.decrement(tx, 999, 1))

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_decrement_rejects_non_positive_quantity(self, ledger, coordinator, add_product, stock_of, quantity):
        product_id = add_product(stock=5)

        with pytest.raises(ValidationError) as exc_info:
            coordinator.run(lambda tx: ledger.decrement(tx, product_id, quantity))

        assert "quantity" in exc_info.value.messages
        assert stock_of(product_id) == 5
