"""Application tests for cart management."""

from decimal import Decimal

import pytest
from shared.errors import InsufficientStockError, NotFoundError, ValidationError

USER_ID = 3


@pytest.fixture()
def carts(services):
    return services.carts


@pytest.fixture()
def mug(add_product):
    return add_product(name="Mug", price="8.00", stock=5)


class TestAddItem:
    def test_add_item_returns_cart(self, carts, mug):
        view = carts.add_item(USER_ID, mug, 2)

        assert view.item_count == 1
        assert view.items[0].product_id == mug
        assert view.items[0].quantity == 2
        assert view.items[0].name == "Mug"
        assert view.total == Decimal("16.00")

    def test_adding_same_product_grows_quantity(self, carts, mug, row_count):
        carts.add_item(USER_ID, mug, 1)
        view = carts.add_item(USER_ID, mug, 2)

        assert view.items[0].quantity == 3
        assert row_count("cart_items", user_id=USER_ID) == 1

    def test_unknown_product_is_not_found(self, carts):
        with pytest.raises(NotFoundError):
            carts.add_item(USER_ID, 999, 1)

    def test_more_than_stock_is_a_conflict(self, carts, mug, row_count):
        with pytest.raises(InsufficientStockError) as exc_info:
            carts.add_item(USER_ID, mug, 6)

        assert exc_info.value.available == 5
        assert row_count("cart_items") == 0

    def test_non_positive_quantity_is_invalid(self, carts, mug):
        with pytest.raises(ValidationError):
            carts.add_item(USER_ID, mug, 0)

    def test_adding_does_not_reserve_stock(self, carts, mug, stock_of):
        carts.add_item(USER_ID, mug, 4)
        assert stock_of(mug) == 5


class TestUpdateAndRemove:
    def test_update_quantity(self, carts, mug):
        item_id = carts.add_item(USER_ID, mug, 1).items[0].id

        view = carts.update_item(USER_ID, item_id, 4)

        assert view.items[0].quantity == 4

    def test_update_beyond_stock_is_a_conflict(self, carts, mug):
        item_id = carts.add_item(USER_ID, mug, 1).items[0].id

        with pytest.raises(InsufficientStockError):
            carts.update_item(USER_ID, item_id, 9)

        assert carts.view(USER_ID).items[0].quantity == 1

    def test_update_other_users_item_is_not_found(self, carts, mug):
        item_id = carts.add_item(USER_ID, mug, 1).items[0].id

        with pytest.raises(NotFoundError):
            carts.update_item(USER_ID + 1, item_id, 2)

    def test_remove_item(self, carts, mug):
        item_id = carts.add_item(USER_ID, mug, 1).items[0].id

        view = carts.remove_item(USER_ID, item_id)

        assert view.items == []

    def test_remove_missing_item_is_not_found(self, carts):
        with pytest.raises(NotFoundError):
            carts.remove_item(USER_ID, 404)


class TestClear:
    def test_clear_empties_cart(self, carts, mug, add_product):
        carts.add_item(USER_ID, mug, 1)
        carts.add_item(USER_ID, add_product(name="Tea", stock=3), 1)

        view = carts.clear(USER_ID)

        assert view.item_count == 0

    def test_clear_twice_is_harmless(self, carts, mug, row_count):
        carts.add_item(USER_ID, mug, 1)

        assert carts.clear(USER_ID).items == []
        assert carts.clear(USER_ID).items == []
        assert row_count("cart_items", user_id=USER_ID) == 0

    def test_store_clear_reports_removed_rows(self, coordinator, mug, add_to_cart):
        from ordering.cart.store import SqlCartStore

        store = SqlCartStore()
        add_to_cart(USER_ID, mug, 2)

        assert coordinator.run(lambda tx: store.clear_all(tx, USER_ID)) == 1
        assert coordinator.run(lambda tx: store.clear_all(tx, USER_ID)) == 0
