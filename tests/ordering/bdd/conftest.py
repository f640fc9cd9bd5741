"""Shared BDD fixtures and step definitions for order placement."""

from decimal import Decimal

import pytest
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    """Product ids by name, filled in by the Given steps."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the placement result or the error it raised."""
    return {"placed": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name:w}" priced {price} with {stock:d} in stock'))
def product_in_stock(add_product, catalogue, name, price, stock):
    catalogue[name] = add_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('customer {user_id:d} has {quantity:d} of "{name:w}" in the cart'))
def customer_has_cart_item(services, catalogue, user_id, quantity, name):
    services.carts.add_item(user_id, catalogue[name], quantity)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is placed")
def order_is_placed(outcome):
    assert outcome["exc"] is None
    assert outcome["placed"] is not None


@then(parsers.cfparse("the order total is {amount}"))
def order_total(outcome, amount):
    assert outcome["placed"].order.total_amount == Decimal(amount)


@then(parsers.cfparse("the order has {count:d} line items"))
def order_line_items(outcome, count):
    assert len(outcome["placed"].items) == count


@then(parsers.cfparse('"{name:w}" has {stock:d} in stock'))
def product_stock(stock_of, catalogue, name, stock):
    assert stock_of(catalogue[name]) == stock


@then("no orders exist")
def no_orders(row_count):
    assert row_count("orders") == 0
    assert row_count("order_items") == 0


@then(parsers.cfparse("customer {user_id:d} has an empty cart"))
def empty_cart(services, user_id):
    assert services.carts.view(user_id).item_count == 0


@then(parsers.cfparse("customer {user_id:d} still has {count:d} item in the cart"))
def cart_item_count(services, user_id, count):
    assert services.carts.view(user_id).item_count == count
