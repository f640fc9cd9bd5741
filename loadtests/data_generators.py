"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas.
Product ids refer to the catalogue written by ``python src/manage.py seed``,
which numbers products from 1.
"""

import os
import random

from faker import Faker

fake = Faker()

# Size of the seeded catalogue; product 1 is the contended one
CATALOGUE_SIZE = int(os.environ.get("LOADTEST_CATALOGUE_SIZE", "20"))
HOT_PRODUCT_ID = int(os.environ.get("LOADTEST_HOT_PRODUCT_ID", "1"))


def shopper_id() -> int:
    """A user id from a range wide enough that shoppers rarely collide."""
    return fake.unique.random_int(min=1000, max=9_999_999)


def random_product_id() -> int:
    return random.randint(1, CATALOGUE_SIZE)


def cart_item_data(product_id: int | None = None) -> dict:
    """Generate AddToCartRequest payload."""
    return {
        "product_id": product_id or random_product_id(),
        "quantity": random.randint(1, 3),
    }


def order_data(max_items: int = 3) -> dict:
    """Generate PlaceOrderRequest payload with distinct products."""
    count = random.randint(1, min(max_items, CATALOGUE_SIZE))
    product_ids = random.sample(range(1, CATALOGUE_SIZE + 1), count)
    return {"items": [{"product_id": pid, "quantity": random.randint(1, 2)} for pid in product_ids]}


def contended_order_data() -> dict:
    """A single-line order for the hot product."""
    return {"items": [{"product_id": HOT_PRODUCT_ID, "quantity": random.randint(1, 3)}]}


def invalid_order_data() -> dict:
    """An order the API must reject with 400."""
    return random.choice(
        [
            {"items": []},
            {"items": [{"product_id": random_product_id(), "quantity": 0}]},
            {"items": [{"product_id": HOT_PRODUCT_ID, "quantity": 1}, {"product_id": HOT_PRODUCT_ID, "quantity": 1}]},
        ]
    )
