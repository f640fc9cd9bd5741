"""Ordering load test scenarios.

Two stateful SequentialTaskSet journeys: a shopper who fills a cart and
checks out, and a burst of shoppers competing for the last units of one
hot product. A 409 on the hot product is an expected outcome, not a
failure; any 5xx is.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_item_data,
    contended_order_data,
    invalid_order_data,
    order_data,
    shopper_id,
)
from loadtests.helpers.response import extract_error_detail, is_sold_out
from loadtests.helpers.state import ContentionTally, ShopperState


class CartToOrderJourney(SequentialTaskSet):
    """Add Items -> View Cart -> Place Order -> View Order -> Check Cart Is Empty.

    A sold-out product along the way ends the journey early; the shopper
    simply gives up.
    """

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.order_payload = order_data()

    @task
    def add_items(self):
        for line in self.order_payload["items"]:
            with self.client.post(
                "/cart/items",
                json=cart_item_data(line["product_id"]) | {"quantity": line["quantity"]},
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_item_ids = [item["id"] for item in resp.json()["data"]["items"]]
                elif is_sold_out(resp):
                    resp.success()
                    self.interrupt()
                else:
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def view_cart(self):
        with self.client.get("/cart", headers=self.state.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=self.order_payload,
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["data"]["order"]["id"])
            elif is_sold_out(resp):
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        order_id = self.state.order_ids[-1]
        with self.client.get(
            f"/orders/{order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View order failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def cart_is_empty(self):
        with self.client.get("/cart", headers=self.state.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["data"]["item_count"] != 0:
                resp.failure("Cart was not cleared by order placement")

    @task
    def done(self):
        self.interrupt()


class ContendedPlacementJourney(SequentialTaskSet):
    """Place Order For Hot Product -> Send Malformed Order.

    Every placement ends in either 201 or 409. Once the hot product is
    sold out, every later attempt must be a 409 carrying ``available``.
    """

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.tally = ContentionTally()

    @task
    def place_hot_order(self):
        with self.client.post(
            "/orders",
            json=contended_order_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders [contended]",
        ) as resp:
            if resp.status_code == 201:
                self.tally.placed += 1
            elif is_sold_out(resp):
                if "available" not in resp.json().get("data", {}):
                    resp.failure(f"409 without availability: {extract_error_detail(resp)}")
                else:
                    self.tally.sold_out += 1
                    resp.success()
            else:
                resp.failure(f"Contended order failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def place_invalid_order(self):
        with self.client.post(
            "/orders",
            json=invalid_order_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders [invalid]",
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Invalid order not rejected: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Locust user simulating storefront shoppers.

    Weighted distribution:
    - 60% Cart to order checkout
    - 40% Contended placement on the hot product
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CartToOrderJourney: 3,
        ContendedPlacementJourney: 2,
    }


class FlashSaleUser(HttpUser):
    """Stress profile: shoppers hammering the hot product with no think time."""

    wait_time = between(0, 0.1)
    tasks = [ContendedPlacementJourney]
