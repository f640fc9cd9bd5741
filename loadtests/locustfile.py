"""Storefront Load Testing: Locust entry point.

Seed a catalogue first so the generated product ids exist:

    python src/manage.py seed --products 20 --stock 50

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Contended placement only:
    locust -f loadtests/locustfile.py FlashSaleUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py OrderingUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.data_generators import HOT_PRODUCT_ID
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.ordering import FlashSaleUser, OrderingUser  # noqa: F401

logger = logging.getLogger("loadtest")

ADMIN_HEADERS = {"X-User-Id": "1", "X-User-Role": "admin"}


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "Insufficient stock available
    (product_id=1, requested=3, available=2)" instead of just "409".
    Expected sell-outs are logged at INFO.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code == 409:
        logger.info("[409] %s %s: %s", request_type, name, extract_error_detail(response))
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print(f"[LOADTEST] Contended product: {HOT_PRODUCT_ID}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print how many units of the hot product were sold across all orders."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        resp = requests.get(f"{environment.host}/orders", headers=ADMIN_HEADERS, timeout=10)
        resp.raise_for_status()
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch orders: {e}\n")
        return

    orders = resp.json()["data"]
    sold = sum(
        item["quantity"] for details in orders for item in details["items"] if item["product_id"] == HOT_PRODUCT_ID
    )
    print(f"[LOADTEST] Orders placed: {len(orders)}")
    print(f"[LOADTEST] Units of product {HOT_PRODUCT_ID} sold: {sold}")
    print()
