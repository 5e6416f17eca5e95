"""Marketplace Load Testing: Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Shoppers only:
    locust -f loadtests/locustfile.py ShopperUser

    # Checkout contention on one product:
    locust -f loadtests/locustfile.py HotItemUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ShopperUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.catalogue import BrowsingUser, ServiceProviderUser  # noqa: F401
from loadtests.scenarios.contention import HOT_ITEM, HotItemUser  # noqa: F401
from loadtests.scenarios.shopping import ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the envelope message so you see "Cannot change order status
    from delivered to shipped" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Report the contended product's remaining stock."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if HOT_ITEM["product_id"] is None or environment.host is None:
        return

    from locust.clients import HttpSession

    session = HttpSession(base_url=environment.host, request_event=environment.events.request)
    resp = session.get("/products/detail", params={"id": HOT_ITEM["product_id"]}, name="[TEARDOWN] GET /products/detail")
    if resp.status_code == 200:
        stock = resp.json()["data"]["stock"]
        print(f"[LOADTEST] Hot item stock: {stock} of {HOT_ITEM['stock']} (never negative: {stock >= 0})\n")
