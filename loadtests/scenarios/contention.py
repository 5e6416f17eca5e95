"""Checkout contention on a single scarce product.

Every HotItemUser buys the same product, listed once with limited stock.
Concurrent checkouts race on its version: losers are retried server side
and eventually see 400 (sold out) or 409 (still contended). The shelf must
never go negative, which ``on_test_stop`` in the locustfile reports.
"""

from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import product_data
from loadtests.helpers.auth import admin_login, register_and_login
from loadtests.helpers.response import extract_error_detail

HOT_ITEM = {"product_id": None, "stock": 200}


@events.test_start.add_listener
def list_hot_item(environment, **_kwargs):
    """List the contended product before any user starts."""
    if environment.host is None or HOT_ITEM["product_id"] is not None:
        return

    from locust.clients import HttpSession

    session = HttpSession(base_url=environment.host, request_event=environment.events.request)
    _, token = admin_login(session)
    if token is None:
        return
    resp = session.post(
        "/products",
        json=product_data(stock=HOT_ITEM["stock"]),
        headers={"Authorization": f"Bearer {token}"},
        name="[SETUP] POST /products",
    )
    if resp.status_code == 201:
        HOT_ITEM["product_id"] = resp.json()["data"]["product_id"]


class HotItemUser(HttpUser):
    """Buys one unit of the hot item as fast as allowed."""

    wait_time = constant_pacing(0.2)

    def on_start(self):
        self.user_id, token = register_and_login(self.client)
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}

    @task
    def buy_hot_item(self):
        if not self.headers or HOT_ITEM["product_id"] is None:
            return
        with self.client.post(
            "/orders",
            json={"items": [{"product_id": HOT_ITEM["product_id"], "quantity": 1}]},
            headers=self.headers,
            catch_response=True,
            name="[CONTENTION] POST /orders",
        ) as resp:
            if resp.status_code in (201, 400, 409):
                resp.success()
            else:
                resp.failure(f"Order failed: {resp.status_code} | {extract_error_detail(resp)}")
