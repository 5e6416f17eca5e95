"""Shopper journeys: browse, fill the cart, check out and review orders.

Products are listed by the seeded administrator once per user so every
shopper has stock to buy. Run ``python src/manage.py seed`` against the
target first and export LOADTEST_ADMIN_LOGIN / LOADTEST_ADMIN_PASSWORD if
the defaults were changed.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, product_line
from loadtests.helpers.auth import admin_login, register_and_login
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class CheckoutJourney(SequentialTaskSet):
    """Register -> Browse -> Add 3 lines -> Change one -> Check stock -> Checkout -> Orders."""

    def on_start(self):
        self.state = ShopperState()
        self.state.user_id, self.state.token = register_and_login(self.client)
        if self.state.token is None:
            self.interrupt()

    @task
    def browse(self):
        with self.client.get("/products", params={"per_page": 50}, catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"Browse failed: {resp.status_code} | {extract_error_detail(resp)}")
                self.interrupt()
                return
            in_stock = [item["id"] for item in resp.json()["data"]["items"] if item["stock"] > 10]
        if not in_stock:
            self.interrupt()
        self.state.product_ids = random.sample(in_stock, min(3, len(in_stock)))

    @task
    def fill_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/cart",
                json=product_line(product_id),
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_item_ids.append(resp.json()["data"]["item_id"])
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} | {extract_error_detail(resp)}")

    @task
    def change_quantity(self):
        if not self.state.cart_item_ids:
            return
        with self.client.put(
            "/cart/item",
            params={"id": self.state.cart_item_ids[0]},
            json={"quantity": 1},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /cart/item",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update cart item failed: {resp.status_code} | {extract_error_detail(resp)}")

    @task
    def check_stock(self):
        self.client.get("/cart/check-stock", headers=self.state.headers, name="GET /cart/check-stock")

    @task
    def checkout(self):
        with self.client.post(
            "/orders/checkout",
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["data"]["id"])
            elif resp.status_code in (400, 409):
                # Stock ran out or changed under us; an expected outcome under load
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} | {extract_error_detail(resp)}")

    @task
    def review_orders(self):
        self.client.get("/orders", headers=self.state.headers, name="GET /orders")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Locust user simulating shoppers, restocking the shelf on start."""

    wait_time = between(0.5, 2.0)
    tasks = [CheckoutJourney]

    def on_start(self):
        _, token = admin_login(self.client)
        if token is None:
            return
        headers = {"Authorization": f"Bearer {token}"}
        for _ in range(3):
            self.client.post("/products", json=product_data(), headers=headers, name="POST /products")
