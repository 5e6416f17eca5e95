"""Catalogue browsing and service listing scenarios.

BrowsingUser reads the public catalogue anonymously. ServiceProviderJourney
registers a customer who lists services, edits them and takes one offline,
exercising the ownership checks on every write.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import CATEGORIES, SERVICE_CATEGORIES, service_data
from loadtests.helpers.auth import register_and_login
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProviderState


class BrowsingUser(HttpUser):
    """Anonymous visitor paging through products and services."""

    wait_time = between(0.5, 2.0)

    @task(5)
    def list_products(self):
        self.client.get(
            "/products",
            params={"category": random.choice(CATEGORIES), "page": random.randint(1, 3)},
            name="GET /products",
        )

    @task(3)
    def product_detail(self):
        with self.client.get("/products", params={"per_page": 20}, catch_response=True, name="GET /products") as resp:
            items = resp.json()["data"]["items"] if resp.status_code == 200 else []
        if items:
            self.client.get("/products/detail", params={"id": random.choice(items)["id"]}, name="GET /products/detail")

    @task(2)
    def list_services(self):
        self.client.get("/services", params={"category": random.choice(SERVICE_CATEGORIES)}, name="GET /services")


class ServiceProviderJourney(SequentialTaskSet):
    """Register -> List two services -> Reprice one -> Deactivate the other."""

    def on_start(self):
        self.state = ProviderState()
        self.state.user_id, self.state.token = register_and_login(self.client)
        if self.state.token is None:
            self.interrupt()

    @task
    def list_first_service(self):
        self._create_service()

    @task
    def list_second_service(self):
        self._create_service()

    @task
    def reprice(self):
        if not self.state.service_ids:
            return
        with self.client.put(
            "/services/detail",
            params={"id": self.state.service_ids[0]},
            json={"price": round(random.uniform(20, 200), 2)},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /services/detail",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update service failed: {resp.status_code} | {extract_error_detail(resp)}")

    @task
    def deactivate(self):
        if len(self.state.service_ids) < 2:
            return
        with self.client.put(
            "/services/detail",
            params={"id": self.state.service_ids[1]},
            json={"is_active": False},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /services/detail",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Deactivate service failed: {resp.status_code} | {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

    def _create_service(self):
        with self.client.post(
            "/services",
            json=service_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /services",
        ) as resp:
            if resp.status_code == 201:
                self.state.service_ids.append(resp.json()["data"]["service_id"])
            else:
                resp.failure(f"Create service failed: {resp.status_code} | {extract_error_detail(resp)}")


class ServiceProviderUser(HttpUser):
    wait_time = between(1.0, 3.0)
    tasks = [ServiceProviderJourney]
