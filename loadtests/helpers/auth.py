"""Registration and login helpers shared by the scenarios."""

import os

from loadtests.data_generators import registration_data
from loadtests.helpers.response import extract_error_detail

ADMIN_LOGIN = os.environ.get("LOADTEST_ADMIN_LOGIN", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("LOADTEST_ADMIN_PASSWORD", "admin-password")


def login(client, login_name, password):
    """Return ``(user_id, token)``, or ``(None, None)`` after marking the request failed."""
    with client.post(
        "/auth/login",
        json={"login": login_name, "password": password},
        catch_response=True,
        name="POST /auth/login",
    ) as resp:
        if resp.status_code != 200:
            resp.failure(f"Login failed: {resp.status_code} | {extract_error_detail(resp)}")
            return None, None
        data = resp.json()["data"]
        return data["user"]["id"], data["access_token"]


def register_and_login(client):
    payload = registration_data()
    with client.post("/auth/register", json=payload, catch_response=True, name="POST /auth/register") as resp:
        if resp.status_code != 201:
            resp.failure(f"Register failed: {resp.status_code} | {extract_error_detail(resp)}")
            return None, None
    return login(client, payload["email"], payload["password"])


def admin_login(client):
    return login(client, ADMIN_LOGIN, ADMIN_PASSWORD)
