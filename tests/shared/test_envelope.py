"""Exception translation and domain routing at the HTTP boundary."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from shared.api import domain_context_middleware, envelope, first_message, register_envelope_handlers
from shared.errors import Conflict, Forbidden, InsufficientStock, Unauthenticated
from sqlalchemy.exc import OperationalError


@pytest.fixture()
def client(identity_domain, ordering_domain):
    app = FastAPI()
    app.middleware("http")(domain_context_middleware({"/identity": identity_domain, "/ordering": ordering_domain}))
    register_envelope_handlers(app)

    errors = {
        "validation": ValidationError({"name": ["Name is required"]}),
        "stock": InsufficientStock([{"product_id": "p1", "item_name": "Lamp", "requested": 5, "available": 3}]),
        "missing": ObjectNotFoundError("Product not found"),
        "unauthenticated": Unauthenticated(),
        "forbidden": Forbidden(),
        "conflict": Conflict("Role name already exists"),
        "version": ExpectedVersionError("stale"),
        "database": OperationalError("INSERT", {}, Exception("connection lost")),
        "boom": RuntimeError("secret details"),
    }

    @app.get("/raise/{kind}")
    async def raise_error(kind: str):
        raise errors[kind]

    @app.get("/identity/whoami")
    @app.get("/ordering/whoami")
    async def whoami():
        return envelope("Domain", {"domain": current_domain.name})

    return TestClient(app, raise_server_exceptions=False)


class TestErrorTranslation:
    @pytest.mark.parametrize(
        "kind, status, message",
        [
            ("validation", 400, "Name is required"),
            ("missing", 404, "Product not found"),
            ("unauthenticated", 401, "Authentication required"),
            ("forbidden", 403, "Permission denied"),
            ("conflict", 409, "Role name already exists"),
            ("version", 409, "The resource was modified concurrently, please retry"),
            ("database", 500, "Internal server error"),
            ("boom", 500, "Internal server error"),
        ],
    )
    def test_status_and_message(self, client, kind, status, message):
        response = client.get(f"/raise/{kind}")
        assert response.status_code == status
        body = response.json()
        assert body["success"] is False
        assert body["message"] == message

    def test_insufficient_stock_lists_lines(self, client):
        body = client.get("/raise/stock").json()
        assert body["message"] == "Not enough stock for some items"
        assert body["errors"]["out_of_stock_items"][0]["available"] == 3

    def test_unknown_route(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not found"}


class TestDomainRouting:
    def test_prefix_selects_domain(self, client):
        assert client.get("/identity/whoami").json()["data"]["domain"] == "identity"
        assert client.get("/ordering/whoami").json()["data"]["domain"] == "ordering"


class TestFirstMessage:
    def test_dict(self):
        assert first_message({"email": ["Invalid email"]}) == "Invalid email"

    def test_fallback(self):
        assert first_message({}) == "Validation failed"
