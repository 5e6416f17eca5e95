import pytest


@pytest.fixture()
def admin_headers(make_user):
    _, headers = make_user("root", roles=["admin"])
    return headers


@pytest.fixture()
def new_product(client, admin_headers):
    def _create(name="Desk Lamp", price=100.0, stock=10, category="lighting"):
        response = client.post(
            "/products",
            json={"name": name, "price": price, "stock": stock, "category": category},
            headers=admin_headers,
        )
        assert response.status_code == 201
        return response.json()["data"]["product_id"]

    return _create
