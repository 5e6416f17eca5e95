"""Product and service endpoints with their permission rules."""


class TestProductEndpoints:
    def test_listing_is_public(self, client, new_product):
        new_product(name="Lamp")
        new_product(name="Chair", category="furniture")

        response = client.get("/products")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert [item["name"] for item in data["items"]] == ["Chair", "Lamp"]

        filtered = client.get("/products", params={"category": "furniture"}).json()["data"]
        assert [item["name"] for item in filtered["items"]] == ["Chair"]

    def test_detail(self, client, new_product):
        product_id = new_product(stock=0)
        data = client.get("/products/detail", params={"id": product_id}).json()["data"]
        assert data["in_stock"] is False

    def test_unknown_product(self, client):
        response = client.get("/products/detail", params={"id": "missing"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}

    def test_customer_cannot_create_products(self, client, make_user):
        _, headers = make_user("jane")
        response = client.post("/products", json={"name": "Lamp", "price": 10.0}, headers=headers)
        assert response.status_code == 403

    def test_anonymous_cannot_create_products(self, client):
        response = client.post("/products", json={"name": "Lamp", "price": 10.0})
        assert response.status_code == 401

    def test_negative_price_is_rejected(self, client, admin_headers):
        response = client.post("/products", json={"name": "Lamp", "price": -1}, headers=admin_headers)
        assert response.status_code == 400
        assert "price" in response.json()["errors"]

    def test_update_and_delete(self, client, new_product, admin_headers):
        product_id = new_product()

        updated = client.put("/products/detail", params={"id": product_id}, json={"price": 80.0}, headers=admin_headers)
        assert updated.json()["data"]["price"] == 80.0

        deleted = client.delete("/products/detail", params={"id": product_id}, headers=admin_headers)
        assert deleted.status_code == 200
        assert client.get("/products/detail", params={"id": product_id}).status_code == 404

    def test_adjust_stock(self, client, new_product, admin_headers):
        product_id = new_product(stock=3)

        response = client.put("/products/stock", params={"id": product_id}, json={"delta": 4}, headers=admin_headers)
        assert response.json()["data"]["stock"] == 7

        response = client.put("/products/stock", params={"id": product_id}, json={"delta": -8}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Stock cannot go below zero"


class TestServiceEndpoints:
    def _create(self, client, headers, name="Lamp Assembly"):
        response = client.post("/services", json={"name": name, "price": 30.0}, headers=headers)
        assert response.status_code == 201
        return response.json()["data"]["service_id"]

    def test_customer_lists_own_service(self, client, make_user):
        owner_id, headers = make_user("jane")
        service_id = self._create(client, headers)

        data = client.get("/services/detail", params={"id": service_id}).json()["data"]
        assert data["owner_id"] == owner_id

    def test_owner_can_update(self, client, make_user):
        _, headers = make_user("jane")
        service_id = self._create(client, headers)

        response = client.put("/services/detail", params={"id": service_id}, json={"price": 35.0}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["price"] == 35.0

    def test_other_customer_cannot_update(self, client, make_user):
        _, owner_headers = make_user("jane")
        _, other_headers = make_user("john")
        service_id = self._create(client, owner_headers)

        response = client.put("/services/detail", params={"id": service_id}, json={"price": 1.0}, headers=other_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "You do not have permission to modify this resource"

    def test_admin_can_delete_any_service(self, client, make_user, admin_headers):
        _, owner_headers = make_user("jane")
        service_id = self._create(client, owner_headers)

        response = client.delete("/services/detail", params={"id": service_id}, headers=admin_headers)
        assert response.status_code == 200

    def test_inactive_services_are_hidden(self, client, make_user):
        _, headers = make_user("jane")
        service_id = self._create(client, headers)
        self._create(client, headers, name="Repair")

        client.put("/services/detail", params={"id": service_id}, json={"is_active": False}, headers=headers)

        data = client.get("/services").json()["data"]
        assert [item["name"] for item in data["items"]] == ["Repair"]

    def test_user_without_roles_cannot_offer_services(self, client, make_user):
        _, headers = make_user("ghost", roles=[])
        response = client.post("/services", json={"name": "Repair", "price": 10.0}, headers=headers)
        assert response.status_code == 403
