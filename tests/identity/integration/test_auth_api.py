"""Registration, login and profile endpoints."""


def _register(client, username="jane", email="jane@example.com", password="secret123"):
    return client.post("/auth/register", json={"username": username, "email": email, "password": password})


class TestRegisterEndpoint:
    def test_register(self, client, seeded):
        response = _register(client)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user_id"]

    def test_duplicate_email(self, client):
        _register(client)
        response = _register(client, username="other")
        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Email already exists"}

    def test_invalid_body(self, client):
        response = client.post("/auth/register", json={"username": "jo"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "password" in body["errors"]


class TestLoginEndpoint:
    def test_login_returns_token(self, client, seeded):
        _register(client)
        response = client.post("/auth/login", json={"login": "jane", "password": "secret123"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["roles"] == ["customer"]
        assert "password_hash" not in data["user"]

    def test_bad_credentials(self, client):
        _register(client)
        response = client.post("/auth/login", json={"login": "jane", "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestProfileEndpoints:
    def test_profile_requires_login(self, client):
        response = client.get("/users/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_garbage_token_is_unauthenticated(self, client):
        response = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_profile_lists_effective_permissions(self, client, make_user):
        _, headers = make_user("jane")
        response = client.get("/users/me", headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["roles"] == ["customer"]
        assert data["permissions"] == ["manage_own_services", "place_orders"]

    def test_update_profile(self, client, make_user):
        _, headers = make_user("jane")
        response = client.put("/users/me", json={"phone": "+1-555-0100"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["phone"] == "+1-555-0100"

    def test_change_password(self, client, make_user):
        _, headers = make_user("jane")
        response = client.put(
            "/users/me/password",
            json={"current_password": "secret123", "new_password": "new-secret"},
            headers=headers,
        )
        assert response.status_code == 200

        login = client.post("/auth/login", json={"login": "jane", "password": "new-secret"})
        assert login.status_code == 200
