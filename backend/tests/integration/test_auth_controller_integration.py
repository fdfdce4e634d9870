"""
Integration tests for registration, login and the account endpoints.
"""

import pytest

from tests.fixtures.app_fixtures import DEFAULT_PASSWORD, login


class TestRegistration:
    def test_self_registration_is_always_cashier(self, client):
        response = client.post(
            "/api/register",
            json={
                "username": "newbie",
                "password": "secret123",
                "fullName": "New Bie",
                "role": "admin",
            },
        )

        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["role"] == "cashier"
        assert "passwordHash" not in data

        # Registered users are signed in straight away
        assert client.get("/api/user").get_json()["data"]["username"] == "newbie"

    def test_manager_can_choose_role_and_stays_signed_in(self, admin_client):
        response = admin_client.post(
            "/api/register",
            json={
                "username": "stocker",
                "password": "secret123",
                "fullName": "Stock Keeper",
                "role": "warehouse",
            },
        )

        assert response.status_code == 201
        assert response.get_json()["data"]["role"] == "warehouse"
        assert admin_client.get("/api/user").get_json()["data"]["username"] == "admin_user"

    def test_duplicate_username(self, client, user_factory):
        user_factory("taken")

        response = client.post(
            "/api/register",
            json={"username": "taken", "password": "secret123", "fullName": "Dup"},
        )

        assert response.status_code == 409
        assert response.get_json()["message"] == "Username already exists"

    def test_invalid_payload(self, client):
        response = client.post(
            "/api/register", json={"username": "ab", "password": "123", "fullName": ""}
        )

        assert response.status_code == 400
        message = response.get_json()["message"]
        assert "username:" in message
        assert "password:" in message


class TestLogin:
    def test_login_returns_user_and_token(self, client, user_factory):
        user_factory("alice", role="owner")

        response = login(client, "alice")

        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["role"] == "owner"
        assert body["data"]["token"]
        assert "access_token" in response.headers.get("Set-Cookie", "")

    @pytest.mark.parametrize(
        "username,password", [("alice", "wrong-password"), ("nobody", DEFAULT_PASSWORD)]
    )
    def test_bad_credentials(self, client, user_factory, username, password):
        user_factory("alice")

        response = client.post(
            "/api/login", json={"username": username, "password": password}
        )

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid username or password"

    def test_inactive_user_cannot_log_in(self, client, user_factory):
        user_factory("retired", active=False)

        response = client.post(
            "/api/login", json={"username": "retired", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401

    def test_missing_body(self, client):
        assert client.post("/api/login", data="nope").status_code == 400

    def test_logout_ends_the_session(self, cashier_client):
        assert cashier_client.get("/api/user").status_code == 200

        response = cashier_client.post("/api/logout")

        assert response.status_code == 200
        assert cashier_client.get("/api/user").status_code == 401


class TestBearerToken:
    def test_bearer_token_authenticates(self, client, bearer_headers):
        response = client.get("/api/user", headers=bearer_headers)

        assert response.status_code == 200
        assert response.get_json()["data"]["username"] == "api_admin"

    def test_garbage_token_is_rejected(self, client):
        response = client.get("/api/user", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.get_json() == {"success": False, "message": "Unauthorized"}


class TestProfile:
    def test_update_name_and_language(self, cashier_client):
        response = cashier_client.patch("/api/user/profile", json={"fullName": "Cass"})
        assert response.status_code == 200
        assert response.get_json()["data"]["fullName"] == "Cass"

        response = cashier_client.put("/api/user/language", json={"language": "id"})
        assert response.status_code == 200
        assert response.get_json()["data"]["language"] == "id"

    def test_unsupported_language(self, cashier_client):
        response = cashier_client.patch("/api/user/language", json={"language": "fr"})

        assert response.status_code == 400

    def test_change_password(self, app, cashier_client):
        response = cashier_client.patch(
            "/api/user/profile",
            json={
                "currentPassword": DEFAULT_PASSWORD,
                "newPassword": "brand-new",
                "confirmPassword": "brand-new",
            },
        )
        assert response.status_code == 200

        fresh = app.test_client()
        assert (
            fresh.post(
                "/api/login",
                json={"username": "cashier_user", "password": DEFAULT_PASSWORD},
            ).status_code
            == 401
        )
        login(fresh, "cashier_user", "brand-new")

    def test_wrong_current_password(self, cashier_client):
        response = cashier_client.patch(
            "/api/user/profile",
            json={
                "currentPassword": "not-it",
                "newPassword": "brand-new",
                "confirmPassword": "brand-new",
            },
        )

        assert response.status_code == 400
        assert response.get_json()["message"] == "Current password is incorrect"
