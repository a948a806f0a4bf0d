"""
Inkpost Backend — Auth Endpoint Tests
======================================

What we test:
    ✅ Register returns 201 with user + access_token, never the password
    ✅ Duplicate email or username → 409 "User already exists"
    ✅ Login with good / bad credentials
    ✅ /auth/me with valid, missing, malformed and expired tokens
    ✅ Body validation → 400 with the uniform error body
"""

from datetime import timedelta

import pytest

from conftest import auth_headers
from inkpost.security import create_access_token


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, test_client):
        """A new account is created with role USER and signed in."""
        response = await test_client.post(
            "/api/auth/register",
            json={
                "email": "alice@example.com",
                "username": "alice",
                "password": "secret123",
                "name": "Alice",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["access_token"]
        assert body["user"]["email"] == "alice@example.com"
        assert body["user"]["username"] == "alice"
        assert body["user"]["role"] == "USER"
        assert "createdAt" in body["user"]
        assert "password" not in body["user"]

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, test_client, register_user):
        await register_user(email="taken@example.com")

        response = await test_client.post(
            "/api/auth/register",
            json={
                "email": "taken@example.com",
                "username": "someone-else",
                "password": "secret123",
                "name": "Other",
            },
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["message"] == "User already exists"
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, test_client, register_user):
        await register_user(username="bob")

        response = await test_client.post(
            "/api/auth/register",
            json={
                "email": "fresh@example.com",
                "username": "bob",
                "password": "secret123",
                "name": "Bob Two",
            },
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, test_client):
        """Short password and malformed email are rejected before the service runs."""
        response = await test_client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "username": "x", "password": "123", "name": "X"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        fields = {err["field"] for err in body["details"]["errors"]}
        assert {"email", "password"} <= fields


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, register_user):
        await register_user(email="carol@example.com", password="hunter22")

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "carol@example.com", "password": "hunter22"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "carol@example.com"
        assert response.json()["access_token"]

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client, register_user):
        await register_user(email="dave@example.com", password="right-one")

        response = await test_client.post(
            "/api/auth/login",
            json={"email": "dave@example.com", "password": "wrong-one"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_unknown_email_is_401_with_same_message(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "whatever"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestMe:

    @pytest.mark.asyncio
    async def test_me_returns_current_user(self, test_client, register_user):
        token, user = await register_user()

        response = await test_client.get("/api/auth/me", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, test_client):
        response = await test_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, test_client):
        response = await test_client.get("/api/auth/me", headers=auth_headers("not.a.jwt"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_expired_token_is_401(self, test_client, register_user):
        _, user = await register_user()
        expired = create_access_token(user["id"], user["email"], expires_delta=timedelta(seconds=-1))

        response = await test_client.get("/api/auth/me", headers=auth_headers(expired))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_of_deleted_user_is_401(self, test_client, register_user):
        token, user = await register_user()
        deleted = await test_client.delete(f"/api/users/{user['id']}", headers=auth_headers(token))
        assert deleted.status_code == 204

        response = await test_client.get("/api/auth/me", headers=auth_headers(token))

        assert response.status_code == 401


class TestRequestId:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/health", headers={"X-Request-ID": "abc123"})

        assert response.status_code == 200
        assert response.headers["x-request-id"] == "abc123"
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
