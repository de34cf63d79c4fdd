"""Tests for authentication endpoints and flows."""

import io
from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from notemind.database import utcnow
from notemind.exceptions import InvalidCredentials
from notemind.models.user import User
from notemind.services.auth import AuthService
from notemind.services.passwords import PasswordHasher


class TestRegistration:
    """Tests for user registration."""

    def test_register_success(self, client: TestClient):
        """Register a new user via API."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Ann", "email": "ann@x.com", "password": "pw123456"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "ann@x.com"
        assert data["user"]["name"] == "Ann"
        assert "token" in data
        assert "password_hash" not in data["user"]
        assert "jwt" in response.cookies

    def test_register_token_resolves_to_new_user(self, client: TestClient):
        """The returned token authenticates as the registered user."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Ann", "email": "ann@x.com", "password": "pw123456"},
        )
        data = response.json()
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["id"] == data["user"]["id"]

    def test_register_duplicate_email(self, client: TestClient, test_user: dict):
        """Reject duplicate email registration, ignoring case."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Another", "email": "TEST@example.com", "password": "password123"},
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_register_short_password(self, client: TestClient):
        """Passwords under 8 characters are rejected."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Ann", "email": "ann@x.com", "password": "short"},
        )
        assert response.status_code == 422

    def test_register_invalid_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Ann", "email": "not-an-email", "password": "password123"},
        )
        assert response.status_code == 422


class TestLogin:
    """Tests for user login."""

    def test_login_success(self, client: TestClient, test_user: dict):
        """Login via API with valid credentials."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "test@example.com"
        assert "token" in data
        assert "jwt" in response.cookies

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient, test_user: dict):
        """Wrong password and unknown email return the same error shape."""
        wrong_password = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrong"},
        )
        unknown_email = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}

    def test_login_case_insensitive(self, client: TestClient, test_user: dict):
        """Login works regardless of email case."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "TEST@EXAMPLE.COM", "password": "password123"},
        )
        assert response.status_code == 200

    def test_login_updates_last_active(self, client: TestClient, test_user: dict, db_session: Session):
        user = db_session.get(User, test_user["user_id"])
        user.last_active_at = utcnow() - timedelta(days=3)
        db_session.commit()

        client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": "password123"})

        db_session.refresh(user)
        assert user.last_active_at > utcnow() - timedelta(minutes=1)

    def test_unknown_email_still_checks_a_password_hash(self, auth_service: AuthService):
        """An unknown email pays the same bcrypt check as a wrong password."""
        dummy_hash = auth_service.hasher.dummy_hash
        with patch.object(PasswordHasher, "verify", return_value=False) as mock_verify:
            with pytest.raises(InvalidCredentials):
                auth_service.login("nobody@example.com", "password123")

        mock_verify.assert_called_once_with("password123", dummy_hash)

    def test_wrong_password_checks_stored_hash(self, auth_service: AuthService, test_user: dict):
        with patch.object(PasswordHasher, "verify", return_value=False) as mock_verify:
            with pytest.raises(InvalidCredentials):
                auth_service.login("test@example.com", "wrongpass")

        mock_verify.assert_called_once()
        assert mock_verify.call_args.args[1] != auth_service.hasher.dummy_hash


class TestSession:
    """Tests for bearer header and cookie handling on protected routes."""

    def test_me_with_bearer_header(self, client: TestClient, auth_headers: dict):
        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "test@example.com"

    def test_me_with_cookie(self, client: TestClient, test_user: dict):
        client.cookies.set("jwt", test_user["token"])
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 200

    def test_me_without_credentials(self, client: TestClient):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_garbage_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer invalid.token.here"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authorized to access this route"

    def test_logout_clears_cookie(self, client: TestClient, test_user: dict):
        client.cookies.set("jwt", test_user["token"])
        response = client.get("/api/v1/auth/logout")
        assert response.status_code == 200
        assert 'jwt=""' in response.headers["set-cookie"] or "jwt=;" in response.headers["set-cookie"]

    def test_verify_valid_token(self, client: TestClient, test_user: dict):
        response = client.get(f"/api/v1/auth/verify?token={test_user['token']}")
        assert response.status_code == 200
        assert response.json() == {"valid": True, "user_id": test_user["user_id"], "email": "test@example.com"}

    def test_verify_invalid_token(self, client: TestClient):
        response = client.get("/api/v1/auth/verify?token=invalid.token.here")
        assert response.status_code == 401


class TestProfile:
    """Tests for profile and password updates."""

    def test_update_details(self, client: TestClient, auth_headers: dict):
        response = client.put(
            "/api/v1/auth/details",
            json={"name": "Renamed", "email": "Renamed@Example.com"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["email"] == "renamed@example.com"

    def test_update_details_email_in_use(self, client: TestClient, auth_headers: dict, other_user: dict):
        response = client.put("/api/v1/auth/details", json={"email": "other@example.com"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already in use"

    def test_update_password(self, client: TestClient, auth_headers: dict):
        response = client.put(
            "/api/v1/auth/password",
            json={"current_password": "password123", "new_password": "brandnew123"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert "token" in response.json()

        login = client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": "brandnew123"})
        assert login.status_code == 200

    def test_update_password_wrong_current(self, client: TestClient, auth_headers: dict):
        response = client.put(
            "/api/v1/auth/password",
            json={"current_password": "nope", "new_password": "brandnew123"},
            headers=auth_headers,
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Current password is incorrect"

    def test_upload_avatar(self, client: TestClient, auth_headers: dict, settings):
        response = client.post(
            "/api/v1/auth/avatar",
            files={"file": ("me.png", io.BytesIO(b"\x89PNG" + b"\x00" * 64), "image/png")},
            headers=auth_headers,
        )
        assert response.status_code == 200
        avatar = response.json()["avatar"]
        assert avatar.startswith("/uploads/avatars/")
        assert avatar.endswith(".png")

    def test_upload_avatar_rejects_non_image(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/v1/auth/avatar",
            files={"file": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert "Unsupported file type" in response.json()["detail"]


class TestForgotPassword:
    """Tests for forgot password flow."""

    def test_forgot_password_existing_email(self, client: TestClient, test_user: dict, db_session: Session):
        """Request reset for existing email stores only a hash of the token."""
        response = client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"})
        assert response.status_code == 200
        data = response.json()
        assert data["reset_token"]
        assert data["reset_url"].endswith(f"/api/v1/auth/reset-password/{data['reset_token']}")

        user = db_session.query(User).filter(User.email == "test@example.com").first()
        assert user.password_reset_token_hash is not None
        assert user.password_reset_token_hash != data["reset_token"]
        assert user.password_reset_expires_at is not None

    def test_forgot_password_unknown_email(self, client: TestClient):
        response = client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 404

    def test_forgot_password_logs_reset_link(self, client: TestClient, test_user: dict):
        with patch("notemind.routers.auth.logger") as mock_logger:
            client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"})
            calls = [str(c) for c in mock_logger.info.call_args_list]
            assert any("PASSWORD RESET" in c for c in calls)

    def test_forgot_password_hides_token_in_production(self, client: TestClient, test_user: dict, settings):
        settings.APP_ENV = "production"
        response = client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"})
        assert response.status_code == 200
        assert response.json()["reset_token"] is None
        assert response.json()["reset_url"] is None


class TestResetPassword:
    """Tests for password reset flow."""

    def test_reset_flow_then_login(self, client: TestClient, test_user: dict):
        """Forgot, reset, then log in with the new password."""
        token = client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"}).json()["reset_token"]

        response = client.put(f"/api/v1/auth/reset-password/{token}", json={"password": "newpw12345"})
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "test@example.com"
        assert "jwt" in response.cookies

        login = client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": "newpw12345"})
        assert login.status_code == 200
        old = client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": "password123"})
        assert old.status_code == 401

    def test_reset_with_expired_token(
        self, client: TestClient, test_user: dict, db_session: Session, auth_service: AuthService
    ):
        token = auth_service.request_password_reset("test@example.com")

        user = db_session.query(User).filter(User.email == "test@example.com").first()
        user.password_reset_expires_at = utcnow() - timedelta(seconds=1)
        db_session.commit()

        response = client.put(f"/api/v1/auth/reset-password/{token}", json={"password": "newpw12345"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired token"

    def test_reset_with_invalid_token(self, client: TestClient, test_user: dict):
        response = client.put("/api/v1/auth/reset-password/totally-bogus-token", json={"password": "newpw12345"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired token"

    def test_reset_token_single_use(self, client: TestClient, test_user: dict, auth_service: AuthService):
        token = auth_service.request_password_reset("test@example.com")

        first = client.put(f"/api/v1/auth/reset-password/{token}", json={"password": "newpw12345"})
        assert first.status_code == 200

        second = client.put(f"/api/v1/auth/reset-password/{token}", json={"password": "anotherpass"})
        assert second.status_code == 400


class TestHealthCheck:
    def test_health_check(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["app"] == "notemind"
