"""
Tests for authentication endpoints.
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from contactbook.core.security import create_access_token, create_refresh_token
from contactbook.models.user import User


def _register_payload(**overrides) -> dict:
    payload = {
        "name": "New User",
        "email": "newuser@contactbook.io",
        "password": "securepassword123",
        "confirm_password": "securepassword123",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_register_success(self, client: TestClient, db: Session):
        """Registration creates a user and returns it without tokens."""
        response = client.post("/api/auth/register", json=_register_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "newuser@contactbook.io"
        assert data["name"] == "New User"
        assert data["role"] == "user"
        assert "access_token" not in data
        assert "hashed_password" not in data

        user = db.query(User).filter(User.email == "newuser@contactbook.io").first()
        assert user is not None
        assert user.hashed_password != "securepassword123"

    def test_register_admin_role(self, client: TestClient):
        response = client.post("/api/auth/register", json=_register_payload(role="admin"))
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_register_unknown_role(self, client: TestClient):
        response = client.post("/api/auth/register", json=_register_payload(role="owner"))
        assert response.status_code == 422

    def test_register_password_mismatch(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json=_register_payload(confirm_password="differentpassword")
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Passwords do not match"

    def test_register_duplicate_email(self, client: TestClient, test_user: User):
        """Registration with an existing email fails."""
        response = client.post("/api/auth/register", json=_register_payload(email=test_user.email))

        assert response.status_code == 409
        assert "already registered" in response.json()["detail"].lower()

    def test_register_invalid_email(self, client: TestClient):
        response = client.post("/api/auth/register", json=_register_payload(email="not-an-email"))
        assert response.status_code == 422

    def test_register_short_password(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json=_register_payload(password="abc", confirm_password="abc")
        )
        assert response.status_code == 422


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_success(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "testpassword123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"

    def test_login_wrong_password(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_nonexistent_user(self, client: TestClient):
        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@contactbook.io", "password": "somepassword"}
        )
        assert response.status_code == 401


class TestRefresh:
    """Tests for POST /api/auth/refresh."""

    def _login(self, client: TestClient, user: User) -> dict:
        return client.post(
            "/api/auth/login",
            json={"email": user.email, "password": "testpassword123"}
        ).json()

    def test_refresh_success(self, client: TestClient, test_user: User):
        tokens = self._login(client, test_user)

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

        assert response.status_code == 200
        data = response.json()
        assert data["refresh_token"] != tokens["refresh_token"]

    def test_refresh_token_is_single_use(self, client: TestClient, test_user: User):
        """A refresh token cannot be presented twice."""
        tokens = self._login(client, test_user)
        client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 401
        assert "already been used" in response.json()["detail"]

    def test_refresh_invalid_token(self, client: TestClient):
        response = client.post("/api/auth/refresh", json={"refresh_token": "invalid-token"})
        assert response.status_code == 401

    def test_refresh_with_access_token(self, client: TestClient, test_user: User):
        tokens = self._login(client, test_user)

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token type"

    def test_refresh_for_unknown_user(self, client: TestClient, db: Session):
        response = client.post(
            "/api/auth/refresh",
            json={"refresh_token": create_refresh_token(subject="4242")}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"


class TestCurrentUser:
    """Tests for GET /api/auth/me and POST /api/auth/logout."""

    def test_me(self, client: TestClient, auth_headers: dict, test_user: User):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user.id
        assert data["email"] == test_user.email

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_me_with_refresh_token(self, client: TestClient, test_user: User):
        """Refresh tokens are not accepted as bearer credentials."""
        token = create_refresh_token(subject=str(test_user.id))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_me_for_deleted_user(self, client: TestClient, db: Session):
        token = create_access_token(subject="4242", role="user")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "User not found"

    def test_logout(self, client: TestClient, auth_headers: dict):
        response = client.post("/api/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Successfully logged out"}
