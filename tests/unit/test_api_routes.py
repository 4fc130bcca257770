"""
Unit tests for API v1 routes.

Tests endpoint responses with the service wired to the in-memory repository,
and outcome-to-status mapping with mocked services.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_account_service, get_token_issuer
from src.api.v1.routes import router
from src.config.settings import get_settings
from src.domain.accounts import PASSWORD_RESET_MESSAGE, AccountLifecycleService
from src.domain.models import AccountResult, Outcome

COOKIE = get_settings().session_cookie_name

ALICE = {"login": "alice", "email": "alice@x.com", "password": "Secret123"}


@pytest.fixture
def app(service: AccountLifecycleService, token_issuer) -> FastAPI:
    """Create test FastAPI application backed by the in-memory service."""
    test_app = FastAPI()
    test_app.include_router(router, prefix="/v1")
    test_app.state.pool = MagicMock()
    test_app.dependency_overrides[get_account_service] = lambda: service
    test_app.dependency_overrides[get_token_issuer] = lambda: token_issuer
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def register_and_activate(client: TestClient, sender) -> str:
    """Register alice, activate her, and return the activation token."""
    assert client.post("/v1/register", json=ALICE).status_code == 201
    token = sender.send_activation.call_args[0][2]
    assert client.post("/v1/activate", json={"token": token}).status_code == 200
    return token


class TestRegisterEndpoint:
    """Tests for POST /v1/register."""

    def test_register_returns_201(self, client: TestClient, sender) -> None:
        response = client.post("/v1/register", json=ALICE)

        assert response.status_code == 201
        assert response.json() == {"message": "Account registered successfully"}
        sender.send_activation.assert_called_once()

    def test_register_duplicate_returns_409(self, client: TestClient) -> None:
        client.post("/v1/register", json=ALICE)
        response = client.post("/v1/register", json=ALICE)

        assert response.status_code == 409
        assert response.json() == {"detail": "An account with this login already exists"}

    def test_register_weak_password_returns_400(self, client: TestClient) -> None:
        response = client.post("/v1/register", json={**ALICE, "password": "weak"})

        assert response.status_code == 400
        assert "Password" in response.json()["detail"]

    def test_register_missing_field_returns_422(self, client: TestClient) -> None:
        response = client.post("/v1/register", json={"login": "alice"})
        assert response.status_code == 422


class TestActivationEndpoints:
    """Tests for POST /v1/activate and /v1/deactivate."""

    def test_activate_twice_returns_409(self, client: TestClient, sender) -> None:
        token = register_and_activate(client, sender)

        response = client.post("/v1/activate", json={"token": token})

        assert response.status_code == 409
        assert response.json() == {"detail": "Account is already activated"}

    def test_unknown_token_returns_404(self, client: TestClient) -> None:
        response = client.post("/v1/activate", json={"token": "missing"})
        assert response.status_code == 404

    def test_empty_token_returns_400(self, client: TestClient) -> None:
        response = client.post("/v1/deactivate", json={"token": ""})
        assert response.status_code == 400

    def test_deactivate(self, client: TestClient, sender) -> None:
        token = register_and_activate(client, sender)

        response = client.post("/v1/deactivate", json={"token": token})

        assert response.status_code == 200
        assert response.json() == {"message": "Account deactivated successfully"}


class TestLoginEndpoint:
    """Tests for POST /v1/login."""

    def test_login_unactivated_returns_403_without_cookie(self, client: TestClient) -> None:
        client.post("/v1/register", json=ALICE)

        response = client.post("/v1/login", json={"login": "alice", "password": "Secret123"})

        assert response.status_code == 403
        assert response.json() == {"detail": "Account is not activated"}
        assert COOKIE not in response.cookies
        assert response.headers["cache-control"] == "no-store"

    def test_login_sets_httponly_cookie(self, client: TestClient, sender, token_issuer) -> None:
        register_and_activate(client, sender)

        response = client.post("/v1/login", json={"login": "alice", "password": "Secret123"})

        assert response.status_code == 200
        assert response.json() == {"message": "Logged in successfully"}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        assert response.headers["cache-control"] == "no-store"
        assert token_issuer.verify(response.cookies[COOKIE]).login == "alice"

    def test_login_wrong_password_returns_401(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)

        response = client.post("/v1/login", json={"login": "alice", "password": "Wrong1234"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid login or password"}


class TestLogoutEndpoint:
    """Tests for POST /v1/logout."""

    def test_logout_deletes_cookie(self, client: TestClient) -> None:
        response = client.post("/v1/logout")

        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f'{COOKIE}=""') or set_cookie.startswith(f"{COOKIE}=;")
        assert "Max-Age=0" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        assert "Secure" not in set_cookie


class TestChangePasswordEndpoint:
    """Tests for POST /v1/password."""

    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.post("/v1/password", json={"password": "NewSecret456"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Not authenticated"}

    def test_change_with_session_cookie(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)
        login = client.post("/v1/login", json={"login": "alice", "password": "Secret123"})
        client.cookies.set(COOKIE, login.cookies[COOKIE])

        response = client.post("/v1/password", json={"password": "NewSecret456"})

        assert response.status_code == 200
        new_login = client.post("/v1/login", json={"login": "alice", "password": "NewSecret456"})
        assert new_login.status_code == 200

    def test_change_with_reset_token(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)
        client.post("/v1/reset-password", json={"email": "alice@x.com"})
        reset_token = sender.send_password_reset.call_args[0][1]

        response = client.post(
            "/v1/password",
            json={"password": "NewSecret456"},
            headers={"Authorization": f"Bearer {reset_token}"},
        )

        assert response.status_code == 200

    def test_session_token_not_accepted_as_bearer(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)
        login = client.post("/v1/login", json={"login": "alice", "password": "Secret123"})
        session_token = login.cookies[COOKIE]
        client.cookies.clear()

        response = client.post(
            "/v1/password",
            json={"password": "NewSecret456"},
            headers={"Authorization": f"Bearer {session_token}"},
        )

        assert response.status_code == 401

    def test_weak_password_returns_400(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)
        login = client.post("/v1/login", json={"login": "alice", "password": "Secret123"})
        client.cookies.set(COOKIE, login.cookies[COOKIE])

        response = client.post("/v1/password", json={"password": "short"})

        assert response.status_code == 400


class TestRecoveryEndpoints:
    """Tests for POST /v1/resend-activation and /v1/reset-password."""

    def test_reset_password_same_response_for_unknown_email(self, client: TestClient) -> None:
        client.post("/v1/register", json=ALICE)

        known = client.post("/v1/reset-password", json={"email": "alice@x.com"})
        unknown = client.post("/v1/reset-password", json={"email": "nobody@x.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json() == {"message": PASSWORD_RESET_MESSAGE}

    def test_resend_activation(self, client: TestClient, sender) -> None:
        client.post("/v1/register", json=ALICE)

        response = client.post("/v1/resend-activation", json={"login_or_email": "alice"})

        assert response.status_code == 200
        assert sender.send_activation.call_count == 2

    def test_resend_activated_returns_409(self, client: TestClient, sender) -> None:
        register_and_activate(client, sender)

        response = client.post("/v1/resend-activation", json={"login_or_email": "alice"})

        assert response.status_code == 409


class TestOutcomeStatusMapping:
    """Each outcome maps to one HTTP status."""

    @pytest.mark.parametrize(
        "outcome,status_code",
        [
            (Outcome.INVALID_INPUT, 400),
            (Outcome.UNAUTHORIZED, 401),
            (Outcome.FORBIDDEN, 403),
            (Outcome.NOT_FOUND, 404),
            (Outcome.CONFLICT, 409),
        ],
    )
    def test_failure_status(self, app: FastAPI, outcome: Outcome, status_code: int) -> None:
        mock_service = MagicMock(spec=AccountLifecycleService)
        mock_service.activate.return_value = AccountResult(outcome, "reason")
        app.dependency_overrides[get_account_service] = lambda: mock_service
        client = TestClient(app)

        response = client.post("/v1/activate", json={"token": "tok"})

        assert response.status_code == status_code
        assert response.json() == {"detail": "reason"}
        mock_service.activate.assert_called_once_with("tok")
