"""Unit tests for the authentication and account routes."""

from dataclasses import dataclass

import httpx
import pytest
import pytest_asyncio
from dishka.integrations.fastapi import FastapiProvider

from authlink.adapter.firebase import MockFirebaseIdentityProvider
from authlink.domain.service import IdentityProvider
from authlink.domain.value import SignInMethod
from authlink.interface.api.app import create_app
from tests.di import build_test_container


@dataclass
class Api:
    client: httpx.AsyncClient
    provider: MockFirebaseIdentityProvider

    async def open_session(self) -> None:
        response = await self.client.post("/auth/session")
        assert response.status_code == 200


@pytest_asyncio.fixture
async def api():
    container = build_test_container(None, FastapiProvider())
    app = create_app(container)
    provider = await container.get(IdentityProvider)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield Api(client=client, provider=provider)

    await container.close()


class TestSessionRoutes:
    @pytest.mark.asyncio
    async def test_health(self, api: Api):
        response = await api.client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_open_session_sets_cookie(self, api: Api):
        response = await api.client.post("/auth/session")

        assert response.status_code == 200
        assert "session_token" in response.cookies
        assert response.json()["token"] == response.cookies["session_token"]

    @pytest.mark.asyncio
    async def test_get_session_without_cookie(self, api: Api):
        """Probing without a session should not be an error."""
        response = await api.client.get("/auth/session")

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_sign_in_without_session(self, api: Api):
        response = await api.client.post("/auth/sign-in/anonymous")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_sign_in_with_forged_cookie(self, api: Api):
        api.client.cookies.set("session_token", "forged")

        response = await api.client.post("/auth/sign-in/anonymous")

        assert response.status_code == 401


class TestSignInRoutes:
    @pytest.mark.asyncio
    async def test_account_link_flow(self, api: Api):
        """Google conflict, then password sign-in, links Google to the account."""
        # Arrange
        api.provider.register("alice@example.com", ["password"], password="secret-pw")
        token = api.provider.issue_id_token(SignInMethod.GOOGLE, "alice@example.com")
        await api.open_session()

        # Act
        conflict = await api.client.post(
            "/auth/sign-in/google", json={"id_token": token}
        )
        pending = await api.client.get("/auth/session")
        signed_in = await api.client.post(
            "/auth/sign-in/email",
            json={"email": "alice@example.com", "password": "secret-pw"},
        )
        session = await api.client.get("/auth/session")

        # Assert
        assert conflict.status_code == 400
        assert conflict.json()["detail"] == {
            "message": (
                "To link your Google account with your existing account, "
                "please sign in with your email address and password."
            ),
            "code": "account-exists-with-different-credential",
        }
        assert pending.json()["pending_link_email"] == "alice@example.com"
        assert signed_in.status_code == 200
        assert sorted(signed_in.json()["user"]["provider_ids"]) == [
            "google.com",
            "password",
        ]
        assert session.json()["authenticated"] is True
        assert session.json()["pending_link_email"] is None

    @pytest.mark.asyncio
    async def test_sign_out_discards_pending(self, api: Api):
        api.provider.register("alice@example.com", ["password"], password="secret-pw")
        token = api.provider.issue_id_token(SignInMethod.GOOGLE, "alice@example.com")
        await api.open_session()
        await api.client.post("/auth/sign-in/google", json={"id_token": token})

        response = await api.client.post("/auth/sign-out")
        session = await api.client.get("/auth/session")

        assert response.status_code == 200
        assert session.json()["pending_link_email"] is None

    @pytest.mark.asyncio
    async def test_phone_flow(self, api: Api):
        await api.open_session()

        sent = await api.client.post(
            "/auth/phone/verification", json={"phone_number": "+15555550100"}
        )
        signed_in = await api.client.post(
            "/auth/phone/otp", json={"otp": MockFirebaseIdentityProvider.VALID_SMS_CODE}
        )

        assert sent.status_code == 200
        assert signed_in.status_code == 200
        assert signed_in.json()["user"]["phone_number"] == "+15555550100"

    @pytest.mark.asyncio
    async def test_apple_request_not_configured(self, api: Api):
        await api.open_session()

        response = await api.client.get("/auth/sign-in/apple/request")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "apple-client-id-missing"

    @pytest.mark.asyncio
    async def test_apple_sign_in_without_request(self, api: Api):
        await api.open_session()

        response = await api.client.post(
            "/auth/sign-in/apple", json={"id_token": "apple-token"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "missing-nonce"


class TestAccountRoutes:
    @pytest.mark.asyncio
    async def test_create_account_and_methods(self, api: Api):
        await api.open_session()

        created = await api.client.post(
            "/auth/accounts",
            json={"email": "erin@example.com", "password": "secret-pw"},
        )
        exists = await api.client.get(
            "/auth/methods", params={"email": "erin@example.com"}
        )
        missing = await api.client.get(
            "/auth/methods", params={"email": "nobody@example.com"}
        )

        assert created.status_code == 200
        assert exists.json() == {"exists": True}
        assert missing.json() == {"exists": False}

    @pytest.mark.asyncio
    async def test_weak_password(self, api: Api):
        await api.open_session()

        response = await api.client.post(
            "/auth/accounts", json={"email": "erin@example.com", "password": "123"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == (
            "Your password is too weak. Please use a stronger password."
        )

    @pytest.mark.asyncio
    async def test_password_management(self, api: Api):
        # Arrange
        await api.open_session()
        await api.client.post(
            "/auth/accounts",
            json={"email": "erin@example.com", "password": "secret-pw"},
        )

        # Act
        reset = await api.client.post(
            "/auth/password/reset", json={"email": "erin@example.com"}
        )
        updated = await api.client.put("/auth/password", json={"password": "new-secret"})
        valid = await api.client.post(
            "/auth/password/validate", json={"password": "new-secret"}
        )

        # Assert
        assert reset.json() == {"success": True}
        assert updated.status_code == 200
        assert valid.json() == {"success": True}
        assert api.provider.password_resets == ["erin@example.com"]

    @pytest.mark.asyncio
    async def test_update_email_requires_user(self, api: Api):
        await api.open_session()

        response = await api.client.put("/auth/email", json={"email": "x@example.com"})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "no-current-user"
