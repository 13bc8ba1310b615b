"""Unit tests for SignInUseCase."""

from uuid import UUID, uuid4

import pytest
from dishka import AsyncContainer

from authlink.application.usecase.auth import (
    GetSessionUseCase,
    OpenSessionUseCase,
    SignInUseCase,
)
from authlink.application.usecase.auth.session import GetSessionRequest
from authlink.application.usecase.auth.sign_in import (
    AnonymousSignInRequest,
    EmailSignInRequest,
    GoogleSignInRequest,
)
from authlink.domain.error import NotFoundError
from authlink.domain.service import IdentityProvider, SessionService
from authlink.domain.value import SessionId, SignInMethod
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def open_session(env: AsyncContainer) -> SessionId:
    use_case = await env.get(OpenSessionUseCase)
    opened = await use_case.execute()
    return SessionId(UUID(opened.session_id))


class TestSignInUseCase:
    """Tests for SignInUseCase."""

    @pytest.mark.asyncio
    async def test_email_sign_in(self, unit_env: AsyncContainer):
        """Should sign the session in and expose the user."""
        # Arrange
        provider = await unit_env.get(IdentityProvider)
        provider.register("alice@example.com", ["password"], password="secret-pw")
        session_id = await open_session(unit_env)
        sign_in = await unit_env.get(SignInUseCase)

        # Act
        response = await sign_in.execute(
            EmailSignInRequest(
                session_id=session_id, email="alice@example.com", password="secret-pw"
            )
        )

        # Assert
        assert response.success
        assert response.user.email == "alice@example.com"
        assert response.user.provider_ids == ["password"]

    @pytest.mark.asyncio
    async def test_conflict_is_reported_and_kept_on_session(
        self, unit_env: AsyncContainer
    ):
        """A conflicting Google sign-in should leave a pending link on the session."""
        # Arrange
        provider = await unit_env.get(IdentityProvider)
        provider.register("alice@example.com", ["password"], password="secret-pw")
        session_id = await open_session(unit_env)
        sign_in = await unit_env.get(SignInUseCase)
        get_session = await unit_env.get(GetSessionUseCase)
        token = provider.issue_id_token(SignInMethod.GOOGLE, "alice@example.com")

        # Act
        response = await sign_in.execute(
            GoogleSignInRequest(session_id=session_id, id_token=token)
        )
        state = await get_session.execute(GetSessionRequest(session_id=session_id))

        # Assert
        assert not response.success
        assert response.code == "account-exists-with-different-credential"
        assert "sign in with your email address and password" in response.message
        assert state.authenticated is False
        assert state.pending_link_email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_pending_link_is_per_session(self, unit_env: AsyncContainer):
        """A conflict on one session must not link on another."""
        # Arrange
        provider = await unit_env.get(IdentityProvider)
        provider.register("alice@example.com", ["password"], password="secret-pw")
        conflicted = await open_session(unit_env)
        other = await open_session(unit_env)
        sign_in = await unit_env.get(SignInUseCase)
        token = provider.issue_id_token(SignInMethod.GOOGLE, "alice@example.com")
        await sign_in.execute(GoogleSignInRequest(session_id=conflicted, id_token=token))

        # Act
        response = await sign_in.execute(
            EmailSignInRequest(
                session_id=other, email="alice@example.com", password="secret-pw"
            )
        )

        # Assert
        assert response.success
        assert provider.linked == []
        session_service = await unit_env.get(SessionService)
        assert session_service.get(conflicted).service.reconciler.pending is not None

    @pytest.mark.asyncio
    async def test_anonymous_sign_in(self, unit_env: AsyncContainer):
        session_id = await open_session(unit_env)
        sign_in = await unit_env.get(SignInUseCase)

        response = await sign_in.execute(AnonymousSignInRequest(session_id=session_id))

        assert response.success
        assert response.user.is_anonymous

    @pytest.mark.asyncio
    async def test_unknown_session(self, unit_env: AsyncContainer):
        sign_in = await unit_env.get(SignInUseCase)

        with pytest.raises(NotFoundError):
            await sign_in.execute(
                AnonymousSignInRequest(session_id=SessionId(uuid4()))
            )
