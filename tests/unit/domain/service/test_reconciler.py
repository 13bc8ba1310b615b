"""Unit tests for AccountLinkReconciler."""

from unittest.mock import AsyncMock

import pytest

from authlink.domain.error import (
    AccountExistsWithDifferentCredentialError,
    ProviderError,
)
from authlink.domain.service import AccountLinkReconciler, IdentityProvider
from authlink.domain.value import (
    AnonymousCredential,
    GoogleCredential,
    PasswordCredential,
    SignInFailure,
    SignInSuccess,
)
from tests.conftest import make_principal

GOOGLE_CONFLICT_MESSAGE = (
    "We could not log into your account but we noticed you have a Google "
    "account with the same details. Please try to login with Google."
)
APPLE_CONFLICT_MESSAGE = (
    "We could not log into your account but we noticed you have a Apple "
    "account with the same details. Please try to login with your Apple "
    "account instead."
)


def make_provider() -> AsyncMock:
    return AsyncMock(spec=IdentityProvider)


def conflict(
    credential, email: str = "alice@example.com"
) -> AccountExistsWithDifferentCredentialError:
    return AccountExistsWithDifferentCredentialError(email=email, credential=credential)


class TestConflictResolution:
    """Tests for the conflict branch of attempt_sign_in()."""

    @pytest.mark.asyncio
    async def test_conflict_stores_pending_request(self, google_credential):
        """A conflicting sign-in should keep the rejected credential."""
        # Arrange
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.return_value = ["password"]
        reconciler = AccountLinkReconciler(provider)

        # Act
        outcome = await reconciler.attempt_sign_in(google_credential)

        # Assert
        assert isinstance(outcome, SignInFailure)
        assert outcome.code == "account-exists-with-different-credential"
        assert reconciler.pending is not None
        assert reconciler.pending.conflicting_email == "alice@example.com"
        assert reconciler.pending.rejected_credential == google_credential
        provider.list_sign_in_methods.assert_awaited_once_with("alice@example.com")

    @pytest.mark.asyncio
    async def test_password_method_asks_for_email_sign_in(self, google_credential):
        """A password account should be recommended by email and password."""
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.return_value = ["password"]
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(google_credential)

        assert "sign in with your email address and password" in outcome.message
        assert outcome.message.startswith("To link your Google account")

    @pytest.mark.asyncio
    async def test_google_method_recommends_google(self, apple_credential):
        """A Google account should be recommended with the Google message."""
        provider = make_provider()
        provider.sign_in.side_effect = conflict(apple_credential)
        provider.list_sign_in_methods.return_value = ["google.com", "password"]
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(apple_credential)

        assert outcome.message == GOOGLE_CONFLICT_MESSAGE

    @pytest.mark.parametrize("method", ["apple.com", "apple"])
    @pytest.mark.asyncio
    async def test_apple_method_recommends_apple(self, google_credential, method):
        """Both Apple tags should produce the Apple message."""
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.return_value = [method]
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(google_credential)

        assert outcome.message == APPLE_CONFLICT_MESSAGE

    @pytest.mark.asyncio
    async def test_unknown_method_is_named_verbatim(self, google_credential):
        """An unrecognised method tag should appear in the fallback message."""
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.return_value = ["custom-saml"]
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(google_credential)

        assert outcome.message == (
            "We could not log into your account but we noticed you have a "
            "custom-saml account with the same details. "
            "Please try to login with that instead."
        )

    @pytest.mark.asyncio
    async def test_only_first_method_decides(self, google_credential):
        """Methods after the first should be ignored."""
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.return_value = ["custom-saml", "google.com"]
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(google_credential)

        assert "custom-saml" in outcome.message
        assert outcome.message != GOOGLE_CONFLICT_MESSAGE

    @pytest.mark.asyncio
    async def test_empty_method_list_returns_provider_message(self, google_credential):
        """Without registered methods the provider's message is returned."""
        provider = make_provider()
        provider.sign_in.side_effect = AccountExistsWithDifferentCredentialError(
            email="alice@example.com",
            credential=google_credential,
            message="Account exists with different credential",
        )
        provider.list_sign_in_methods.return_value = []
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(google_credential)

        assert outcome.message == "Account exists with different credential"
        assert reconciler.pending is not None

    @pytest.mark.asyncio
    async def test_method_lookup_failure_keeps_pending(self, google_credential):
        """A failed method lookup should still leave the credential pending."""
        # Arrange
        provider = make_provider()
        provider.sign_in.side_effect = conflict(google_credential)
        provider.list_sign_in_methods.side_effect = ProviderError(
            "network-request-failed", "connection reset"
        )
        reconciler = AccountLinkReconciler(provider)

        # Act
        outcome = await reconciler.attempt_sign_in(google_credential)

        # Assert
        assert outcome.message == "connection reset"
        assert outcome.code == "account-exists-with-different-credential"
        assert reconciler.pending is not None
        assert reconciler.pending.rejected_credential == google_credential

    @pytest.mark.asyncio
    async def test_new_conflict_overwrites_pending(
        self, google_credential, apple_credential
    ):
        """A second conflict should replace the first pending request."""
        provider = make_provider()
        provider.sign_in.side_effect = [
            conflict(google_credential, email="first@example.com"),
            conflict(apple_credential, email="second@example.com"),
        ]
        provider.list_sign_in_methods.return_value = ["password"]
        reconciler = AccountLinkReconciler(provider)

        await reconciler.attempt_sign_in(google_credential)
        await reconciler.attempt_sign_in(apple_credential)

        assert reconciler.pending.conflicting_email == "second@example.com"
        assert reconciler.pending.rejected_credential == apple_credential


class TestLinkingAfterSignIn:
    """Tests for linking the pending credential on a successful sign-in."""

    @pytest.mark.asyncio
    async def test_links_pending_credential_once(
        self, google_credential, password_credential
    ):
        """Signing in with the recommended method should link the credential."""
        # Arrange
        principal = make_principal()
        linked = make_principal(provider_ids=("password", "google.com"))
        provider = make_provider()
        provider.sign_in.side_effect = [conflict(google_credential), principal]
        provider.list_sign_in_methods.return_value = ["password"]
        provider.link_credential.return_value = linked
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        # Act
        outcome = await reconciler.attempt_sign_in(password_credential)

        # Assert
        assert isinstance(outcome, SignInSuccess)
        assert outcome.principal == linked
        provider.link_credential.assert_awaited_once_with(principal, google_credential)
        assert reconciler.pending is None

    @pytest.mark.asyncio
    async def test_failed_link_still_signs_in(
        self, google_credential, password_credential
    ):
        """A link failure should be swallowed and the pending request cleared."""
        principal = make_principal()
        provider = make_provider()
        provider.sign_in.side_effect = [conflict(google_credential), principal]
        provider.list_sign_in_methods.return_value = ["password"]
        provider.link_credential.side_effect = ProviderError(
            "credential-already-in-use", "already linked elsewhere"
        )
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert isinstance(outcome, SignInSuccess)
        assert outcome.principal == principal
        provider.link_credential.assert_awaited_once()
        assert reconciler.pending is None

    @pytest.mark.asyncio
    async def test_unexpected_link_error_is_swallowed(
        self, google_credential, password_credential
    ):
        """Non-provider link errors should not escape either."""
        provider = make_provider()
        provider.sign_in.side_effect = [conflict(google_credential), make_principal()]
        provider.list_sign_in_methods.return_value = ["password"]
        provider.link_credential.side_effect = RuntimeError("boom")
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert isinstance(outcome, SignInSuccess)
        assert reconciler.pending is None

    @pytest.mark.asyncio
    async def test_any_method_consumes_pending(self, google_credential):
        """The pending credential is linked after a sign-in of any method."""
        provider = make_provider()
        provider.sign_in.side_effect = [conflict(google_credential), make_principal()]
        provider.list_sign_in_methods.return_value = ["password"]
        provider.link_credential.return_value = make_principal()
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        await reconciler.attempt_sign_in(AnonymousCredential())

        provider.link_credential.assert_awaited_once()
        assert reconciler.pending is None

    @pytest.mark.asyncio
    async def test_no_link_without_pending(self, password_credential):
        """A plain sign-in should never call link_credential."""
        provider = make_provider()
        provider.sign_in.return_value = make_principal()
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert isinstance(outcome, SignInSuccess)
        provider.link_credential.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_sign_in_keeps_pending(
        self, google_credential, password_credential
    ):
        """A wrong password should leave the pending credential in place."""
        provider = make_provider()
        provider.sign_in.side_effect = [
            conflict(google_credential),
            ProviderError("wrong-password", "INVALID_PASSWORD"),
        ]
        provider.list_sign_in_methods.return_value = ["password"]
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert isinstance(outcome, SignInFailure)
        assert reconciler.pending is not None
        provider.link_credential.assert_not_awaited()


class TestFailures:
    """Tests for non-conflict failures."""

    @pytest.mark.asyncio
    async def test_provider_error_is_translated(self, password_credential):
        """Known provider codes should map to their friendly message."""
        provider = make_provider()
        provider.sign_in.side_effect = ProviderError("WRONG-PASSWORD", "raw")
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert outcome == SignInFailure(
            message=(
                "You seemed to have entered the wrong password. "
                "Double check it and try again."
            ),
            code="WRONG-PASSWORD",
        )
        assert outcome.has_error

    @pytest.mark.asyncio
    async def test_unknown_code_uses_provider_message(self, password_credential):
        provider = make_provider()
        provider.sign_in.side_effect = ProviderError(
            "user-disabled", "The user account has been disabled."
        )
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(password_credential)

        assert outcome.message == "The user account has been disabled."

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_apology(self, password_credential):
        """Non-provider exceptions should become the fixed apology."""
        provider = make_provider()
        provider.sign_in.side_effect = RuntimeError("socket closed")
        reconciler = AccountLinkReconciler(provider)

        outcome = await reconciler.attempt_sign_in(
            password_credential, apology="Sorry, try again."
        )

        assert outcome == SignInFailure(message="Sorry, try again.")


class TestDiscardPending:
    """Tests for AccountLinkReconciler.discard_pending()."""

    @pytest.mark.asyncio
    async def test_discard_clears_without_linking(self, google_credential):
        provider = make_provider()
        provider.sign_in.side_effect = [conflict(google_credential), make_principal()]
        provider.list_sign_in_methods.return_value = ["password"]
        reconciler = AccountLinkReconciler(provider)
        await reconciler.attempt_sign_in(google_credential)

        reconciler.discard_pending()
        await reconciler.attempt_sign_in(
            PasswordCredential(email="alice@example.com", password="secret-pw")
        )

        assert reconciler.pending is None
        provider.link_credential.assert_not_awaited()

    def test_discard_without_pending_is_noop(self):
        reconciler = AccountLinkReconciler(make_provider())

        reconciler.discard_pending()

        assert reconciler.pending is None
