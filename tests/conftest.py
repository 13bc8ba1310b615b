"""Test configuration and fixtures."""

import logfire
import pytest

from authlink.domain.value import (
    AppleCredential,
    GoogleCredential,
    PasswordCredential,
    Principal,
    ProviderUid,
    SignInMethod,
)

# Instrumentation in create_app needs a configured Logfire; keep it local and quiet
logfire.configure(send_to_logfire=False, console=False)


def make_principal(
    uid: str = "uid-1",
    email: str | None = "alice@example.com",
    provider_ids: tuple[str, ...] = (SignInMethod.PASSWORD.value,),
) -> Principal:
    """Build a signed-in principal for tests."""
    return Principal(
        uid=ProviderUid(uid),
        email=email,
        provider_ids=provider_ids,
        id_token=f"id-token-{uid}",
        refresh_token=f"refresh-token-{uid}",
    )


@pytest.fixture
def password_credential() -> PasswordCredential:
    return PasswordCredential(email="alice@example.com", password="correct-horse")


@pytest.fixture
def google_credential() -> GoogleCredential:
    return GoogleCredential(id_token="google-id-token")


@pytest.fixture
def apple_credential() -> AppleCredential:
    return AppleCredential(id_token="apple-id-token", raw_nonce="raw-nonce")
