"""Domain value objects for authlink."""

from authlink.domain.value.identifiers import ProviderUid, SessionId
from authlink.domain.value.types import (
    AnonymousCredential,
    AppleCredential,
    AppleSignInRequest,
    Credential,
    GoogleCredential,
    LinkAttempt,
    PasswordCredential,
    PhoneCredential,
    Principal,
    SignInFailure,
    SignInMethod,
    SignInOutcome,
    SignInSuccess,
)

__all__ = [
    # Identifiers
    "SessionId",
    "ProviderUid",
    # Credentials
    "SignInMethod",
    "Credential",
    "PasswordCredential",
    "GoogleCredential",
    "AppleCredential",
    "PhoneCredential",
    "AnonymousCredential",
    # Results
    "Principal",
    "SignInSuccess",
    "SignInFailure",
    "SignInOutcome",
    "LinkAttempt",
    "AppleSignInRequest",
]
