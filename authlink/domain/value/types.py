"""Authentication value objects.

Credentials are opaque to the services: only the identity provider adapter
looks inside them. The services route them by ``method`` and hand them back
to the provider, either to sign in or to link to an existing account.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from authlink.domain.value.common import ValueObject
from authlink.domain.value.identifiers import ProviderUid


class SignInMethod(str, Enum):
    """Sign-in method tags as reported by the identity provider."""

    PASSWORD = "password"
    GOOGLE = "google.com"
    APPLE = "apple.com"
    PHONE = "phone"
    ANONYMOUS = "anonymous"

    @property
    def label(self) -> str:
        """Human-readable provider name used in user-facing messages."""
        return _METHOD_LABELS[self]


_METHOD_LABELS = {
    SignInMethod.PASSWORD: "email",
    SignInMethod.GOOGLE: "Google",
    SignInMethod.APPLE: "Apple",
    SignInMethod.PHONE: "phone",
    SignInMethod.ANONYMOUS: "guest",
}


class PasswordCredential(ValueObject):
    """Email and password."""

    method: Literal[SignInMethod.PASSWORD] = SignInMethod.PASSWORD
    email: str
    password: str = Field(repr=False)


class GoogleCredential(ValueObject):
    """Google ID token obtained by the client-side Google Sign-In flow."""

    method: Literal[SignInMethod.GOOGLE] = SignInMethod.GOOGLE
    id_token: str = Field(repr=False)
    access_token: str | None = Field(default=None, repr=False)


class AppleCredential(ValueObject):
    """Apple identity token.

    ``raw_nonce`` is the unhashed nonce; Apple embeds its SHA-256 in the
    identity token and the provider checks both match.
    """

    method: Literal[SignInMethod.APPLE] = SignInMethod.APPLE
    id_token: str = Field(repr=False)
    raw_nonce: str = Field(repr=False)
    authorization_code: str | None = Field(default=None, repr=False)


class PhoneCredential(ValueObject):
    """SMS one-time password for a previously requested verification."""

    method: Literal[SignInMethod.PHONE] = SignInMethod.PHONE
    verification_id: str
    sms_code: str = Field(repr=False)


class AnonymousCredential(ValueObject):
    """Guest sign-in; carries no secret."""

    method: Literal[SignInMethod.ANONYMOUS] = SignInMethod.ANONYMOUS


Credential = Annotated[
    Union[
        PasswordCredential,
        GoogleCredential,
        AppleCredential,
        PhoneCredential,
        AnonymousCredential,
    ],
    Field(discriminator="method"),
]


class Principal(ValueObject):
    """Authenticated identity returned by the identity provider."""

    uid: ProviderUid
    email: str | None = None
    display_name: str | None = None
    phone_number: str | None = None
    is_anonymous: bool = False
    provider_ids: tuple[str, ...] = ()
    id_token: str | None = Field(default=None, repr=False)
    refresh_token: str | None = Field(default=None, repr=False)


class SignInSuccess(ValueObject):
    """Sign-in (or account update) succeeded."""

    principal: Principal

    @property
    def has_error(self) -> bool:
        return False


class SignInFailure(ValueObject):
    """Sign-in failed; ``message`` is safe to show to the user."""

    message: str
    code: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.message)


SignInOutcome = Union[SignInSuccess, SignInFailure]


class LinkAttempt(ValueObject):
    """Result of attaching a pending credential after a successful sign-in.

    Linking is best-effort: a failed attempt is logged, never surfaced
    to the caller.
    """

    conflicting_email: str
    method: SignInMethod
    linked: bool
    principal: Principal | None = None
    error: str | None = None


class AppleSignInRequest(ValueObject):
    """Parameters the client needs to start the Sign in with Apple flow.

    ``nonce`` is the SHA-256 of the raw nonce kept on the session.
    """

    client_id: str
    redirect_uri: str
    nonce: str
