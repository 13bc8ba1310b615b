"""Domain layer errors."""

from authlink.domain.value import Credential


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ProviderError(DomainError):
    """Coded failure reported by the identity provider.

    ``code`` uses the provider's kebab-case error codes
    (``weak-password``, ``wrong-password``, ...). ``message`` is the
    provider's raw text, used when the code has no friendly message.
    """

    def __init__(
        self,
        code: str,
        message: str | None = None,
        *,
        email: str | None = None,
        credential: Credential | None = None,
    ):
        self.code = code
        self.message = message
        self.email = email
        self.credential = credential
        super().__init__(message or code)


class AccountExistsWithDifferentCredentialError(ProviderError):
    """The email is already registered under a different sign-in method.

    Carries the conflicting email and the credential that was rejected so it
    can be linked once the user signs in with the registered method.
    """

    CODE = "account-exists-with-different-credential"

    def __init__(
        self, email: str, credential: Credential, message: str | None = None
    ):
        super().__init__(
            self.CODE,
            message
            or "An account already exists with the same email address but "
            "different sign-in credentials.",
            email=email,
            credential=credential,
        )
        # Narrow the optional attributes of the base class
        self.email: str = email
        self.credential: Credential = credential
