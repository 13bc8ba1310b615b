"""Identity provider interface."""

from authlink.domain.value import Credential, Principal


class IdentityProvider:
    """Contract consumed from the external identity provider.

    Every method may raise ``ProviderError``. ``sign_in`` raises
    ``AccountExistsWithDifferentCredentialError`` when the credential's email
    is already registered under another sign-in method.
    """

    async def sign_in(self, credential: Credential) -> Principal:
        """Verify a credential and return the authenticated principal."""
        raise NotImplementedError

    async def create_account(self, email: str, password: str) -> Principal:
        """Register a new email/password account and sign it in."""
        raise NotImplementedError

    async def link_credential(
        self, principal: Principal, credential: Credential
    ) -> Principal:
        """Attach another credential to an authenticated account.

        Returns:
            The principal with refreshed tokens and provider list
        """
        raise NotImplementedError

    async def list_sign_in_methods(self, email: str) -> list[str]:
        """List the sign-in methods registered for an email.

        Returns:
            Method tags, recommended method first. Empty if unregistered.
        """
        raise NotImplementedError

    async def sign_out(self, principal: Principal) -> None:
        """End the principal's session on the provider side."""
        raise NotImplementedError

    async def send_password_reset_email(self, email: str) -> None:
        raise NotImplementedError

    async def send_verification_code(
        self, phone_number: str, recaptcha_token: str | None = None
    ) -> str:
        """Send an SMS code to a phone number.

        Returns:
            Verification id to pass back with the code
        """
        raise NotImplementedError

    async def reauthenticate(
        self, principal: Principal, credential: Credential
    ) -> Principal:
        """Re-verify a credential for the already authenticated principal."""
        raise NotImplementedError

    async def update_password(self, principal: Principal, password: str) -> Principal:
        raise NotImplementedError

    async def update_email(self, principal: Principal, email: str) -> Principal:
        raise NotImplementedError

    async def update_display_name(
        self, principal: Principal, display_name: str
    ) -> Principal:
        raise NotImplementedError
