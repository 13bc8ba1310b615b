"""Authentication domain service."""

from datetime import datetime, timezone

import logfire

from authlink.config import AppleSettings
from authlink.domain.error import ProviderError
from authlink.domain.model import AuthSession
from authlink.domain.value import (
    AnonymousCredential,
    AppleCredential,
    AppleSignInRequest,
    GoogleCredential,
    PasswordCredential,
    PhoneCredential,
    Principal,
    SessionId,
    SignInFailure,
    SignInOutcome,
    SignInSuccess,
)
from authlink.util.nonce import generate_nonce, sha256_of_string

from .base import Service
from .error_messages import (
    CREATE_ACCOUNT_APOLOGY,
    OTP_APOLOGY,
    UPDATE_ACCOUNT_APOLOGY,
    VERIFICATION_CODE_APOLOGY,
    message_for_error,
)
from .identity_provider import IdentityProvider
from .reconciler import AccountLinkReconciler


class AuthenticationService(Service):
    """Per-session facade over the identity provider.

    Every sign-in method goes through the account link reconciler, so a
    credential rejected by one method is linked when the user signs in with
    another. Failures are returned as ``SignInFailure`` values.
    """

    def __init__(
        self,
        session_id: SessionId,
        identity_provider: IdentityProvider,
        apple_settings: AppleSettings,
    ) -> None:
        """Initialize authentication service.

        Args:
            session_id: Session this service belongs to
            identity_provider: Identity provider adapter
            apple_settings: Sign in with Apple configuration
        """
        self.identity_provider = identity_provider
        self.apple_settings = apple_settings
        self.reconciler = AccountLinkReconciler(identity_provider)
        self._session = AuthSession(id=session_id)

    @property
    def session(self) -> AuthSession:
        return self._session

    @property
    def current_user(self) -> Principal | None:
        return self._session.principal

    @property
    def has_user(self) -> bool:
        return self._session.is_authenticated

    @property
    def user_token(self) -> str:
        """Latest ID token of the current user, empty when signed out."""
        principal = self._session.principal
        return (principal.id_token if principal else None) or ""

    async def login_with_email(self, email: str, password: str) -> SignInOutcome:
        with logfire.span("authentication_service.login_with_email"):
            outcome = await self.reconciler.attempt_sign_in(
                PasswordCredential(email=email, password=password)
            )
            return self._record(outcome)

    async def create_account_with_email(
        self, email: str, password: str
    ) -> SignInOutcome:
        """Register an email/password account.

        Account creation never links a pending credential: a new account
        cannot be the one the conflict was about.
        """
        with logfire.span("authentication_service.create_account_with_email"):
            try:
                principal = await self.identity_provider.create_account(
                    email, password
                )
            except ProviderError as e:
                logfire.warn("Account creation rejected", code=e.code)
                return SignInFailure(message=message_for_error(e), code=e.code)
            except Exception as e:
                logfire.error("Unexpected account creation error", error=str(e))
                return SignInFailure(message=CREATE_ACCOUNT_APOLOGY)

            logfire.info("Account created", uid=principal.uid)
            return self._record(SignInSuccess(principal=principal))

    async def login_anonymously(self) -> SignInOutcome:
        with logfire.span("authentication_service.login_anonymously"):
            outcome = await self.reconciler.attempt_sign_in(AnonymousCredential())
            return self._record(outcome)

    async def sign_in_with_google(
        self, id_token: str, access_token: str | None = None
    ) -> SignInOutcome:
        with logfire.span("authentication_service.sign_in_with_google"):
            outcome = await self.reconciler.attempt_sign_in(
                GoogleCredential(id_token=id_token, access_token=access_token)
            )
            return self._record(outcome)

    def prepare_apple_sign_in(self) -> AppleSignInRequest | SignInFailure:
        """Start Sign in with Apple.

        Generates a raw nonce, keeps it on the session and returns its hash
        together with the configured client id and redirect URI.
        """
        client_id = self.apple_settings.client_id
        redirect_uri = self.apple_settings.redirect_uri

        if client_id is None:
            return SignInFailure(
                message="If you want to use Apple Sign In you have to provide "
                "an Apple client id to the authentication service",
                code="apple-client-id-missing",
            )
        if redirect_uri is None:
            return SignInFailure(
                message="If you want to use Apple Sign In you have to provide "
                "an Apple redirect URI to the authentication service",
                code="apple-redirect-uri-missing",
            )

        raw_nonce = generate_nonce()
        self._update(apple_raw_nonce=raw_nonce)
        return AppleSignInRequest(
            client_id=client_id,
            redirect_uri=redirect_uri,
            nonce=sha256_of_string(raw_nonce),
        )

    async def sign_in_with_apple(
        self,
        id_token: str,
        authorization_code: str | None = None,
        given_name: str | None = None,
        family_name: str | None = None,
        ask_for_full_name: bool = True,
    ) -> SignInOutcome:
        """Complete Sign in with Apple.

        Apple rejects apps that ask for the name and do not use it, so the
        display name is only set when ``ask_for_full_name`` is true.
        """
        with logfire.span("authentication_service.sign_in_with_apple"):
            raw_nonce = self._session.apple_raw_nonce
            if raw_nonce is None:
                return SignInFailure(
                    message="Apple Sign In was not started for this session. "
                    "Please try again.",
                    code="missing-nonce",
                )
            # A nonce is single use
            self._update(apple_raw_nonce=None)

            outcome = await self.reconciler.attempt_sign_in(
                AppleCredential(
                    id_token=id_token,
                    raw_nonce=raw_nonce,
                    authorization_code=authorization_code,
                )
            )

            if isinstance(outcome, SignInSuccess) and ask_for_full_name:
                outcome = await self._apply_display_name(
                    outcome, given_name, family_name
                )

            return self._record(outcome)

    async def request_verification_code(
        self, phone_number: str, recaptcha_token: str | None = None
    ) -> SignInFailure | None:
        """Send an SMS code to a phone number.

        Returns:
            None when the code was sent, otherwise a failure
        """
        with logfire.span("authentication_service.request_verification_code"):
            try:
                verification_id = await self.identity_provider.send_verification_code(
                    phone_number, recaptcha_token
                )
            except ProviderError as e:
                logfire.warn("Verification code not sent", code=e.code)
                return SignInFailure(message=VERIFICATION_CODE_APOLOGY, code=e.code)
            except Exception as e:
                logfire.error("Unexpected verification code error", error=str(e))
                return SignInFailure(message=VERIFICATION_CODE_APOLOGY)

            self._update(phone_verification_id=verification_id)
            logfire.info("Verification code sent")
            return None

    async def authenticate_with_otp(self, otp: str) -> SignInOutcome:
        with logfire.span("authentication_service.authenticate_with_otp"):
            verification_id = self._session.phone_verification_id
            if verification_id is None:
                return SignInFailure(
                    message="No verification code was requested for this "
                    "session. Please request a new code.",
                    code="missing-verification-id",
                )

            outcome = await self.reconciler.attempt_sign_in(
                PhoneCredential(verification_id=verification_id, sms_code=otp),
                apology=OTP_APOLOGY,
            )
            if isinstance(outcome, SignInSuccess):
                self._update(phone_verification_id=None)
            return self._record(outcome)

    async def email_exists(self, email: str) -> bool:
        """Whether any account is registered for an email."""
        try:
            methods = await self.identity_provider.list_sign_in_methods(email)
        except ProviderError as e:
            return e.code.lower() == "invalid-email"
        except Exception as e:
            logfire.error("Unexpected sign-in method lookup error", error=str(e))
            return False
        return len(methods) > 0

    async def logout(self) -> None:
        """Sign out and forget every piece of in-flight state.

        Provider sign-out is best-effort; the local state is cleared even
        when it fails.
        """
        with logfire.span("authentication_service.logout"):
            principal = self._session.principal
            try:
                if principal is not None:
                    await self.identity_provider.sign_out(principal)
            except Exception as e:
                logfire.error("Could not sign out of provider", error=str(e))
            finally:
                self.reconciler.discard_pending()
                self._update(
                    principal=None,
                    phone_verification_id=None,
                    apple_raw_nonce=None,
                )

    async def send_reset_password_link(self, email: str) -> bool:
        try:
            await self.identity_provider.send_password_reset_email(email)
            return True
        except Exception as e:
            logfire.error(
                "Could not send email with reset password link", error=str(e)
            )
            return False

    async def validate_password(self, password: str) -> bool:
        """Check the current user's password by re-authenticating."""
        principal = self._session.principal
        if principal is None or not principal.email:
            return False

        try:
            refreshed = await self.identity_provider.reauthenticate(
                principal, PasswordCredential(email=principal.email, password=password)
            )
        except Exception as e:
            logfire.warn("Could not validate the user password", error=str(e))
            return False

        self._update(principal=refreshed)
        return True

    async def update_password(self, password: str) -> SignInOutcome:
        principal = self._session.principal
        if principal is None:
            return _no_current_user()
        try:
            updated = await self.identity_provider.update_password(principal, password)
        except ProviderError as e:
            return SignInFailure(message=message_for_error(e), code=e.code)
        except Exception as e:
            logfire.error("Unexpected password update error", error=str(e))
            return SignInFailure(message=UPDATE_ACCOUNT_APOLOGY)
        return self._record(SignInSuccess(principal=updated))

    async def update_email(self, email: str) -> SignInOutcome:
        principal = self._session.principal
        if principal is None:
            return _no_current_user()
        try:
            updated = await self.identity_provider.update_email(principal, email)
        except ProviderError as e:
            return SignInFailure(message=message_for_error(e), code=e.code)
        except Exception as e:
            logfire.error("Unexpected email update error", error=str(e))
            return SignInFailure(message=UPDATE_ACCOUNT_APOLOGY)
        return self._record(SignInSuccess(principal=updated))

    async def _apply_display_name(
        self,
        outcome: SignInSuccess,
        given_name: str | None,
        family_name: str | None,
    ) -> SignInSuccess:
        display_name = f"{given_name or ''}{f' {family_name}' if family_name else ''}"
        if not display_name:
            # Apple only shares the name on the first authorization
            return outcome
        try:
            principal = await self.identity_provider.update_display_name(
                outcome.principal, display_name
            )
        except Exception as e:
            logfire.warn("Could not update display name", error=str(e))
            return outcome
        return SignInSuccess(principal=principal)

    def _record(self, outcome: SignInOutcome) -> SignInOutcome:
        if isinstance(outcome, SignInSuccess):
            self._update(principal=outcome.principal)
        return outcome

    def _update(self, **changes) -> None:
        changes["updated_at"] = datetime.now(timezone.utc)
        self._session = self._session.model_copy(update=changes)


def _no_current_user() -> SignInFailure:
    return SignInFailure(
        message="You need to be signed in to do that.", code="no-current-user"
    )
