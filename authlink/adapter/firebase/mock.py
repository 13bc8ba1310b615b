"""In-memory Firebase identity provider for development and testing."""

from dataclasses import dataclass, field
from uuid import uuid4

from authlink.domain.error import (
    AccountExistsWithDifferentCredentialError,
    ProviderError,
)
from authlink.domain.value import (
    AnonymousCredential,
    AppleCredential,
    Credential,
    GoogleCredential,
    PasswordCredential,
    PhoneCredential,
    Principal,
    ProviderUid,
    SignInMethod,
)

from .client import FirebaseIdentityProvider

MIN_PASSWORD_LENGTH = 6


@dataclass
class MockAccount:
    """Account record held by the mock provider."""

    uid: str
    email: str | None = None
    password: str | None = None
    phone_number: str | None = None
    display_name: str | None = None
    is_anonymous: bool = False
    methods: list[str] = field(default_factory=list)


class MockFirebaseIdentityProvider(FirebaseIdentityProvider):
    """Mock provider enforcing one account per email.

    Federated ID tokens are minted with ``issue_id_token``; any SMS code other
    than ``VALID_SMS_CODE`` is rejected.
    """

    VALID_SMS_CODE = "123456"

    def __init__(self) -> None:
        self._accounts: dict[str, MockAccount] = {}
        self._federated_tokens: dict[str, tuple[SignInMethod, str]] = {}
        self._verifications: dict[str, str] = {}
        self.linked: list[tuple[str, SignInMethod]] = []
        self.signed_out: list[str] = []
        self.password_resets: list[str] = []

    def register(
        self, email: str, methods: list[str], password: str | None = None
    ) -> Principal:
        """Seed an account registered under the given methods."""
        account = MockAccount(
            uid=uuid4().hex, email=email, password=password, methods=list(methods)
        )
        self._accounts[account.uid] = account
        return self._principal(account)

    def issue_id_token(self, method: SignInMethod, email: str) -> str:
        """Mint a federated ID token asserting an email for a provider."""
        token = f"mock-{method.value}-{uuid4().hex}"
        self._federated_tokens[token] = (method, email)
        return token

    def account_for(self, email: str) -> MockAccount | None:
        return next(
            (a for a in self._accounts.values() if a.email == email), None
        )

    async def sign_in(self, credential: Credential) -> Principal:
        if isinstance(credential, PasswordCredential):
            account = self.account_for(credential.email)
            if account is None:
                raise ProviderError(
                    "user-not-found",
                    "There is no user record corresponding to this identifier.",
                )
            if account.password is None or account.password != credential.password:
                raise ProviderError(
                    "wrong-password",
                    "The password is invalid or the user does not have a password.",
                )
            return self._principal(account)

        if isinstance(credential, AnonymousCredential):
            account = MockAccount(uid=uuid4().hex, is_anonymous=True)
            self._accounts[account.uid] = account
            return self._principal(account)

        if isinstance(credential, PhoneCredential):
            phone_number = self._verify_sms(credential)
            account = next(
                (a for a in self._accounts.values() if a.phone_number == phone_number),
                None,
            )
            if account is None:
                account = MockAccount(
                    uid=uuid4().hex,
                    phone_number=phone_number,
                    methods=[SignInMethod.PHONE.value],
                )
                self._accounts[account.uid] = account
            return self._principal(account)

        return self._sign_in_federated(credential)

    async def create_account(self, email: str, password: str) -> Principal:
        self._check_email(email)
        self._check_password(password)
        if self.account_for(email) is not None:
            raise ProviderError(
                "email-already-in-use",
                "The email address is already in use by another account.",
            )
        return self.register(email, [SignInMethod.PASSWORD.value], password=password)

    async def link_credential(
        self, principal: Principal, credential: Credential
    ) -> Principal:
        account = self._account(principal)

        if isinstance(credential, AnonymousCredential):
            raise ProviderError(
                "operation-not-allowed",
                "Anonymous credentials cannot be linked to an account",
            )
        if credential.method.value in account.methods:
            raise ProviderError(
                "provider-already-linked",
                "User has already been linked to the given provider.",
            )

        if isinstance(credential, PasswordCredential):
            account.email = credential.email
            account.password = credential.password
        elif isinstance(credential, PhoneCredential):
            account.phone_number = self._verify_sms(credential)
        else:
            _, email = self._federated_claim(credential)
            account.email = account.email or email

        account.methods.append(credential.method.value)
        account.is_anonymous = False
        self.linked.append((account.uid, credential.method))
        return self._principal(account)

    async def list_sign_in_methods(self, email: str) -> list[str]:
        self._check_email(email)
        account = self.account_for(email)
        return list(account.methods) if account else []

    async def sign_out(self, principal: Principal) -> None:
        self.signed_out.append(principal.uid)

    async def send_password_reset_email(self, email: str) -> None:
        self._check_email(email)
        if self.account_for(email) is None:
            raise ProviderError(
                "user-not-found",
                "There is no user record corresponding to this identifier.",
            )
        self.password_resets.append(email)

    async def send_verification_code(
        self, phone_number: str, recaptcha_token: str | None = None
    ) -> str:
        if not phone_number.startswith("+"):
            raise ProviderError(
                "invalid-phone-number",
                "The format of the phone number provided is incorrect.",
            )
        verification_id = uuid4().hex
        self._verifications[verification_id] = phone_number
        return verification_id

    async def reauthenticate(
        self, principal: Principal, credential: Credential
    ) -> Principal:
        refreshed = await self.sign_in(credential)
        if refreshed.uid != principal.uid:
            raise ProviderError(
                "user-mismatch",
                "The supplied credentials do not correspond to the signed in user.",
            )
        return refreshed

    async def update_password(self, principal: Principal, password: str) -> Principal:
        self._check_password(password)
        account = self._account(principal)
        account.password = password
        return self._principal(account)

    async def update_email(self, principal: Principal, email: str) -> Principal:
        self._check_email(email)
        other = self.account_for(email)
        if other is not None and other.uid != principal.uid:
            raise ProviderError(
                "email-already-in-use",
                "The email address is already in use by another account.",
            )
        account = self._account(principal)
        account.email = email
        return self._principal(account)

    async def update_display_name(
        self, principal: Principal, display_name: str
    ) -> Principal:
        account = self._account(principal)
        account.display_name = display_name
        return self._principal(account)

    def _sign_in_federated(
        self, credential: GoogleCredential | AppleCredential
    ) -> Principal:
        method, email = self._federated_claim(credential)
        account = self.account_for(email)

        if account is None:
            account = MockAccount(uid=uuid4().hex, email=email, methods=[method.value])
            self._accounts[account.uid] = account
            return self._principal(account)

        if method.value not in account.methods:
            raise AccountExistsWithDifferentCredentialError(
                email=email, credential=credential
            )
        return self._principal(account)

    def _federated_claim(
        self, credential: GoogleCredential | AppleCredential
    ) -> tuple[SignInMethod, str]:
        claim = self._federated_tokens.get(credential.id_token)
        if claim is None or claim[0] != credential.method:
            raise ProviderError(
                "invalid-credential",
                "The supplied auth credential is malformed or has expired.",
            )
        return claim

    def _verify_sms(self, credential: PhoneCredential) -> str:
        phone_number = self._verifications.get(credential.verification_id)
        if phone_number is None:
            raise ProviderError(
                "invalid-verification-id",
                "The verification ID used to create the phone auth credential "
                "is invalid.",
            )
        if credential.sms_code != self.VALID_SMS_CODE:
            raise ProviderError(
                "invalid-verification-code",
                "The SMS verification code used to create the phone auth "
                "credential is invalid.",
            )
        return phone_number

    def _account(self, principal: Principal) -> MockAccount:
        account = self._accounts.get(principal.uid)
        if account is None:
            raise ProviderError(
                "user-not-found",
                "There is no user record corresponding to this identifier.",
            )
        return account

    @staticmethod
    def _check_email(email: str) -> None:
        if "@" not in email:
            raise ProviderError(
                "invalid-email", "The email address is badly formatted."
            )

    @staticmethod
    def _check_password(password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ProviderError(
                "weak-password", "Password should be at least 6 characters"
            )

    @staticmethod
    def _principal(account: MockAccount) -> Principal:
        return Principal(
            uid=ProviderUid(account.uid),
            email=account.email,
            display_name=account.display_name,
            phone_number=account.phone_number,
            is_anonymous=account.is_anonymous,
            provider_ids=tuple(account.methods),
            id_token=f"mock-id-token-{account.uid}",
            refresh_token=f"mock-refresh-token-{account.uid}",
        )
