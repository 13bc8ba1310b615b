"""Firebase Authentication client.

Talks to the Identity Toolkit REST API
(https://identitytoolkit.googleapis.com/v1) with the project's web API key.
"""

from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import httpx
import logfire

from authlink.config import IdentitySettings
from authlink.domain.error import (
    AccountExistsWithDifferentCredentialError,
    ProviderError,
)
from authlink.domain.service.identity_provider import IdentityProvider
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

from .errors import translate_rest_error


class FirebaseIdentityProvider(IdentityProvider):
    """Base class for Firebase identity providers.

    Provides type distinction for dependency injection.
    """

    pass


class RealFirebaseIdentityProvider(FirebaseIdentityProvider):
    """Identity provider backed by the Identity Toolkit REST API."""

    def __init__(
        self,
        settings: IdentitySettings,
        client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient,
    ) -> None:
        """Initialize Firebase client.

        Args:
            settings: Identity Toolkit configuration
            client_factory: Builds the HTTP client used for each request
        """
        self.api_key = settings.api_key
        self.base_url = settings.base_url.rstrip("/")
        self.request_uri = settings.request_uri
        self.timeout = settings.timeout_seconds
        self._client_factory = client_factory

    async def sign_in(self, credential: Credential) -> Principal:
        with logfire.span("firebase.sign_in", method=credential.method.value):
            if isinstance(credential, PasswordCredential):
                data = await self._post(
                    "accounts:signInWithPassword",
                    {
                        "email": credential.email,
                        "password": credential.password,
                        "returnSecureToken": True,
                    },
                )
                return _principal_from(data, (SignInMethod.PASSWORD.value,))

            if isinstance(credential, AnonymousCredential):
                data = await self._post("accounts:signUp", {"returnSecureToken": True})
                return _principal_from(data, (), is_anonymous=True)

            if isinstance(credential, PhoneCredential):
                data = await self._post(
                    "accounts:signInWithPhoneNumber",
                    {
                        "sessionInfo": credential.verification_id,
                        "code": credential.sms_code,
                    },
                )
                return _principal_from(data, (SignInMethod.PHONE.value,))

            return await self._sign_in_with_idp(credential)

    async def create_account(self, email: str, password: str) -> Principal:
        with logfire.span("firebase.create_account"):
            data = await self._post(
                "accounts:signUp",
                {"email": email, "password": password, "returnSecureToken": True},
            )
            return _principal_from(data, (SignInMethod.PASSWORD.value,))

    async def link_credential(
        self, principal: Principal, credential: Credential
    ) -> Principal:
        with logfire.span("firebase.link_credential", method=credential.method.value):
            id_token = _require_id_token(principal)

            if isinstance(credential, PasswordCredential):
                data = await self._post(
                    "accounts:update",
                    {
                        "idToken": id_token,
                        "email": credential.email,
                        "password": credential.password,
                        "returnSecureToken": True,
                    },
                )
            elif isinstance(credential, PhoneCredential):
                data = await self._post(
                    "accounts:signInWithPhoneNumber",
                    {
                        "idToken": id_token,
                        "sessionInfo": credential.verification_id,
                        "code": credential.sms_code,
                    },
                )
            elif isinstance(credential, (GoogleCredential, AppleCredential)):
                data = await self._post(
                    "accounts:signInWithIdp",
                    {
                        "idToken": id_token,
                        "postBody": _idp_post_body(credential),
                        "requestUri": self.request_uri,
                        "returnIdpCredential": True,
                        "returnSecureToken": True,
                    },
                )
            else:
                raise ProviderError(
                    "operation-not-allowed",
                    "Anonymous credentials cannot be linked to an account",
                )

            provider_ids = tuple(
                dict.fromkeys((*principal.provider_ids, credential.method.value))
            )
            return _merge_principal(principal, data, provider_ids, is_anonymous=False)

    async def list_sign_in_methods(self, email: str) -> list[str]:
        with logfire.span("firebase.list_sign_in_methods"):
            data = await self._post(
                "accounts:createAuthUri",
                {"identifier": email, "continueUri": self.request_uri},
            )
            return list(data.get("signinMethods", []))

    async def sign_out(self, principal: Principal) -> None:
        # ID tokens are held by the client; there is no server session to end
        logfire.info("Firebase sign-out", uid=principal.uid)

    async def send_password_reset_email(self, email: str) -> None:
        with logfire.span("firebase.send_password_reset_email"):
            await self._post(
                "accounts:sendOobCode", {"requestType": "PASSWORD_RESET", "email": email}
            )

    async def send_verification_code(
        self, phone_number: str, recaptcha_token: str | None = None
    ) -> str:
        with logfire.span("firebase.send_verification_code"):
            payload: dict[str, Any] = {"phoneNumber": phone_number}
            if recaptcha_token:
                payload["recaptchaToken"] = recaptcha_token
            data = await self._post("accounts:sendVerificationCode", payload)
            return data["sessionInfo"]

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
        return await self._update(principal, {"password": password})

    async def update_email(self, principal: Principal, email: str) -> Principal:
        return await self._update(principal, {"email": email})

    async def update_display_name(
        self, principal: Principal, display_name: str
    ) -> Principal:
        return await self._update(principal, {"displayName": display_name})

    async def _sign_in_with_idp(
        self, credential: GoogleCredential | AppleCredential
    ) -> Principal:
        data = await self._post(
            "accounts:signInWithIdp",
            {
                "postBody": _idp_post_body(credential),
                "requestUri": self.request_uri,
                "returnIdpCredential": True,
                "returnSecureToken": True,
            },
        )

        # With one account per email, Firebase answers 200 and asks for
        # confirmation instead of signing in
        if data.get("needConfirmation"):
            logfire.info(
                "Federated sign-in needs confirmation",
                method=credential.method.value,
            )
            raise AccountExistsWithDifferentCredentialError(
                email=data.get("email", ""),
                credential=credential,
            )

        return _principal_from(data, (credential.method.value,))

    async def _update(self, principal: Principal, changes: dict[str, Any]) -> Principal:
        with logfire.span("firebase.update_account", fields=sorted(changes)):
            data = await self._post(
                "accounts:update",
                {
                    "idToken": _require_id_token(principal),
                    "returnSecureToken": True,
                    **changes,
                },
            )
            return _merge_principal(principal, data, principal.provider_ids)

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST to an Identity Toolkit endpoint.

        Raises:
            ProviderError: On an error response or transport failure
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            async with self._client_factory() as client:
                response = await client.post(
                    url,
                    params={"key": self.api_key},
                    json=payload,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("Identity Toolkit HTTP error", endpoint=endpoint, error=str(e))
            raise ProviderError("network-request-failed", str(e))

        if response.status_code != 200:
            raw_message = _error_message(response)
            logfire.warn(
                "Identity Toolkit request failed",
                endpoint=endpoint,
                status_code=response.status_code,
                error=raw_message,
            )
            raise translate_rest_error(raw_message)

        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP_{response.status_code}"


def _idp_post_body(credential: GoogleCredential | AppleCredential) -> str:
    params = {"id_token": credential.id_token, "providerId": credential.method.value}
    if isinstance(credential, GoogleCredential) and credential.access_token:
        params["access_token"] = credential.access_token
    if isinstance(credential, AppleCredential):
        params["nonce"] = credential.raw_nonce
        if credential.authorization_code:
            params["code"] = credential.authorization_code
    return urlencode(params)


def _require_id_token(principal: Principal) -> str:
    if not principal.id_token:
        raise ProviderError("invalid-user-token", "The user has no ID token")
    return principal.id_token


def _principal_from(
    data: dict[str, Any], provider_ids: tuple[str, ...], is_anonymous: bool = False
) -> Principal:
    return Principal(
        uid=ProviderUid(data["localId"]),
        email=data.get("email") or None,
        display_name=data.get("displayName") or None,
        phone_number=data.get("phoneNumber") or None,
        is_anonymous=is_anonymous,
        provider_ids=provider_ids,
        id_token=data.get("idToken"),
        refresh_token=data.get("refreshToken"),
    )


def _merge_principal(
    principal: Principal,
    data: dict[str, Any],
    provider_ids: tuple[str, ...],
    is_anonymous: bool | None = None,
) -> Principal:
    """Apply an update response to a principal, keeping fields it omits."""
    return principal.model_copy(
        update={
            "email": data.get("email") or principal.email,
            "display_name": data.get("displayName") or principal.display_name,
            "phone_number": data.get("phoneNumber") or principal.phone_number,
            "is_anonymous": (
                principal.is_anonymous if is_anonymous is None else is_anonymous
            ),
            "provider_ids": provider_ids,
            "id_token": data.get("idToken") or principal.id_token,
            "refresh_token": data.get("refreshToken") or principal.refresh_token,
        }
    )
