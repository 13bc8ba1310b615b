"""Sign-in use case."""

from pydantic import BaseModel, Field

from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import (
    Principal,
    SessionId,
    SignInFailure,
    SignInOutcome,
    SignInSuccess,
)


class UserView(BaseModel):
    """Principal as exposed to clients (tokens excluded)."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    phone_number: str | None = None
    is_anonymous: bool = False
    provider_ids: list[str] = []

    @classmethod
    def from_principal(cls, principal: Principal) -> "UserView":
        return cls(
            uid=principal.uid,
            email=principal.email,
            display_name=principal.display_name,
            phone_number=principal.phone_number,
            is_anonymous=principal.is_anonymous,
            provider_ids=list(principal.provider_ids),
        )


class AuthResponse(BaseModel):
    """Outcome of a sign-in or account update."""

    success: bool
    user: UserView | None = None
    message: str | None = None
    code: str | None = None

    @classmethod
    def from_outcome(cls, outcome: SignInOutcome) -> "AuthResponse":
        if isinstance(outcome, SignInSuccess):
            return cls(success=True, user=UserView.from_principal(outcome.principal))
        return cls.from_failure(outcome)

    @classmethod
    def from_failure(cls, failure: SignInFailure) -> "AuthResponse":
        return cls(success=False, message=failure.message, code=failure.code)


class EmailSignInRequest(BaseModel):
    session_id: SessionId
    email: str
    password: str = Field(repr=False)


class AnonymousSignInRequest(BaseModel):
    session_id: SessionId


class GoogleSignInRequest(BaseModel):
    session_id: SessionId
    id_token: str = Field(repr=False)
    access_token: str | None = Field(default=None, repr=False)


class AppleTokenSignInRequest(BaseModel):
    """Identity token returned by Apple after ``PrepareAppleSignInUseCase``."""

    session_id: SessionId
    id_token: str = Field(repr=False)
    authorization_code: str | None = Field(default=None, repr=False)
    given_name: str | None = None
    family_name: str | None = None
    ask_for_full_name: bool = True


class OtpSignInRequest(BaseModel):
    session_id: SessionId
    otp: str = Field(repr=False)


SignInRequest = (
    EmailSignInRequest
    | AnonymousSignInRequest
    | GoogleSignInRequest
    | AppleTokenSignInRequest
    | OtpSignInRequest
)


class SignInUseCase(BaseUseCase):
    """Use case for signing a session in with any supported method.

    A credential that collides with an existing account is kept by the
    session and linked on its next successful sign-in.
    """

    def __init__(self, session_service: SessionService) -> None:
        """Initialize sign-in use case.

        Args:
            session_service: Session registry
        """
        self.session_service = session_service

    async def execute(self, request: SignInRequest) -> AuthResponse:
        """Sign in.

        Raises:
            NotFoundError: If the session does not exist or has expired
        """

        async def sign_in(service: AuthenticationService) -> SignInOutcome:
            if isinstance(request, EmailSignInRequest):
                return await service.login_with_email(request.email, request.password)
            if isinstance(request, AnonymousSignInRequest):
                return await service.login_anonymously()
            if isinstance(request, GoogleSignInRequest):
                return await service.sign_in_with_google(
                    request.id_token, request.access_token
                )
            if isinstance(request, AppleTokenSignInRequest):
                return await service.sign_in_with_apple(
                    request.id_token,
                    authorization_code=request.authorization_code,
                    given_name=request.given_name,
                    family_name=request.family_name,
                    ask_for_full_name=request.ask_for_full_name,
                )
            return await service.authenticate_with_otp(request.otp)

        outcome = await self.session_service.run(request.session_id, sign_in)
        return AuthResponse.from_outcome(outcome)
