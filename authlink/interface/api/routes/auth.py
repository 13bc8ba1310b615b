"""Authentication routes.

Every call after ``POST /auth/session`` identifies its session through the
HTTP-only session cookie. A sign-in that collides with an existing account
answers 400 with a message naming the method to use instead; the rejected
credential is linked once the session signs in with that method.
"""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, Field

from authlink.application.usecase.auth import (
    CreateAccountUseCase,
    GetSessionUseCase,
    OpenSessionUseCase,
    PrepareAppleSignInUseCase,
    RequestVerificationCodeUseCase,
    SignInUseCase,
    SignOutUseCase,
)
from authlink.application.usecase.auth.apple import (
    PrepareAppleSignInRequest,
    PrepareAppleSignInResponse,
)
from authlink.application.usecase.auth.create_account import CreateAccountRequest
from authlink.application.usecase.auth.phone import RequestVerificationCodeRequest
from authlink.application.usecase.auth.session import (
    GetSessionRequest,
    OpenSessionResponse,
    SessionResponse,
)
from authlink.application.usecase.auth.sign_in import (
    AnonymousSignInRequest,
    AppleTokenSignInRequest,
    AuthResponse,
    EmailSignInRequest,
    GoogleSignInRequest,
    OtpSignInRequest,
    SignInRequest,
)
from authlink.application.usecase.auth.sign_out import (
    SignOutRequest,
    SignOutResponse,
)
from authlink.config import Settings
from authlink.domain.error import NotFoundError
from authlink.domain.service import JWTService
from authlink.interface.api.session import (
    raise_for_failure,
    require_session_id,
    session_expired,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class EmailCredentialsAPIRequest(BaseModel):
    """Email and password, for sign-in and account creation."""

    email: str
    password: str = Field(repr=False)


class GoogleSignInAPIRequest(BaseModel):
    """Tokens obtained by the client from Google Sign-In."""

    id_token: str = Field(repr=False)
    access_token: str | None = Field(default=None, repr=False)


class AppleSignInAPIRequest(BaseModel):
    """Apple authorization result.

    The identity token must have been requested with the nonce returned by
    ``GET /auth/sign-in/apple/request``.
    """

    id_token: str = Field(repr=False)
    authorization_code: str | None = Field(default=None, repr=False)
    given_name: str | None = None
    family_name: str | None = None
    ask_for_full_name: bool = True


class VerificationCodeAPIRequest(BaseModel):
    phone_number: str
    recaptcha_token: str | None = Field(default=None, repr=False)


class OtpAPIRequest(BaseModel):
    otp: str = Field(repr=False)


@router.post("/session", response_model=OpenSessionResponse)
async def open_session(
    response: Response,
    open_session_use_case: FromDishka[OpenSessionUseCase],
    settings: FromDishka[Settings],
) -> OpenSessionResponse:
    """Open a new client session and set its cookie.

    Returns:
        Session ID and the signed token also stored in the cookie
    """
    opened = await open_session_use_case.execute()
    set_session_cookie(response, opened.token, settings)
    logger.info(f"Opened session {opened.session_id}")
    return opened


@router.get("/session", response_model=SessionResponse)
async def get_session(
    http_request: Request,
    get_session_use_case: FromDishka[GetSessionUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> SessionResponse:
    """Get the session's signed-in user, if any.

    Safe to call without a session: it answers ``authenticated=false``
    instead of raising, so clients can probe their state.

    Examples:
        Signed in:
        {
            "authenticated": true,
            "user": {"uid": "...", "email": "alice@example.com", ...},
            "pending_link_email": null
        }

        After a conflicting Google sign-in:
        {
            "authenticated": false,
            "user": null,
            "pending_link_email": "alice@example.com"
        }
    """
    token = http_request.cookies.get(settings.auth.cookie_name)
    session_id = jwt_service.get_session_id_from_token(token)
    if session_id is None:
        return SessionResponse(authenticated=False)

    try:
        return await get_session_use_case.execute(
            GetSessionRequest(session_id=session_id)
        )
    except NotFoundError:
        return SessionResponse(authenticated=False)


@router.post("/sign-in/email", response_model=AuthResponse)
async def sign_in_with_email(
    request: EmailCredentialsAPIRequest,
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in with email and password."""
    session_id = require_session_id(http_request, settings, jwt_service)
    return await _sign_in(
        sign_in_use_case,
        EmailSignInRequest(
            session_id=session_id, email=request.email, password=request.password
        ),
    )


@router.post("/sign-in/anonymous", response_model=AuthResponse)
async def sign_in_anonymously(
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in as a guest."""
    session_id = require_session_id(http_request, settings, jwt_service)
    return await _sign_in(
        sign_in_use_case, AnonymousSignInRequest(session_id=session_id)
    )


@router.post("/sign-in/google", response_model=AuthResponse)
async def sign_in_with_google(
    request: GoogleSignInAPIRequest,
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in with a Google ID token.

    Example conflict (400):
        {
            "detail": {
                "message": "To link your Google account with your existing account, please sign in with your email address and password.",
                "code": "account-exists-with-different-credential"
            }
        }
    """
    session_id = require_session_id(http_request, settings, jwt_service)
    return await _sign_in(
        sign_in_use_case,
        GoogleSignInRequest(
            session_id=session_id,
            id_token=request.id_token,
            access_token=request.access_token,
        ),
    )


@router.get("/sign-in/apple/request", response_model=PrepareAppleSignInResponse)
async def prepare_apple_sign_in(
    http_request: Request,
    prepare_use_case: FromDishka[PrepareAppleSignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
    ask_for_full_name: bool = True,
) -> PrepareAppleSignInResponse:
    """Get the parameters for the client's Apple authorization request.

    The returned nonce is the SHA-256 of a single-use value kept by the session.
    """
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        result = await prepare_use_case.execute(
            PrepareAppleSignInRequest(
                session_id=session_id, ask_for_full_name=ask_for_full_name
            )
        )
    except NotFoundError:
        raise session_expired()

    if isinstance(result, AuthResponse):
        raise_for_failure(result)
    return result


@router.post("/sign-in/apple", response_model=AuthResponse)
async def sign_in_with_apple(
    request: AppleSignInAPIRequest,
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in with an Apple identity token."""
    session_id = require_session_id(http_request, settings, jwt_service)
    return await _sign_in(
        sign_in_use_case,
        AppleTokenSignInRequest(
            session_id=session_id,
            id_token=request.id_token,
            authorization_code=request.authorization_code,
            given_name=request.given_name,
            family_name=request.family_name,
            ask_for_full_name=request.ask_for_full_name,
        ),
    )


@router.post("/phone/verification", response_model=AuthResponse)
async def request_verification_code(
    request: VerificationCodeAPIRequest,
    http_request: Request,
    verification_use_case: FromDishka[RequestVerificationCodeUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Send an SMS verification code to a phone number (E.164 format)."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        response = await verification_use_case.execute(
            RequestVerificationCodeRequest(
                session_id=session_id,
                phone_number=request.phone_number,
                recaptcha_token=request.recaptcha_token,
            )
        )
    except NotFoundError:
        raise session_expired()
    return raise_for_failure(response)


@router.post("/phone/otp", response_model=AuthResponse)
async def sign_in_with_otp(
    request: OtpAPIRequest,
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Sign in with the SMS code sent by ``POST /auth/phone/verification``."""
    session_id = require_session_id(http_request, settings, jwt_service)
    return await _sign_in(
        sign_in_use_case, OtpSignInRequest(session_id=session_id, otp=request.otp)
    )


@router.post("/accounts", response_model=AuthResponse)
async def create_account(
    request: EmailCredentialsAPIRequest,
    http_request: Request,
    create_account_use_case: FromDishka[CreateAccountUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Register an email/password account and sign the session in."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        response = await create_account_use_case.execute(
            CreateAccountRequest(
                session_id=session_id, email=request.email, password=request.password
            )
        )
    except NotFoundError:
        raise session_expired()
    return raise_for_failure(response)


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(
    http_request: Request,
    sign_out_use_case: FromDishka[SignOutUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> SignOutResponse:
    """Sign the session out, discarding any credential waiting to be linked."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        return await sign_out_use_case.execute(SignOutRequest(session_id=session_id))
    except NotFoundError:
        raise session_expired()


async def _sign_in(use_case: SignInUseCase, request: SignInRequest) -> AuthResponse:
    try:
        response = await use_case.execute(request)
    except NotFoundError:
        raise session_expired()
    return raise_for_failure(response)
