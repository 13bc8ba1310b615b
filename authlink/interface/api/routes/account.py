"""Account management routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from authlink.application.usecase.auth import (
    EmailExistsUseCase,
    SendPasswordResetUseCase,
    UpdateEmailUseCase,
    UpdatePasswordUseCase,
    ValidatePasswordUseCase,
)
from authlink.application.usecase.auth.account import (
    EmailExistsRequest,
    EmailExistsResponse,
    PasswordResetRequest,
    ResultResponse,
    UpdateEmailRequest,
    UpdatePasswordRequest,
    ValidatePasswordRequest,
)
from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.config import Settings
from authlink.domain.error import NotFoundError
from authlink.domain.service import JWTService
from authlink.interface.api.session import (
    raise_for_failure,
    require_session_id,
    session_expired,
)

router = APIRouter(prefix="/auth", tags=["account"], route_class=DishkaRoute)


class EmailAPIRequest(BaseModel):
    email: str


class PasswordAPIRequest(BaseModel):
    password: str = Field(repr=False)


@router.get("/methods", response_model=EmailExistsResponse)
async def email_exists(
    email: str,
    http_request: Request,
    email_exists_use_case: FromDishka[EmailExistsUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> EmailExistsResponse:
    """Check whether an account is registered for an email."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        return await email_exists_use_case.execute(
            EmailExistsRequest(session_id=session_id, email=email)
        )
    except NotFoundError:
        raise session_expired()


@router.post("/password/reset", response_model=ResultResponse)
async def send_password_reset(
    request: EmailAPIRequest,
    http_request: Request,
    password_reset_use_case: FromDishka[SendPasswordResetUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> ResultResponse:
    """Email a password reset link."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        return await password_reset_use_case.execute(
            PasswordResetRequest(session_id=session_id, email=request.email)
        )
    except NotFoundError:
        raise session_expired()


@router.post("/password/validate", response_model=ResultResponse)
async def validate_password(
    request: PasswordAPIRequest,
    http_request: Request,
    validate_password_use_case: FromDishka[ValidatePasswordUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> ResultResponse:
    """Check the signed-in user's current password."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        return await validate_password_use_case.execute(
            ValidatePasswordRequest(session_id=session_id, password=request.password)
        )
    except NotFoundError:
        raise session_expired()


@router.put("/password", response_model=AuthResponse)
async def update_password(
    request: PasswordAPIRequest,
    http_request: Request,
    update_password_use_case: FromDishka[UpdatePasswordUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Change the signed-in user's password."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        response = await update_password_use_case.execute(
            UpdatePasswordRequest(session_id=session_id, password=request.password)
        )
    except NotFoundError:
        raise session_expired()
    return raise_for_failure(response)


@router.put("/email", response_model=AuthResponse)
async def update_email(
    request: EmailAPIRequest,
    http_request: Request,
    update_email_use_case: FromDishka[UpdateEmailUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AuthResponse:
    """Change the signed-in user's email."""
    session_id = require_session_id(http_request, settings, jwt_service)
    try:
        response = await update_email_use_case.execute(
            UpdateEmailRequest(session_id=session_id, email=request.email)
        )
    except NotFoundError:
        raise session_expired()
    return raise_for_failure(response)
