"""Session cookie helpers shared by the routes."""

import logging

from fastapi import HTTPException, Request, Response, status

from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.config import Settings
from authlink.domain.service import JWTService
from authlink.domain.value import SessionId

logger = logging.getLogger(__name__)


def require_session_id(
    http_request: Request, settings: Settings, jwt_service: JWTService
) -> SessionId:
    """Read the session ID from the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing or invalid
    """
    token = http_request.cookies.get(settings.auth.cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session required. Open one with POST /auth/session",
        )

    session_id = jwt_service.get_session_id_from_token(token)
    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session token",
        )
    return session_id


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session cookie to a response.

    Development (same-origin): samesite="lax", secure=False
    Production (HTTPS): samesite="none", secure=True
    """
    secure = settings.secure_cookies
    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
        path="/",
        max_age=settings.auth.session_expiry_days * 24 * 60 * 60,
    )


def session_expired() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session expired. Open a new one with POST /auth/session",
    )


def raise_for_failure(response: AuthResponse) -> AuthResponse:
    """Turn a failed outcome into a 400 carrying its message and code."""
    if not response.success:
        logger.info(f"Authentication request failed: code={response.code}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": response.message, "code": response.code},
        )
    return response
