"""JWT token utilities for the session cookie."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from pydantic import BaseModel

from authlink.config import AuthSettings


class TokenPayload(BaseModel):
    """Session token payload."""

    session_id: UUID
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(session_id: UUID, settings: AuthSettings) -> str:
    """Create a signed token identifying a session.

    Args:
        session_id: Session ID
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.session_expiry_days)

    payload = {
        "session_id": str(session_id),
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")
