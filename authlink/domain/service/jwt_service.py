"""Session token domain service."""

import logfire

from authlink.config import AuthSettings
from authlink.domain.value import SessionId
from authlink.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Signs and verifies the session cookie."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, session_id: SessionId) -> str:
        with logfire.span("jwt_service.create_token", session_id=str(session_id)):
            return create_token(session_id, self.auth_settings)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a session token.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                return verify_token(token, self.auth_settings)
            except Exception as e:
                logfire.warn("Session token verification failed", error=str(e))
                raise

    def get_session_id_from_token(self, token: str | None) -> SessionId | None:
        """Extract the session ID without raising.

        Returns:
            Session ID if the token is valid, None if missing or invalid
        """
        if not token:
            return None

        try:
            payload = self.verify_token(token)
        except Exception as e:
            logfire.debug("Ignoring invalid session token", error=str(e))
            return None
        return SessionId(payload.session_id)
