"""Domain layer DI providers."""

from dishka import Scope, provide

from authlink.config import AppleSettings, AuthSettings, SessionSettings
from authlink.domain.service import IdentityProvider, JWTService, SessionService
from authlink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Domain services provider - concrete, no mocks needed.

    The session registry is APP-scoped: it holds every client session, and
    with them each session's pending link, for the life of the process.
    """

    scope = Scope.APP

    @provide
    def get_session_service(
        self,
        identity_provider: IdentityProvider,
        apple_settings: AppleSettings,
        session_settings: SessionSettings,
    ) -> SessionService:
        """Provide the session registry."""
        return SessionService(
            identity_provider=identity_provider,
            apple_settings=apple_settings,
            session_settings=session_settings,
        )

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide session token service."""
        return JWTService(auth_settings=auth_settings)
