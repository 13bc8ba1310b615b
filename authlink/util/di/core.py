"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from authlink.config import (
    AppleSettings,
    AuthSettings,
    IdentitySettings,
    SessionSettings,
    Settings,
)
from authlink.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Configuration provider.

    Settings are loaded from environment variables and .env file automatically;
    each nested section is also provided on its own.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def provide_identity_settings(self, settings: Settings) -> IdentitySettings:
        return settings.identity

    @provide
    def provide_apple_settings(self, settings: Settings) -> AppleSettings:
        return settings.apple

    @provide
    def provide_session_settings(self, settings: Settings) -> SessionSettings:
        return settings.sessions
