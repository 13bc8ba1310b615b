"""Firebase infrastructure providers."""

from dishka import Scope, provide

from authlink.adapter.firebase import RealFirebaseIdentityProvider
from authlink.config import IdentitySettings
from authlink.domain.service import IdentityProvider
from authlink.util.di.base import ProviderBase
from authlink.util.error import ConfigurationError


class FirebaseProvider(ProviderBase):
    """Firebase component base."""

    __mock_component__ = "firebase"


class ProdFirebaseProvider(FirebaseProvider):
    """Production Firebase provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(
        self, identity_settings: IdentitySettings
    ) -> IdentityProvider:
        """Provide the Identity Toolkit REST client.

        Raises:
            ConfigurationError: If the Firebase web API key is not configured
        """
        if not identity_settings.api_key:
            raise ConfigurationError("Firebase web API key must be configured")

        return RealFirebaseIdentityProvider(settings=identity_settings)
