"""Firebase Authentication adapter."""

from .client import FirebaseIdentityProvider, RealFirebaseIdentityProvider
from .mock import MockFirebaseIdentityProvider

__all__ = [
    "FirebaseIdentityProvider",
    "RealFirebaseIdentityProvider",
    "MockFirebaseIdentityProvider",
]
