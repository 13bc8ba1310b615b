"""Domain services."""

from .authentication_service import AuthenticationService
from .base import Service
from .identity_provider import IdentityProvider
from .jwt_service import JWTService
from .reconciler import AccountLinkReconciler
from .session_service import SessionHandle, SessionService

__all__ = [
    "AccountLinkReconciler",
    "AuthenticationService",
    "IdentityProvider",
    "JWTService",
    "Service",
    "SessionHandle",
    "SessionService",
]
