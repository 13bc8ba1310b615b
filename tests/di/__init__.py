"""Mock providers for testing."""

from .firebase import MockFirebaseProvider
from .container import build_test_container

__all__ = [
    "MockFirebaseProvider",
    "build_test_container",
]
