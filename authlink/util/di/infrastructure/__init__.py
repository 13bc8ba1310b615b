"""Infrastructure providers."""

# Import bases
from .firebase import FirebaseProvider

# Import implementations (needed for __subclasses__())
from .firebase import ProdFirebaseProvider  # noqa: F401

__all__ = [
    "FirebaseProvider",
    "ProdFirebaseProvider",
]
