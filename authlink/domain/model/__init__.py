"""Domain model entities for authlink."""

from authlink.domain.model.pending_link import PendingLinkRequest
from authlink.domain.model.session import AuthSession

__all__ = [
    "AuthSession",
    "PendingLinkRequest",
]
