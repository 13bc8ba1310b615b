"""Authentication session entity."""

from datetime import datetime, timezone

from pydantic import Field

from authlink.domain.model.common import DomainModel
from authlink.domain.value import Principal, SessionId


class AuthSession(DomainModel):
    """State of one client session.

    ``principal`` is None while unauthenticated. The phone verification id and
    the raw Apple nonce live here between the two halves of their flows.
    """

    id: SessionId
    principal: Principal | None = None
    phone_verification_id: str | None = None
    apple_raw_nonce: str | None = Field(default=None, repr=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None
