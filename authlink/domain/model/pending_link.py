"""Pending link request entity."""

from datetime import datetime, timezone

from pydantic import Field

from authlink.domain.model.common import DomainModel
from authlink.domain.value import Credential


class PendingLinkRequest(DomainModel):
    """A credential rejected because its email belongs to another sign-in method.

    Held by the account link reconciler until the user signs in with the
    recommended method, at which point the credential is linked to that
    account. At most one exists per reconciler: a new conflict replaces it,
    logout discards it.
    """

    conflicting_email: str
    rejected_credential: Credential
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
