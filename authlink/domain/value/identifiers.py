"""Strongly typed identifiers."""

from typing import NewType
from uuid import UUID

# Client session held by the session registry
SessionId = NewType("SessionId", UUID)

# Permanent user ID assigned by the identity provider (Firebase localId)
ProviderUid = NewType("ProviderUid", str)
