"""Session registry domain service."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TypeVar
from uuid import uuid4

import logfire

from authlink.config import AppleSettings, SessionSettings
from authlink.domain.error import NotFoundError
from authlink.domain.value import SessionId

from .authentication_service import AuthenticationService
from .base import Service
from .identity_provider import IdentityProvider

T = TypeVar("T")


@dataclass
class SessionHandle:
    """A registered session: its service and the lock serializing calls on it."""

    service: AuthenticationService
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_seen_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def session_id(self) -> SessionId:
        return self.service.session.id


class SessionService(Service):
    """In-memory registry of client sessions.

    Each session owns one AuthenticationService, and therefore one account
    link reconciler. Calls on the same session run one at a time through
    ``run``; different sessions never block each other.

    Sessions do not survive a restart. Clients whose session is gone open a
    new one and sign in again; any pending link is lost with it.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        apple_settings: AppleSettings,
        session_settings: SessionSettings,
    ) -> None:
        """Initialize session service.

        Args:
            identity_provider: Identity provider shared by all sessions
            apple_settings: Sign in with Apple configuration
            session_settings: Idle timeout configuration
        """
        self.identity_provider = identity_provider
        self.apple_settings = apple_settings
        self.idle_timeout = timedelta(minutes=session_settings.idle_timeout_minutes)
        self._sessions: dict[SessionId, SessionHandle] = {}

    def open_session(self) -> SessionHandle:
        """Create and register a new session, evicting idle ones first."""
        self.evict_idle()
        session_id = SessionId(uuid4())
        handle = SessionHandle(
            service=AuthenticationService(
                session_id=session_id,
                identity_provider=self.identity_provider,
                apple_settings=self.apple_settings,
            )
        )
        self._sessions[session_id] = handle
        logfire.info("Session opened", session_id=str(session_id))
        return handle

    def get(self, session_id: SessionId) -> SessionHandle | None:
        """Get a live session, evicting it if it has been idle too long."""
        handle = self._sessions.get(session_id)
        if handle is None:
            return None

        now = datetime.now(timezone.utc)
        if now - handle.last_seen_at > self.idle_timeout:
            self._sessions.pop(session_id, None)
            logfire.info("Session expired", session_id=str(session_id))
            return None

        handle.last_seen_at = now
        return handle

    def evict_idle(self) -> int:
        """Forget every session idle longer than the timeout.

        Sessions with a call in progress are skipped.

        Returns:
            Number of sessions evicted
        """
        now = datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, handle in self._sessions.items()
            if not handle.lock.locked()
            and now - handle.last_seen_at > self.idle_timeout
        ]
        for session_id in expired:
            self._sessions.pop(session_id, None)

        if expired:
            logfire.info("Idle sessions evicted", count=len(expired))
        return len(expired)

    async def run(
        self,
        session_id: SessionId,
        operation: Callable[[AuthenticationService], Awaitable[T]],
    ) -> T:
        """Run an operation on a session's service, one call at a time.

        Raises:
            NotFoundError: If the session does not exist or has expired
        """
        handle = self.get(session_id)
        if handle is None:
            raise NotFoundError("Session", str(session_id))

        async with handle.lock:
            return await operation(handle.service)

    async def close(self, session_id: SessionId) -> None:
        """Log the session out and forget it."""
        handle = self._sessions.get(session_id)
        if handle is None:
            return

        async with handle.lock:
            await handle.service.logout()
        self._sessions.pop(session_id, None)
        logfire.info("Session closed", session_id=str(session_id))

    def __len__(self) -> int:
        return len(self._sessions)
