"""Session use cases."""

from pydantic import BaseModel

from authlink.application.usecase.auth.sign_in import UserView
from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, JWTService, SessionService
from authlink.domain.value import SessionId


class OpenSessionResponse(BaseModel):
    """Newly opened session and the token identifying it."""

    session_id: str
    token: str


class GetSessionRequest(BaseModel):
    session_id: SessionId


class SessionResponse(BaseModel):
    """Current state of a session."""

    authenticated: bool
    user: UserView | None = None
    # Email of a credential waiting to be linked after the next sign-in
    pending_link_email: str | None = None


class OpenSessionUseCase(BaseUseCase):
    """Use case for registering a new client session."""

    def __init__(self, session_service: SessionService, jwt_service: JWTService):
        self.session_service = session_service
        self.jwt_service = jwt_service

    async def execute(self, request: None = None) -> OpenSessionResponse:
        handle = self.session_service.open_session()
        return OpenSessionResponse(
            session_id=str(handle.session_id),
            token=self.jwt_service.create_token(handle.session_id),
        )


class GetSessionUseCase(BaseUseCase):
    """Use case for reading the state of a session."""

    def __init__(self, session_service: SessionService):
        self.session_service = session_service

    async def execute(self, request: GetSessionRequest) -> SessionResponse:
        """Describe the session.

        Raises:
            NotFoundError: If the session does not exist or has expired
        """

        async def describe(service: AuthenticationService) -> SessionResponse:
            principal = service.current_user
            pending = service.reconciler.pending
            return SessionResponse(
                authenticated=principal is not None,
                user=UserView.from_principal(principal) if principal else None,
                pending_link_email=pending.conflicting_email if pending else None,
            )

        return await self.session_service.run(request.session_id, describe)
