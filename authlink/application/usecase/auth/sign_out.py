"""Sign-out use case."""

from pydantic import BaseModel

from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import SessionId


class SignOutRequest(BaseModel):
    session_id: SessionId


class SignOutResponse(BaseModel):
    success: bool
    message: str


class SignOutUseCase(BaseUseCase):
    """Use case for signing a session out.

    The session stays registered; any credential waiting to be linked is
    discarded.
    """

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: SignOutRequest) -> SignOutResponse:
        async def sign_out(service: AuthenticationService) -> None:
            await service.logout()

        await self.session_service.run(request.session_id, sign_out)
        return SignOutResponse(success=True, message="Signed out")
