"""Create account use case."""

from pydantic import BaseModel, Field

from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import SessionId, SignInOutcome


class CreateAccountRequest(BaseModel):
    session_id: SessionId
    email: str
    password: str = Field(repr=False)


class CreateAccountUseCase(BaseUseCase):
    """Use case for registering an email/password account."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: CreateAccountRequest) -> AuthResponse:
        async def create(service: AuthenticationService) -> SignInOutcome:
            return await service.create_account_with_email(
                request.email, request.password
            )

        outcome = await self.session_service.run(request.session_id, create)
        return AuthResponse.from_outcome(outcome)
