"""Account management use cases."""

from pydantic import BaseModel, Field

from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import SessionId, SignInOutcome


class EmailExistsRequest(BaseModel):
    session_id: SessionId
    email: str


class EmailExistsResponse(BaseModel):
    exists: bool


class PasswordResetRequest(BaseModel):
    session_id: SessionId
    email: str


class ValidatePasswordRequest(BaseModel):
    session_id: SessionId
    password: str = Field(repr=False)


class UpdatePasswordRequest(BaseModel):
    session_id: SessionId
    password: str = Field(repr=False)


class UpdateEmailRequest(BaseModel):
    session_id: SessionId
    email: str


class ResultResponse(BaseModel):
    success: bool


class EmailExistsUseCase(BaseUseCase):
    """Use case for checking whether an email has an account."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: EmailExistsRequest) -> EmailExistsResponse:
        async def check(service: AuthenticationService) -> bool:
            return await service.email_exists(request.email)

        exists = await self.session_service.run(request.session_id, check)
        return EmailExistsResponse(exists=exists)


class SendPasswordResetUseCase(BaseUseCase):
    """Use case for emailing a password reset link."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: PasswordResetRequest) -> ResultResponse:
        async def send(service: AuthenticationService) -> bool:
            return await service.send_reset_password_link(request.email)

        sent = await self.session_service.run(request.session_id, send)
        return ResultResponse(success=sent)


class ValidatePasswordUseCase(BaseUseCase):
    """Use case for checking the signed-in user's current password."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: ValidatePasswordRequest) -> ResultResponse:
        async def validate(service: AuthenticationService) -> bool:
            return await service.validate_password(request.password)

        valid = await self.session_service.run(request.session_id, validate)
        return ResultResponse(success=valid)


class UpdatePasswordUseCase(BaseUseCase):
    """Use case for changing the signed-in user's password."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: UpdatePasswordRequest) -> AuthResponse:
        async def update(service: AuthenticationService) -> SignInOutcome:
            return await service.update_password(request.password)

        outcome = await self.session_service.run(request.session_id, update)
        return AuthResponse.from_outcome(outcome)


class UpdateEmailUseCase(BaseUseCase):
    """Use case for changing the signed-in user's email."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: UpdateEmailRequest) -> AuthResponse:
        async def update(service: AuthenticationService) -> SignInOutcome:
            return await service.update_email(request.email)

        outcome = await self.session_service.run(request.session_id, update)
        return AuthResponse.from_outcome(outcome)
