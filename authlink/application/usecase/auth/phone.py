"""Phone verification use case."""

from pydantic import BaseModel

from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import SessionId, SignInFailure


class RequestVerificationCodeRequest(BaseModel):
    session_id: SessionId
    phone_number: str
    recaptcha_token: str | None = None


class RequestVerificationCodeUseCase(BaseUseCase):
    """Use case for sending an SMS code before ``OtpSignInRequest``."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: RequestVerificationCodeRequest) -> AuthResponse:
        async def send(service: AuthenticationService) -> SignInFailure | None:
            return await service.request_verification_code(
                request.phone_number, request.recaptcha_token
            )

        failure = await self.session_service.run(request.session_id, send)
        if failure is not None:
            return AuthResponse.from_failure(failure)
        return AuthResponse(success=True, message="Verification code sent")
