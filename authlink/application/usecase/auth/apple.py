"""Sign in with Apple preparation use case."""

from pydantic import BaseModel

from authlink.application.usecase.auth.sign_in import AuthResponse
from authlink.application.usecase.base import BaseUseCase
from authlink.domain.service import AuthenticationService, SessionService
from authlink.domain.value import AppleSignInRequest, SessionId, SignInFailure


class PrepareAppleSignInRequest(BaseModel):
    session_id: SessionId
    # Apple rejects apps that ask for the name without using it
    ask_for_full_name: bool = True


class PrepareAppleSignInResponse(BaseModel):
    """Parameters for the client's Apple authorization request."""

    client_id: str
    redirect_uri: str
    nonce: str
    scopes: list[str]


class PrepareAppleSignInUseCase(BaseUseCase):
    """Use case for starting Sign in with Apple on a session."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(
        self, request: PrepareAppleSignInRequest
    ) -> PrepareAppleSignInResponse | AuthResponse:
        async def prepare(
            service: AuthenticationService,
        ) -> AppleSignInRequest | SignInFailure:
            return service.prepare_apple_sign_in()

        result = await self.session_service.run(request.session_id, prepare)
        if isinstance(result, SignInFailure):
            return AuthResponse.from_failure(result)

        return PrepareAppleSignInResponse(
            client_id=result.client_id,
            redirect_uri=result.redirect_uri,
            nonce=result.nonce,
            scopes=["email", "name"] if request.ask_for_full_name else ["email"],
        )
