"""Application layer DI providers."""

from dishka import Scope, provide

from authlink.application.usecase.auth import (
    CreateAccountUseCase,
    EmailExistsUseCase,
    GetSessionUseCase,
    OpenSessionUseCase,
    PrepareAppleSignInUseCase,
    RequestVerificationCodeUseCase,
    SendPasswordResetUseCase,
    SignInUseCase,
    SignOutUseCase,
    UpdateEmailUseCase,
    UpdatePasswordUseCase,
    ValidatePasswordUseCase,
)
from authlink.domain.service import JWTService, SessionService
from authlink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Session use cases
    @provide
    def get_open_session_use_case(
        self, session_service: SessionService, jwt_service: JWTService
    ) -> OpenSessionUseCase:
        """Provide open session use case."""
        return OpenSessionUseCase(
            session_service=session_service, jwt_service=jwt_service
        )

    @provide
    def get_get_session_use_case(
        self, session_service: SessionService
    ) -> GetSessionUseCase:
        """Provide get session use case."""
        return GetSessionUseCase(session_service=session_service)

    # Sign-in use cases
    @provide
    def get_sign_in_use_case(self, session_service: SessionService) -> SignInUseCase:
        """Provide sign-in use case."""
        return SignInUseCase(session_service=session_service)

    @provide
    def get_create_account_use_case(
        self, session_service: SessionService
    ) -> CreateAccountUseCase:
        """Provide create account use case."""
        return CreateAccountUseCase(session_service=session_service)

    @provide
    def get_sign_out_use_case(self, session_service: SessionService) -> SignOutUseCase:
        """Provide sign-out use case."""
        return SignOutUseCase(session_service=session_service)

    @provide
    def get_request_verification_code_use_case(
        self, session_service: SessionService
    ) -> RequestVerificationCodeUseCase:
        """Provide phone verification use case."""
        return RequestVerificationCodeUseCase(session_service=session_service)

    @provide
    def get_prepare_apple_sign_in_use_case(
        self, session_service: SessionService
    ) -> PrepareAppleSignInUseCase:
        """Provide Sign in with Apple preparation use case."""
        return PrepareAppleSignInUseCase(session_service=session_service)

    # Account use cases
    @provide
    def get_email_exists_use_case(
        self, session_service: SessionService
    ) -> EmailExistsUseCase:
        return EmailExistsUseCase(session_service=session_service)

    @provide
    def get_send_password_reset_use_case(
        self, session_service: SessionService
    ) -> SendPasswordResetUseCase:
        return SendPasswordResetUseCase(session_service=session_service)

    @provide
    def get_validate_password_use_case(
        self, session_service: SessionService
    ) -> ValidatePasswordUseCase:
        return ValidatePasswordUseCase(session_service=session_service)

    @provide
    def get_update_password_use_case(
        self, session_service: SessionService
    ) -> UpdatePasswordUseCase:
        return UpdatePasswordUseCase(session_service=session_service)

    @provide
    def get_update_email_use_case(
        self, session_service: SessionService
    ) -> UpdateEmailUseCase:
        return UpdateEmailUseCase(session_service=session_service)
