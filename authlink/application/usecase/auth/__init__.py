"""Authentication use cases."""

from .account import (
    EmailExistsUseCase,
    SendPasswordResetUseCase,
    UpdateEmailUseCase,
    UpdatePasswordUseCase,
    ValidatePasswordUseCase,
)
from .apple import PrepareAppleSignInUseCase
from .create_account import CreateAccountUseCase
from .phone import RequestVerificationCodeUseCase
from .session import GetSessionUseCase, OpenSessionUseCase
from .sign_in import SignInUseCase
from .sign_out import SignOutUseCase

__all__ = [
    "CreateAccountUseCase",
    "EmailExistsUseCase",
    "GetSessionUseCase",
    "OpenSessionUseCase",
    "PrepareAppleSignInUseCase",
    "RequestVerificationCodeUseCase",
    "SendPasswordResetUseCase",
    "SignInUseCase",
    "SignOutUseCase",
    "UpdateEmailUseCase",
    "UpdatePasswordUseCase",
    "ValidatePasswordUseCase",
]
