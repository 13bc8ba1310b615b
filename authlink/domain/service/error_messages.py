"""User-facing messages for provider errors and sign-in conflicts."""

from authlink.domain.error import ProviderError
from authlink.domain.value import SignInMethod

ERROR_MESSAGES: dict[str, str] = {
    "email-already-in-use": (
        "An account already exists for the email you're trying to use. "
        "Login instead."
    ),
    "invalid-email": "The email you're using is invalid. Please use a valid email.",
    "operation-not-allowed": (
        "The authentication is not enabled on Firebase. "
        "Please enable the Authentitcation type on Firebase"
    ),
    "weak-password": "Your password is too weak. Please use a stronger password.",
    "wrong-password": (
        "You seemed to have entered the wrong password. "
        "Double check it and try again."
    ),
}

DEFAULT_ERROR_MESSAGE = "Something went wrong on our side. Please try again"

# Fixed apologies for failures that carry no provider code
SIGN_IN_APOLOGY = "We could not log into your account at this time. Please try again."
CREATE_ACCOUNT_APOLOGY = (
    "We could not create your account at this time. Please try again."
)
OTP_APOLOGY = "We could not authenticate with OTP at this time. Please try again."
VERIFICATION_CODE_APOLOGY = (
    "We could not send a verification code to your phone number. Please try again."
)
UPDATE_ACCOUNT_APOLOGY = (
    "We could not update your account at this time. Please try again."
)


def message_for_error(error: ProviderError) -> str:
    """Translate a provider error into a message for the user.

    Known codes are matched case-insensitively; anything else falls back to
    the provider's own message.
    """
    message = ERROR_MESSAGES.get(error.code.lower())
    if message:
        return message
    return error.message or DEFAULT_ERROR_MESSAGE


def conflict_message(recommended_method: str, rejected_method: SignInMethod) -> str:
    """Tell the user which method to sign in with after a credential conflict.

    Args:
        recommended_method: First method the provider lists for the email
        rejected_method: Method of the credential that hit the conflict
    """
    if recommended_method == SignInMethod.PASSWORD.value:
        return (
            f"To link your {rejected_method.label} account with your existing "
            "account, please sign in with your email address and password."
        )

    if recommended_method == SignInMethod.GOOGLE.value:
        return (
            "We could not log into your account but we noticed you have a Google "
            "account with the same details. Please try to login with Google."
        )

    # "apple" is the tag older projects report
    if recommended_method in (SignInMethod.APPLE.value, "apple"):
        return (
            "We could not log into your account but we noticed you have a Apple "
            "account with the same details. Please try to login with your Apple "
            "account instead."
        )

    return (
        "We could not log into your account but we noticed you have a "
        f"{recommended_method} account with the same details. "
        "Please try to login with that instead."
    )
