"""Identity Toolkit REST error translation."""

from authlink.domain.error import ProviderError

# REST error message prefix -> client SDK error code
REST_ERROR_CODES: dict[str, str] = {
    "EMAIL_EXISTS": "email-already-in-use",
    "INVALID_EMAIL": "invalid-email",
    "OPERATION_NOT_ALLOWED": "operation-not-allowed",
    "WEAK_PASSWORD": "weak-password",
    "INVALID_PASSWORD": "wrong-password",
    "EMAIL_NOT_FOUND": "user-not-found",
    "INVALID_LOGIN_CREDENTIALS": "invalid-credential",
    "INVALID_IDP_RESPONSE": "invalid-credential",
    "USER_DISABLED": "user-disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "too-many-requests",
    "INVALID_CODE": "invalid-verification-code",
    "INVALID_SESSION_INFO": "invalid-verification-id",
    "SESSION_EXPIRED": "session-expired",
    "INVALID_PHONE_NUMBER": "invalid-phone-number",
    "INVALID_ID_TOKEN": "invalid-user-token",
    "TOKEN_EXPIRED": "user-token-expired",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "requires-recent-login",
    "FEDERATED_USER_ID_ALREADY_LINKED": "credential-already-in-use",
    "CAPTCHA_CHECK_FAILED": "captcha-check-failed",
    "QUOTA_EXCEEDED": "quota-exceeded",
}


def translate_rest_error(raw_message: str) -> ProviderError:
    """Build a ProviderError from an Identity Toolkit error message.

    Messages look like ``WEAK_PASSWORD : Password should be at least 6
    characters``; the part before `` : `` is the error name, the rest an
    optional description.

    Args:
        raw_message: ``error.message`` from the REST error body

    Returns:
        ProviderError with the client-style code
    """
    name, _, detail = raw_message.partition(" : ")
    name = name.strip()
    code = REST_ERROR_CODES.get(name, name.lower().replace("_", "-"))
    return ProviderError(code, detail.strip() or raw_message)
