"""Nonce utilities for Sign in with Apple."""

import secrets
from hashlib import sha256

NONCE_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVXYZabcdefghijklmnopqrstuvwxyz-._"


def generate_nonce(length: int = 32) -> str:
    """Generate a cryptographically secure random nonce.

    The raw nonce stays on the server; only its SHA-256 is sent to Apple,
    which embeds it in the identity token. Replaying a token then fails
    because the provider checks it against the raw nonce.

    Args:
        length: Number of characters

    Returns:
        Random string drawn from ``NONCE_CHARSET``
    """
    return "".join(secrets.choice(NONCE_CHARSET) for _ in range(length))


def sha256_of_string(value: str) -> str:
    """Return the SHA-256 of a UTF-8 string in hex notation."""
    return sha256(value.encode("utf-8")).hexdigest()
