

import logging
import secrets
from typing import Optional

from itsdangerous import BadSignature, Signer

from app.core.config import settings


logger = logging.getLogger(__name__)

COOKIE_SALT = "stayhub-viewer-cookie-v1"


def generate_session_token(nbytes: Optional[int] = None) -> str:
    """
    Generate a new opaque session token.

    The token is rotated on every login attempt and compared against the
    X-CSRF-TOKEN header by the authorization check.

    Args:
        nbytes: Number of random bytes (defaults to settings).

    Returns:
        str: Hex-encoded token (two characters per byte).
    """
    return secrets.token_hex(nbytes or settings.session_token_bytes)


def _signer() -> Signer:
    return Signer(secret_key=settings.cookie_secret, salt=COOKIE_SALT)


def sign_cookie_value(value: str) -> str:
    """
    Sign a cookie value so the client cannot forge another user id.

    Args:
        value: Plain cookie value (the user id).

    Returns:
        str: Value with its signature appended.
    """
    return _signer().sign(value).decode("utf-8")


def unsign_cookie_value(signed_value: Optional[str]) -> Optional[str]:
    """
    Verify and strip the signature of a cookie value.

    Args:
        signed_value: Raw cookie value from the request.

    Returns:
        Optional[str]: Original value, or None if missing or tampered with.
    """
    if not signed_value:
        return None
    try:
        return _signer().unsign(signed_value).decode("utf-8")
    except BadSignature:
        logger.warning("Rejected session cookie with a bad signature")
        return None
