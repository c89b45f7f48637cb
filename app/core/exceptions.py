"""
Error taxonomy for viewer identity resolution.

Every error carries a human-readable message plus the original cause, if any.
None of them are retried; the route layer turns them into HTTP errors.
"""

from typing import Optional


class ViewerError(Exception):
    """Base class for failures raised by the viewer services."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class AuthProviderError(ViewerError):
    """Google exchange was unreachable or rejected the code."""


class ProfileIncompleteError(ViewerError):
    """Exchanged Google profile is missing a required field."""


class LoginFailedError(ViewerError):
    """Unexpected failure while resolving a login."""


class LogoutFailedError(ViewerError):
    """Unexpected failure while clearing the session."""


class NotAuthorizedError(ViewerError):
    """Cookie identity and presented token do not match a live session."""


class PaymentProviderError(ViewerError):
    """Stripe Connect exchange failed."""


class StoreUpdateError(ViewerError):
    """An update expected to find a user record found none."""


class ConnectStripeFailedError(ViewerError):
    """Unexpected failure while linking a Stripe account."""


class DisconnectStripeFailedError(ViewerError):
    """Unexpected failure while unlinking a Stripe account."""
