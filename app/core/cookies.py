

import logging
from typing import Optional

from fastapi import Request, Response

from app.core.config import settings
from app.core.security import sign_cookie_value, unsign_cookie_value


logger = logging.getLogger(__name__)

VIEWER_COOKIE = "viewer"
VIEWER_COOKIE_MAX_AGE = 365 * 24 * 60 * 60  # one year, in seconds
VIEWER_COOKIE_SAMESITE = "strict"


def set_viewer_cookie(response: Response, user_id: str) -> None:
    """
    Bind the viewer cookie to a user id for one year.

    Args:
        response: Outgoing response.
        user_id: Id of the user who just logged in.
    """
    response.set_cookie(
        key=VIEWER_COOKIE,
        value=sign_cookie_value(user_id),
        max_age=VIEWER_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=VIEWER_COOKIE_SAMESITE,
    )


def clear_viewer_cookie(response: Response) -> None:
    """
    Remove the viewer cookie from the client.

    The attributes must match the ones used when setting it, otherwise
    browsers keep the original cookie.
    """
    response.delete_cookie(
        key=VIEWER_COOKIE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=VIEWER_COOKIE_SAMESITE,
    )


def read_viewer_cookie(request: Request) -> Optional[str]:
    """
    Get the user id carried by the viewer cookie.

    Returns:
        Optional[str]: User id, or None if the cookie is absent or badly signed.
    """
    return unsign_cookie_value(request.cookies.get(VIEWER_COOKIE))
