

import logging
import secrets
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cookies import read_viewer_cookie
from app.models.user import User
from app.services.user_service import UserService


logger = logging.getLogger(__name__)

CSRF_TOKEN_HEADER = "X-CSRF-TOKEN"


async def authorize(db: AsyncSession, request: Request) -> Optional[User]:
    """
    Re-derive the user making a request that changes account state.

    The viewer cookie identifies who is calling; the X-CSRF-TOKEN header
    proves the caller holds the most recently issued session token. A token
    rotated by a newer login elsewhere no longer matches.

    Does not clear the cookie on failure.

    Args:
        db: Database session.
        request: Incoming HTTP request.

    Returns:
        Optional[User]: The user if cookie and token match, otherwise None.
    """
    user_id = read_viewer_cookie(request)
    if not user_id:
        logger.warning("Authorization failed: no valid viewer cookie")
        return None

    user = await UserService.get_user(user_id, db)
    if not user:
        logger.warning(f"Authorization failed: unknown user {user_id}")
        return None

    presented = request.headers.get(CSRF_TOKEN_HEADER)
    if not presented or not secrets.compare_digest(presented.encode("utf-8"), user.token.encode("utf-8")):
        logger.warning(f"Authorization failed: stale or missing token for user {user_id}")
        return None

    return user
