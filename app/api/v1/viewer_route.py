
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthProviderError,
    NotAuthorizedError,
    PaymentProviderError,
    ProfileIncompleteError,
    ViewerError,
)
from app.core.google import GoogleClient, get_google_client
from app.core.stripe import StripeClient, get_stripe_client
from app.db.session import get_db
from app.schemas.viewer import AuthUrlResponse, ConnectStripeArgs, LogInArgs, Viewer
from app.services.viewer_service import ViewerService

# Set up logger
logger = logging.getLogger(__name__)

viewer_router = APIRouter()


def _http_error(error: ViewerError) -> HTTPException:
    """
    Map a viewer error onto an HTTP error.

    Args:
        error: Error raised by the viewer services.

    Returns:
        HTTPException: Error carrying the message and its cause.
    """
    if isinstance(error, NotAuthorizedError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(error, ProfileIncompleteError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, (AuthProviderError, PaymentProviderError)):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=status_code, detail=str(error))


@viewer_router.get("/auth-url", response_model=AuthUrlResponse)
async def auth_url(google: GoogleClient = Depends(get_google_client)):
    """
    Get the Google consent URL for OAuth login.
    """
    try:
        return AuthUrlResponse(auth_url=ViewerService.auth_url(google))
    except ViewerError as e:
        raise _http_error(e)


@viewer_router.post("/log-in", response_model=Viewer, response_model_exclude_none=True)
async def log_in(
    request: Request,
    response: Response,
    args: Optional[LogInArgs] = None,
    db: AsyncSession = Depends(get_db),
    google: GoogleClient = Depends(get_google_client),
):
    """
    Log the viewer in.

    With a code, finishes Google OAuth; without one, falls back to the
    viewer cookie. Every call rotates the session token.

    Args:
        request: HTTP request carrying the viewer cookie.
        response: HTTP response receiving cookie changes.
        args: Optional `{"input": {"code": ...}}` body.

    Returns:
        Viewer: Resolved viewer.
    """
    code = args.input.code if args and args.input else None
    try:
        return await ViewerService.log_in(code, google, db, request, response)
    except ViewerError as e:
        raise _http_error(e)


@viewer_router.post("/log-out", response_model=Viewer, response_model_exclude_none=True)
async def log_out(response: Response):
    """
    Log the viewer out by clearing the viewer cookie.
    """
    try:
        return ViewerService.log_out(response)
    except ViewerError as e:
        raise _http_error(e)


@viewer_router.post("/connect-stripe", response_model=Viewer, response_model_exclude_none=True)
async def connect_stripe(
    args: ConnectStripeArgs,
    request: Request,
    db: AsyncSession = Depends(get_db),
    stripe: StripeClient = Depends(get_stripe_client),
):
    """
    Link the viewer's Stripe account.

    Requires the viewer cookie and a matching X-CSRF-TOKEN header.
    """
    try:
        return await ViewerService.connect_stripe(args.input.code, stripe, db, request)
    except ViewerError as e:
        raise _http_error(e)


@viewer_router.post("/disconnect-stripe", response_model=Viewer, response_model_exclude_none=True)
async def disconnect_stripe(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Unlink the viewer's Stripe account.

    Requires the viewer cookie and a matching X-CSRF-TOKEN header.
    """
    try:
        return await ViewerService.disconnect_stripe(db, request)
    except ViewerError as e:
        raise _http_error(e)
