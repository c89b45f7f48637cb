

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cookies import clear_viewer_cookie, read_viewer_cookie, set_viewer_cookie
from app.core.exceptions import (
    AuthProviderError,
    ConnectStripeFailedError,
    DisconnectStripeFailedError,
    LoginFailedError,
    LogoutFailedError,
    NotAuthorizedError,
    PaymentProviderError,
    ViewerError,
)
from app.core.google import GoogleClient
from app.core.security import generate_session_token
from app.core.stripe import StripeClient
from app.dependencies.auth import authorize
from app.models.user import User
from app.schemas.viewer import Viewer
from app.services.user_service import UserService
from app.utils.google_profile import extract_google_profile


logger = logging.getLogger(__name__)


class LoginOutcome(str, Enum):
    """How a logIn call resolved the viewer."""

    CREATED = "created"  # first Google login, user record created
    UPDATED = "updated"  # Google login of a known user
    REFRESHED = "refreshed"  # silent login from the viewer cookie
    NO_SESSION = "no_session"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login resolution and the user it resolved, if any."""

    outcome: LoginOutcome
    user: Optional[User] = None


class ViewerService:
    """
    Service class for viewer identity resolution.

    Decides on every login whether the caller is finishing a Google OAuth
    exchange, coming back with a session cookie, or anonymous, and rotates
    the session token each time. No session state is kept in process; it
    lives in the user record and the client's cookie.
    """

    @staticmethod
    def to_viewer(user: Optional[User]) -> Viewer:
        """
        Project a user (or its absence) onto the wire Viewer shape.

        Args:
            user: Resolved user, or None.

        Returns:
            Viewer: Projection with `didRequest` set.
        """
        if not user:
            return Viewer(did_request=True)
        return Viewer(
            id=user.id,
            token=user.token,
            avatar=user.avatar,
            has_wallet=True if user.has_wallet else None,
            did_request=True,
        )

    @staticmethod
    def auth_url(google: GoogleClient) -> str:
        """
        Get the Google consent URL.

        Raises:
            AuthProviderError: If the URL cannot be built.
        """
        try:
            return google.auth_url
        except AuthProviderError:
            raise
        except Exception as e:
            raise AuthProviderError("Failed to build Google auth URL", e)

    @staticmethod
    async def log_in_via_google(
        code: str,
        token: str,
        google: GoogleClient,
        db: AsyncSession,
        response: Response
    ) -> LoginResult:
        """
        Log in by exchanging a Google authorization code.

        Args:
            code: Authorization code from the Google redirect.
            token: Freshly issued session token.
            google: Google client.
            db: Database session.
            response: Outgoing response, receives the viewer cookie.

        Returns:
            LoginResult: CREATED or UPDATED with the user.

        Raises:
            AuthProviderError: If the exchange yields no profile.
            ProfileIncompleteError: If the profile lacks a required field.
        """
        person = await google.exchange_code(code)
        if not person:
            raise AuthProviderError("Google login failed")

        profile = extract_google_profile(person)
        logger.info(f"Google login succeeded for user: {profile.id}")

        user, created = await UserService.upsert_from_profile(profile, token, db)

        set_viewer_cookie(response, user.id)
        return LoginResult(LoginOutcome.CREATED if created else LoginOutcome.UPDATED, user)

    @staticmethod
    async def log_in_via_cookie(
        token: str,
        db: AsyncSession,
        request: Request,
        response: Response
    ) -> LoginResult:
        """
        Log in silently using the viewer cookie.

        An absent, tampered or unknown cookie is cleared and yields
        NO_SESSION; that is not an error.

        Args:
            token: Freshly issued session token.
            db: Database session.
            request: Incoming request carrying the cookie.
            response: Outgoing response.

        Returns:
            LoginResult: REFRESHED with the user, or NO_SESSION.
        """
        user_id = read_viewer_cookie(request)
        user = await UserService.rotate_token(user_id, token, db)

        if not user:
            clear_viewer_cookie(response)
            logger.info("No session found for viewer cookie; cookie cleared")
            return LoginResult(LoginOutcome.NO_SESSION)

        return LoginResult(LoginOutcome.REFRESHED, user)

    @staticmethod
    async def resolve_login(
        code: Optional[str],
        google: GoogleClient,
        db: AsyncSession,
        request: Request,
        response: Response
    ) -> LoginResult:
        """
        Resolve who is logging in.

        A new token is issued before branching, so every call spends one,
        whether or not a session is found.
        """
        token = generate_session_token()

        if code:
            return await ViewerService.log_in_via_google(code, token, google, db, response)
        return await ViewerService.log_in_via_cookie(token, db, request, response)

    @staticmethod
    async def log_in(
        code: Optional[str],
        google: GoogleClient,
        db: AsyncSession,
        request: Request,
        response: Response
    ) -> Viewer:
        """
        Handle the logIn mutation.

        Args:
            code: Optional Google authorization code.
            google: Google client.
            db: Database session.
            request: Incoming request.
            response: Outgoing response.

        Returns:
            Viewer: Resolved viewer, or `{didRequest: true}` if anonymous.

        Raises:
            AuthProviderError: If Google rejects the code.
            ProfileIncompleteError: If the Google profile is incomplete.
            LoginFailedError: For any other failure.
        """
        try:
            result = await ViewerService.resolve_login(code, google, db, request, response)
        except ViewerError:
            raise
        except Exception as e:
            logger.error(f"Login failed: {e}")
            raise LoginFailedError("Failed to log in", e)

        logger.info(f"Login resolved: {result.outcome.value}")
        return ViewerService.to_viewer(result.user)

    @staticmethod
    def log_out(response: Response) -> Viewer:
        """
        Handle the logOut mutation.

        Only the client session ends; the stored token is left untouched.

        Raises:
            LogoutFailedError: If the cookie could not be cleared.
        """
        try:
            clear_viewer_cookie(response)
        except Exception as e:
            logger.error(f"Logout failed: {e}")
            raise LogoutFailedError("Failed to log out", e)
        return Viewer(did_request=True)

    @staticmethod
    async def connect_stripe(
        code: str,
        stripe: StripeClient,
        db: AsyncSession,
        request: Request
    ) -> Viewer:
        """
        Handle the connectStripe mutation.

        Args:
            code: Stripe Connect authorization code.
            stripe: Stripe client.
            db: Database session.
            request: Incoming request (cookie and X-CSRF-TOKEN).

        Returns:
            Viewer: Viewer with `hasWallet` set.

        Raises:
            NotAuthorizedError: If the caller is not authorized; nothing is written.
            PaymentProviderError: If Stripe returns no connected account.
            StoreUpdateError: If the user vanished before the update.
            ConnectStripeFailedError: For any other failure.
        """
        try:
            viewer = await authorize(db, request)
            if not viewer:
                raise NotAuthorizedError("Viewer cannot be found")

            wallet = await stripe.connect(code)
            wallet_id = wallet.get("stripe_user_id") if wallet else None
            if not wallet_id:
                raise PaymentProviderError("Stripe returned no connected account")

            viewer = await UserService.set_wallet(viewer.id, wallet_id, db)
        except ViewerError:
            raise
        except Exception as e:
            logger.error(f"Connecting Stripe failed: {e}")
            raise ConnectStripeFailedError("Failed to connect with Stripe", e)

        return ViewerService.to_viewer(viewer)

    @staticmethod
    async def disconnect_stripe(db: AsyncSession, request: Request) -> Viewer:
        """
        Handle the disconnectStripe mutation.

        Raises:
            NotAuthorizedError: If the caller is not authorized; nothing is written.
            StoreUpdateError: If the user vanished before the update.
            DisconnectStripeFailedError: For any other failure.
        """
        try:
            viewer = await authorize(db, request)
            if not viewer:
                raise NotAuthorizedError("Viewer cannot be found")

            viewer = await UserService.set_wallet(viewer.id, None, db)
        except ViewerError:
            raise
        except Exception as e:
            logger.error(f"Disconnecting Stripe failed: {e}")
            raise DisconnectStripeFailedError("Failed to disconnect with Stripe", e)

        return ViewerService.to_viewer(viewer)
