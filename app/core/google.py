
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.core.exceptions import AuthProviderError


logger = logging.getLogger(__name__)

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]
PERSON_FIELDS = "emailAddresses,names,photos"


class GoogleClient:
    """
    HTTP client wrapper for Google sign-in.

    Builds the consent URL and exchanges authorization codes for the
    signed-in person's People API profile.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize Google client with base configuration."""
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_redirect_uri

        self.client = http_client or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=settings.http_timeout_seconds,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    @property
    def auth_url(self) -> str:
        """
        Google consent screen URL the client redirects the user to.

        Raises:
            AuthProviderError: If the OAuth client is not configured.
        """
        if not self.client_id:
            raise AuthProviderError("Google OAuth2 not configured")

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(GOOGLE_SCOPES),
            "response_type": "code",
            "access_type": "online",
        }
        return f"{settings.google_auth_url}?{urlencode(params)}"

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Handle Google API response with error checking.

        Args:
            response: HTTP response from Google.

        Returns:
            Dict containing response data.

        Raises:
            AuthProviderError: If Google returned an error status or bad JSON.
        """
        if not response.is_success:
            logger.error(f"Google API error ({response.status_code})")
            raise AuthProviderError(f"Google API error (status {response.status_code})")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Invalid JSON response from Google")
            raise AuthProviderError("Invalid response from Google API", e)

        if not isinstance(data, dict):
            raise AuthProviderError("Invalid response from Google API")
        return data

    async def exchange_code(self, code: str) -> Optional[Dict[str, Any]]:
        """
        Exchange an authorization code for the signed-in person's profile.

        Args:
            code: Authorization code from the Google redirect.

        Returns:
            Optional[Dict]: People API person resource, or None if Google
            granted no access token or returned an empty profile.

        Raises:
            AuthProviderError: If Google is unreachable or rejects the code.
        """
        if not self.client_id or not self.client_secret:
            raise AuthProviderError("Google OAuth2 not properly configured")

        try:
            token_response = await self.client.post(
                settings.google_token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
            )
            token_info = self._handle_response(token_response)

            access_token = token_info.get("access_token")
            if not access_token:
                logger.warning("Google token response carried no access token")
                return None

            people_response = await self.client.get(
                settings.google_people_url,
                params={"personFields": PERSON_FIELDS},
                headers={"Authorization": f"Bearer {access_token}"},
            )
            person = self._handle_response(people_response)
        except httpx.TimeoutException as e:
            logger.error("Timeout exchanging Google authorization code")
            raise AuthProviderError("Google API request timed out", e)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error exchanging Google authorization code: {e}")
            raise AuthProviderError("Google API unreachable", e)

        return person or None


# Singleton instance for application-wide use
_google_client = None

def get_google_client() -> GoogleClient:
    """
    Get singleton Google client instance.

    Returns:
        GoogleClient: Configured Google client.
    """
    global _google_client
    if _google_client is None:
        _google_client = GoogleClient()
    return _google_client
