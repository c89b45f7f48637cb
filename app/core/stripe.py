
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import PaymentProviderError


logger = logging.getLogger(__name__)


class StripeClient:
    """
    HTTP client wrapper for Stripe Connect.

    Handles authentication and error handling for linking a host's
    Stripe account as their payout wallet.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize Stripe client with base configuration."""
        self.base_url = settings.stripe_connect_url
        self.secret_key = settings.stripe_secret_key

        # HTTP client configuration
        self.client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.secret_key}",
                "Accept": "application/json",
            },
            timeout=settings.http_timeout_seconds,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Handle Stripe API response with error checking.

        Args:
            response: HTTP response from Stripe.

        Returns:
            Dict containing response data.

        Raises:
            PaymentProviderError: If API returned error status.
        """
        try:
            data = response.json()
        except ValueError:
            logger.error(f"Invalid JSON response from Stripe: {response.text}")
            raise PaymentProviderError("Invalid response from Stripe API")

        if not isinstance(data, dict):
            raise PaymentProviderError("Invalid response from Stripe API")

        if not response.is_success or data.get("error"):
            error_msg = data.get("error_description") or data.get("error") or "Unknown Stripe error"
            logger.error(f"Stripe API error ({response.status_code}): {error_msg}")
            raise PaymentProviderError(f"Stripe API error: {error_msg}")

        return data

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make a form-encoded POST request to Stripe.

        Args:
            endpoint: API endpoint (without base URL).
            data: Form fields.

        Returns:
            Dict: Response data from Stripe.
        """
        url = endpoint.lstrip('/')
        logger.info(f"Making POST request to Stripe: {url}")

        try:
            response = await self.client.post(url, data=data or {})
            return self._handle_response(response)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout making POST request to {url}")
            raise PaymentProviderError("Stripe API request timed out", e)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error making POST request to {url}: {e}")
            raise PaymentProviderError("Stripe API unreachable", e)

    async def connect(self, code: str) -> Dict[str, Any]:
        """
        Exchange a Stripe Connect authorization code for the connected account.

        Args:
            code: Authorization code from the Stripe Connect redirect.

        Returns:
            Dict: OAuth token response, including `stripe_user_id`.
        """
        endpoint = "/oauth/token"
        data = {
            "grant_type": "authorization_code",
            "code": code,
        }
        if settings.stripe_client_id:
            data["client_id"] = settings.stripe_client_id

        return await self.post(endpoint, data)


# Singleton instance for application-wide use
_stripe_client = None

def get_stripe_client() -> StripeClient:
    """
    Get singleton Stripe client instance.

    Returns:
        StripeClient: Configured Stripe client.
    """
    global _stripe_client
    if _stripe_client is None:
        _stripe_client = StripeClient()
    return _stripe_client
