

import os
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings model.

    All configuration variables are loaded from environment variables
    with fallback defaults for development.
    """

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./stayhub.db")

    # Runtime environment ("development" disables secure cookies)
    environment: str = os.getenv("ENVIRONMENT", "development")

    # Session settings
    cookie_secret: str = os.getenv("COOKIE_SECRET", "your-cookie-secret-change-in-production")
    session_token_bytes: int = int(os.getenv("SESSION_TOKEN_BYTES", "16"))

    # Google OAuth settings
    google_client_id: Optional[str] = os.getenv("GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = os.getenv("GOOGLE_CLIENT_SECRET")
    google_redirect_uri: str = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:3000/login")
    google_auth_url: str = os.getenv("GOOGLE_AUTH_URL", "https://accounts.google.com/o/oauth2/v2/auth")
    google_token_url: str = os.getenv("GOOGLE_TOKEN_URL", "https://oauth2.googleapis.com/token")
    google_people_url: str = os.getenv(
        "GOOGLE_PEOPLE_URL", "https://people.googleapis.com/v1/people/me"
    )

    # Stripe Connect settings
    stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "sk_test_your-secret-key")
    stripe_client_id: Optional[str] = os.getenv("STRIPE_CLIENT_ID")
    stripe_connect_url: str = os.getenv("STRIPE_CONNECT_URL", "https://connect.stripe.com")

    # Outbound HTTP
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

    @property
    def cookie_secure(self) -> bool:
        """Cookies are only sent over plain HTTP in local development."""
        return self.environment != "development"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
