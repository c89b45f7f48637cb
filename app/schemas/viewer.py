from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GoogleProfile(BaseModel):
    """Fields taken from a Google People API profile."""
    id: str
    name: str
    avatar: str
    contact: str


class LogInInput(BaseModel):
    """Login input; no code means cookie-based login."""
    code: Optional[str] = None


class LogInArgs(BaseModel):
    """Request body for the logIn mutation."""
    input: Optional[LogInInput] = None


class ConnectStripeInput(BaseModel):
    """Stripe Connect authorization code."""
    code: str


class ConnectStripeArgs(BaseModel):
    """Request body for the connectStripe mutation."""
    input: ConnectStripeInput


class Viewer(BaseModel):
    """
    Client-facing projection of the resolved session.

    Unset fields are dropped from the response body; `didRequest` is
    always present.
    """
    id: Optional[str] = None
    token: Optional[str] = None
    avatar: Optional[str] = None
    has_wallet: Optional[bool] = Field(default=None, alias="hasWallet")
    did_request: bool = Field(alias="didRequest")

    model_config = ConfigDict(populate_by_name=True)


class AuthUrlResponse(BaseModel):
    """Google consent URL."""
    auth_url: str = Field(alias="authUrl")

    model_config = ConfigDict(populate_by_name=True)
