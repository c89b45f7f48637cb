from .google_person import GooglePersonFactory
from .clients import FakeGoogleClient, FakeStripeClient
from .requests import make_request, set_cookie_headers

__all__ = [
    "GooglePersonFactory",
    "FakeGoogleClient",
    "FakeStripeClient",
    "make_request",
    "set_cookie_headers",
]
