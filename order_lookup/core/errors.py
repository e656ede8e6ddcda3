"""Terminal failures raised by the order lookup pipeline.

Every stage either returns normally or raises one of these. The API layer
renders them as ``{"error": message}`` with the matching status code, so
messages must stay short and must never carry secrets or upstream detail.
"""

from fastapi import status


class OrderLookupError(Exception):
    """Base class for pipeline failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.headers = headers or {}
        super().__init__(self.message)


class AuthenticationFailure(OrderLookupError):
    """Missing or invalid request signature."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid signature"


class AuthorizationFailure(OrderLookupError):
    """Origin or tenant is not permitted."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationFailure(OrderLookupError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class RateLimitExceeded(OrderLookupError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests"


class CaptchaFailure(OrderLookupError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Captcha failed"


class UpstreamFailure(OrderLookupError):
    """Backend or CAPTCHA provider could not be reached or answered badly."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


class ConfigurationFailure(OrderLookupError):
    """A required secret or credential is missing."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server not configured"
