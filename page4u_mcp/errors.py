"""Error types raised while bridging a tool call to the Page4U API"""
from typing import Optional


class Page4UError(Exception):
    """Base class for every failure a tool call can end with."""


class ConfigurationError(Page4UError):
    """A required setting (usually the API key) is missing."""


class ValidationError(Page4UError):
    """A tool argument failed validation. No request was sent."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid value for '{field}': {message}")


class NetworkError(Page4UError):
    """The HTTP request never produced a response."""


class ProtocolError(Page4UError):
    """The response body is not a Page4U envelope."""


class ApiError(Page4UError):
    """The backend answered with a failure envelope."""

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")
