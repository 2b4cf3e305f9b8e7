"""
Error taxonomy for Git provider API access.

Every failure surfaced by the request builder, the transport session or the
response dispatcher is a GitAPIError subclass. Nothing here is retried; the
caller decides what to do with each kind.
"""

from typing import Any, Optional


class GitAPIError(Exception):
    """Base exception for all Git provider API failures."""


class ConfigurationMissing(GitAPIError):
    """The route has no GitConfiguration attached, so no request can be built."""

    def __init__(self, route_name: str):
        super().__init__(f"Route {route_name} has no configuration attached")
        self.route_name = route_name


class InvalidURL(GitAPIError):
    """Base URL and path did not compose into a well-formed URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class TransportFailure(GitAPIError):
    """The request never produced an HTTP response (DNS, connect, timeout, protocol)."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Transport failure: {type(cause).__name__}: {cause}")
        self.cause = cause


class Cancelled(GitAPIError):
    """The request was cancelled before it completed."""

    def __init__(self, message: str = "Request was cancelled"):
        super().__init__(message)


class HTTPError(GitAPIError):
    """Provider answered with a non-2xx status and an unparseable body."""

    def __init__(self, status_code: int, raw_body: bytes):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.raw_body = raw_body


class ProviderError(HTTPError):
    """Non-2xx response whose body matched the provider's error schema."""

    def __init__(
        self,
        status_code: int,
        raw_body: bytes,
        message: str,
        details: Optional[Any] = None,
    ):
        super().__init__(status_code, raw_body)
        self.message = message
        self.details = details
        self.args = (f"HTTP {status_code}: {message}",)


class DecodingError(GitAPIError):
    """A 2xx body did not match the expected domain type."""

    def __init__(self, field_path: str, underlying: BaseException):
        super().__init__(f"Failed to decode field '{field_path}': {underlying}")
        self.field_path = field_path
        self.underlying = underlying
