"""
Transport-level data passed between the request builder, the session and
the dispatcher.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

import httpx

from gitaccounts.core.constants import REDACTED, SENSITIVE_HEADERS

T = TypeVar("T")


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


class Encoding(str, Enum):
    """How a route's parameters go on the wire."""

    URL = "url"
    FORM = "form"
    JSON = "json"
    MULTIPART = "multipart"


@dataclass(frozen=True)
class Request:
    """Fully resolved request, ready for a TransportSession."""

    method: HTTPMethod
    url: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    content: Optional[bytes] = field(default=None, repr=False)
    encoding: Encoding = Encoding.URL

    def redacted_headers(self) -> Dict[str, str]:
        """Headers safe to log: credential values are masked."""
        return {k: (REDACTED if k.lower() in SENSITIVE_HEADERS else v) for k, v in self.headers.items()}


@dataclass(frozen=True)
class RawResponse:
    """What a TransportSession hands back: status, headers and the full body."""

    status_code: int
    headers: httpx.Headers
    content: bytes
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class ContinuationToken:
    """
    Opaque pagination marker.

    Pass it to a paginated route's with_continuation() to get the route for
    the next page. Its contents are not part of the public contract.
    """

    marker: str


@dataclass(frozen=True)
class APIResponse(Generic[T]):
    """Decoded outcome of one route execution."""

    status_code: int
    raw: bytes = field(repr=False)
    data: T
    continuation: Optional[ContinuationToken] = None

    @property
    def has_next_page(self) -> bool:
        return self.continuation is not None
