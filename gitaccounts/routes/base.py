"""
Route base classes.

A route is a frozen value describing one API operation: its configuration,
identifiers and parameters. Each resource family subclasses Route once and
implements the wire-shape properties by matching over the family's variants,
ending every match in assert_never so a type checker flags any property that
misses a newly added variant.
"""

from abc import abstractmethod
from typing import Any, Dict, Mapping, Optional, Self
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from gitaccounts.core.constants import FALSE_LITERAL, TRUE_LITERAL
from gitaccounts.models.configuration import GitConfiguration
from gitaccounts.models.transport import ContinuationToken, Encoding, HTTPMethod


def serialize_param(value: Any) -> Any:
    """Booleans go on the wire as the literals 'true'/'false'."""
    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL
    return value


def compact_params(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop absent (None) parameters and serialize the rest."""
    return {key: serialize_param(value) for key, value in values.items() if value is not None}


def segment(value: Any) -> str:
    """Percent-encode an identifier for use as a single path segment."""
    return quote(str(value), safe="")


class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    configuration: Optional[GitConfiguration] = None

    @property
    def route_name(self) -> str:
        return type(self).__name__

    @property
    @abstractmethod
    def method(self) -> HTTPMethod: ...

    @property
    @abstractmethod
    def encoding(self) -> Encoding: ...

    @property
    @abstractmethod
    def path(self) -> str:
        """Path relative to the API root, identifiers substituted."""

    @property
    @abstractmethod
    def params(self) -> Dict[str, Any]:
        """Parameters keyed by their wire names."""

    @property
    @abstractmethod
    def response_type(self) -> Any:
        """Type the dispatcher decodes a 2xx body into."""


class PaginatedRoute(Route):
    """Mixin for list routes that accept page/per_page."""

    page: Optional[int] = Field(None, ge=1)
    per_page: Optional[int] = Field(None, ge=1, le=100)

    def pagination_params(self) -> Dict[str, Any]:
        return {"page": self.page, "per_page": self.per_page}

    def with_continuation(self, token: ContinuationToken) -> Self:
        """Same route, pointed at the page the token refers to."""
        return self.model_copy(update={"page": int(token.marker)})
