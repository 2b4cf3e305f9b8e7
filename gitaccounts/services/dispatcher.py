"""
Response dispatcher.

Turns a RawResponse into an APIResponse carrying a decoded domain object, or
raises the matching GitAPIError. Stateless; one instance can serve any
number of concurrent requests.
"""

import logging
import re
from functools import lru_cache
from typing import Any, Dict, Optional, Type, Union
from urllib.parse import parse_qs, urlsplit

import httpx
from pydantic import TypeAdapter, ValidationError

from gitaccounts.core.constants import GITLAB_NEXT_PAGE_HEADER, LINK_HEADER
from gitaccounts.core.errors import DecodingError, HTTPError, ProviderError
from gitaccounts.models.configuration import Provider
from gitaccounts.models.github_api import GitHubErrorBody
from gitaccounts.models.gitlab_api import GitLabErrorBody
from gitaccounts.models.transport import APIResponse, ContinuationToken, RawResponse
from gitaccounts.routes.base import PaginatedRoute, Route

logger = logging.getLogger(__name__)

ErrorBody = Union[GitLabErrorBody, GitHubErrorBody]

ERROR_BODY_MODELS: Dict[Provider, Type[ErrorBody]] = {
    Provider.GITLAB: GitLabErrorBody,
    Provider.GITHUB: GitHubErrorBody,
}

_LINK_ENTRY = re.compile(r'<([^>]*)>[^,<]*?rel="?([^",;]+)"?')


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def field_path(error: ValidationError) -> str:
    """Dotted location of the first validation error, '$' for the document root."""
    errors = error.errors()
    if not errors or not errors[0].get("loc"):
        return "$"
    return ".".join(str(part) for part in errors[0]["loc"])


def decode(response_type: Any, content: bytes) -> Any:
    """Strict decode of a JSON body; any mismatch raises DecodingError."""
    try:
        return _adapter(response_type).validate_json(content)
    except ValidationError as e:
        raise DecodingError(field_path(e), e) from e


def parse_link_header(value: str) -> Dict[str, str]:
    """RFC 5988 Link header -> {rel: url}."""
    links: Dict[str, str] = {}
    for match in _LINK_ENTRY.finditer(value):
        url, rels = match.groups()
        for rel in rels.split():
            links[rel] = url
    return links


def extract_continuation(headers: httpx.Headers) -> Optional[ContinuationToken]:
    """Next-page marker from X-Next-Page (GitLab) or Link rel="next" (both providers)."""
    next_page = headers.get(GITLAB_NEXT_PAGE_HEADER, "").strip()
    if next_page.isdigit():
        return ContinuationToken(next_page)

    link = headers.get(LINK_HEADER)
    if not link:
        return None
    next_url = parse_link_header(link).get("next")
    if not next_url:
        return None
    page = parse_qs(urlsplit(next_url).query).get("page", [""])[0]
    if page.isdigit():
        return ContinuationToken(page)
    logger.debug(f"Link rel=next without a numeric page parameter: {next_url}")
    return None


def parse_error_body(provider: Optional[Provider], content: bytes) -> Optional[ErrorBody]:
    models = [ERROR_BODY_MODELS[provider]] if provider is not None else list(ERROR_BODY_MODELS.values())
    for model in models:
        try:
            return model.model_validate_json(content)
        except ValidationError:
            continue
    return None


class Dispatcher:
    def dispatch(self, route: Route, raw: RawResponse) -> APIResponse[Any]:
        """
        Decode a response for the route that produced it.

        Raises:
            ProviderError: non-2xx with a recognised provider error body.
            HTTPError: non-2xx with any other body.
            DecodingError: 2xx whose body does not match route.response_type.
        """
        if not raw.is_success:
            raise self.error_for(route, raw)

        try:
            data = decode(route.response_type, raw.content)
        except DecodingError as e:
            logger.warning(f"Decoding {route.route_name} response failed at '{e.field_path}'")
            raise

        # Only paginated routes can act on a next-page marker
        continuation = extract_continuation(raw.headers) if isinstance(route, PaginatedRoute) else None
        return APIResponse(
            status_code=raw.status_code,
            raw=raw.content,
            data=data,
            continuation=continuation,
        )

    def error_for(self, route: Route, raw: RawResponse) -> HTTPError:
        provider = route.configuration.provider if route.configuration is not None else None
        body = parse_error_body(provider, raw.content)
        if body is None:
            logger.info(f"{route.route_name} failed with HTTP {raw.status_code} (unparsed body)")
            return HTTPError(raw.status_code, raw.content)

        details = body.errors if isinstance(body, GitHubErrorBody) else body.message
        logger.info(f"{route.route_name} failed with HTTP {raw.status_code}: {body.summary()}")
        return ProviderError(raw.status_code, raw.content, message=body.summary(), details=details)
