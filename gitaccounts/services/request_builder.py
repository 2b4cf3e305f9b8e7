"""
Request builder.

Turns a Route into a transport-level Request. Pure: no network access, no
global state, so it can be tested on its own.
"""

import base64
import json
import logging
import re
from typing import Any, Dict, Optional, Tuple, assert_never
from urllib.parse import urlencode

import httpx

from gitaccounts.core.constants import (
    ACCEPT_HEADERS,
    AUTHORIZATION_HEADER,
    GITHUB_VERSION_HEADER,
    GITLAB_DEFAULT_API_VERSION,
    GITLAB_TOKEN_HEADER,
)
from gitaccounts.core.errors import ConfigurationMissing, InvalidURL
from gitaccounts.models.configuration import (
    BasicCredential,
    GitConfiguration,
    OAuthCredential,
    Provider,
    TokenCredential,
)
from gitaccounts.models.transport import Encoding, Request
from gitaccounts.routes.base import Route

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{[^}]*\}")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def api_root(configuration: GitConfiguration) -> str:
    """Base URL every route path is resolved against."""
    if configuration.provider is Provider.GITLAB:
        suffix = f"/api/{configuration.api_version or GITLAB_DEFAULT_API_VERSION}"
        if configuration.base_url.endswith(suffix):
            return configuration.base_url
        return f"{configuration.base_url}{suffix}"
    if configuration.provider is Provider.GITHUB:
        return configuration.base_url
    assert_never(configuration.provider)


def compose_url(configuration: GitConfiguration, path: str) -> str:
    relative = path.lstrip("/")
    url = f"{api_root(configuration)}/{relative}"
    if _PLACEHOLDER.search(path):
        raise InvalidURL(url, "unresolved path placeholder")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidURL(url, str(e)) from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidURL(url, "scheme must be http or https")
    if not parsed.host:
        raise InvalidURL(url, "missing host")
    # A query or fragment in base_url would swallow the route path
    if parsed.query or parsed.fragment:
        raise InvalidURL(url, "base URL must not carry a query or fragment")
    if not parsed.raw_path.decode("ascii").endswith(f"/{relative}"):
        raise InvalidURL(url, "route path does not end the URL path")
    return url


def auth_headers(configuration: GitConfiguration) -> Dict[str, str]:
    credential = configuration.credential
    if credential is None:
        return {}
    if isinstance(credential, TokenCredential):
        token = credential.token.get_secret_value()
        if configuration.provider is Provider.GITLAB:
            return {GITLAB_TOKEN_HEADER: token}
        return {AUTHORIZATION_HEADER: f"Bearer {token}"}
    if isinstance(credential, BasicCredential):
        raw = f"{credential.username}:{credential.password.get_secret_value()}".encode("utf-8")
        return {AUTHORIZATION_HEADER: f"Basic {base64.b64encode(raw).decode('ascii')}"}
    if isinstance(credential, OAuthCredential):
        return {AUTHORIZATION_HEADER: f"{credential.token_type} {credential.access_token.get_secret_value()}"}
    assert_never(credential)


def default_headers(configuration: GitConfiguration, user_agent: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": ACCEPT_HEADERS[configuration.provider.value]}
    if user_agent:
        headers["User-Agent"] = user_agent
    if configuration.provider is Provider.GITHUB and configuration.api_version:
        headers[GITHUB_VERSION_HEADER] = configuration.api_version
    return headers


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def encode_body(
    method: str, url: str, encoding: Encoding, params: Dict[str, Any]
) -> Tuple[Optional[bytes], Optional[str]]:
    """Returns (content, content_type) for a body-carrying request."""
    if encoding is Encoding.URL:
        return None, None
    if encoding is Encoding.FORM:
        body = urlencode({key: _as_text(value) for key, value in params.items()})
        return body.encode("utf-8"), FORM_CONTENT_TYPE
    if encoding is Encoding.JSON:
        return json.dumps(params).encode("utf-8"), JSON_CONTENT_TYPE
    if encoding is Encoding.MULTIPART:
        files = {key: value for key, value in params.items() if isinstance(value, tuple)}
        data = {key: _as_text(value) for key, value in params.items() if not isinstance(value, tuple)}
        multipart = httpx.Request(method, url, data=data, files=files)
        return multipart.read(), multipart.headers["Content-Type"]
    assert_never(encoding)


def build_request(route: Route, user_agent: Optional[str] = None) -> Request:
    """
    Build the Request for a route.

    Raises:
        ConfigurationMissing: the route has no configuration attached.
        InvalidURL: base URL and path do not form a valid http(s) URL.
    """
    configuration = route.configuration
    if configuration is None:
        raise ConfigurationMissing(route.route_name)

    path = route.path
    url = compose_url(configuration, path)
    method = route.method
    params = route.params

    headers = default_headers(configuration, user_agent)
    headers.update(configuration.custom_headers)
    headers.update(auth_headers(configuration))

    query: Dict[str, str] = {}
    content: Optional[bytes] = None
    if method.has_body:
        content, content_type = encode_body(method.value, url, route.encoding, params)
        if content_type:
            headers["Content-Type"] = content_type
        else:
            query = {key: _as_text(value) for key, value in params.items()}
    else:
        query = {key: _as_text(value) for key, value in params.items()}

    request = Request(
        method=method,
        url=url,
        path=path,
        params=query,
        headers=headers,
        content=content,
        encoding=route.encoding,
    )
    logger.debug(f"Built {method.value} {url} for {route.route_name} ({len(query)} query params)")
    return request
