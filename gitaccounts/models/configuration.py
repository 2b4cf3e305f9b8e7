import re
from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from gitaccounts.core.constants import (
    GITHUB_DEFAULT_API_VERSION,
    GITHUB_DEFAULT_URL,
    GITLAB_DEFAULT_API_VERSION,
    GITLAB_DEFAULT_URL,
)


_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_HEADER_VALUE = re.compile(r"[\t\x20-\x7e]*")


def check_header_value(value: str, what: str) -> str:
    """HTTP header values go on the wire as ASCII; reject anything else up front."""
    if not _HEADER_VALUE.fullmatch(value):
        raise ValueError(f"{what} must be printable ASCII without line breaks")
    return value


class Provider(str, Enum):
    GITLAB = "gitlab"
    GITHUB = "github"


class TokenCredential(BaseModel):
    """Personal/project access token, sent in the provider's token header."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["token"] = "token"
    token: SecretStr

    @field_validator("token")
    @classmethod
    def token_fits_header(cls, v: SecretStr) -> SecretStr:
        check_header_value(v.get_secret_value(), "token")
        return v


class BasicCredential(BaseModel):
    """Username and password (or token used as password) for HTTP Basic auth."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["basic"] = "basic"
    username: str
    password: SecretStr


class OAuthCredential(BaseModel):
    """Access token obtained from an OAuth flow handled outside this library."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["oauth"] = "oauth"
    access_token: SecretStr
    token_type: str = "Bearer"

    @field_validator("access_token")
    @classmethod
    def access_token_fits_header(cls, v: SecretStr) -> SecretStr:
        check_header_value(v.get_secret_value(), "access_token")
        return v

    @field_validator("token_type")
    @classmethod
    def token_type_fits_header(cls, v: str) -> str:
        return check_header_value(v, "token_type")


Credential = Annotated[
    Union[TokenCredential, BasicCredential, OAuthCredential],
    Field(discriminator="kind"),
]


class GitConfiguration(BaseModel):
    """
    Immutable connection settings for one connected account.

    A single instance is shared by every route built for that account; it is
    never mutated after creation, so concurrent requests can read it freely.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    base_url: str = Field(..., description="Instance root (e.g. 'https://gitlab.com')")
    credential: Optional[Credential] = Field(None, description="Already-obtained credential material")
    api_version: Optional[str] = Field(None, description="API version tag (path segment on GitLab, header on GitHub)")
    custom_headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("custom_headers")
    @classmethod
    def headers_are_ascii(cls, v: Dict[str, str]) -> Dict[str, str]:
        for name, value in v.items():
            if not _HEADER_NAME.fullmatch(name):
                raise ValueError(f"invalid header name {name!r}")
            check_header_value(value, f"header {name!r}")
        return v

    @field_validator("api_version")
    @classmethod
    def api_version_fits_header(cls, v: Optional[str]) -> Optional[str]:
        return check_header_value(v, "api_version") if v is not None else v


def gitlab_configuration(
    token: Optional[str] = None,
    base_url: str = GITLAB_DEFAULT_URL,
    api_version: str = GITLAB_DEFAULT_API_VERSION,
    oauth: bool = False,
    **kwargs,
) -> GitConfiguration:
    """Configuration for gitlab.com or a self-managed GitLab instance."""
    credential: Optional[Union[TokenCredential, OAuthCredential]] = None
    if token is not None:
        credential = OAuthCredential(access_token=token) if oauth else TokenCredential(token=token)
    return GitConfiguration(
        provider=Provider.GITLAB,
        base_url=base_url,
        credential=credential,
        api_version=api_version,
        **kwargs,
    )


def github_configuration(
    token: Optional[str] = None,
    base_url: str = GITHUB_DEFAULT_URL,
    api_version: Optional[str] = GITHUB_DEFAULT_API_VERSION,
    **kwargs,
) -> GitConfiguration:
    """
    Configuration for github.com or GitHub Enterprise Server.

    For GHES pass the API root, e.g. 'https://github.corp.example.com/api/v3'.
    """
    return GitConfiguration(
        provider=Provider.GITHUB,
        base_url=base_url,
        credential=TokenCredential(token=token) if token is not None else None,
        api_version=api_version,
        **kwargs,
    )
