"""
Uniform access to REST-based Git hosting providers.

    config = gitlab_configuration(token="glpat-...")
    async with HTTPXSession() as session:
        client = GitClient(session)
        response = await client.execute(ReadCommits(configuration=config, id="42", ref_name="main"))
"""

from gitaccounts.core.config import Settings
from gitaccounts.core.errors import (
    Cancelled,
    ConfigurationMissing,
    DecodingError,
    GitAPIError,
    HTTPError,
    InvalidURL,
    ProviderError,
    TransportFailure,
)
from gitaccounts.models.configuration import (
    BasicCredential,
    GitConfiguration,
    OAuthCredential,
    Provider,
    TokenCredential,
    github_configuration,
    gitlab_configuration,
)
from gitaccounts.models.transport import APIResponse, ContinuationToken, Encoding, HTTPMethod, RawResponse, Request
from gitaccounts.services.client import GitClient
from gitaccounts.services.dispatcher import Dispatcher
from gitaccounts.services.fake_session import FakeSession
from gitaccounts.services.request_builder import build_request
from gitaccounts.services.session import HTTPXSession, RequestState, RequestTask, TransportSession

__all__ = [
    "APIResponse",
    "BasicCredential",
    "Cancelled",
    "ConfigurationMissing",
    "ContinuationToken",
    "DecodingError",
    "Dispatcher",
    "Encoding",
    "FakeSession",
    "GitAPIError",
    "GitClient",
    "GitConfiguration",
    "HTTPError",
    "HTTPMethod",
    "HTTPXSession",
    "InvalidURL",
    "OAuthCredential",
    "Provider",
    "ProviderError",
    "RawResponse",
    "Request",
    "RequestState",
    "RequestTask",
    "Settings",
    "TokenCredential",
    "TransportFailure",
    "TransportSession",
    "build_request",
    "github_configuration",
    "gitlab_configuration",
]
