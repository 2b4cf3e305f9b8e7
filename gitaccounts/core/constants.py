"""
Shared Constants

Provider endpoints, header names and wire-level literals used by the
request builder and the response dispatcher.
"""

from typing import Dict, Tuple

# Default instance roots
GITLAB_DEFAULT_URL: str = "https://gitlab.com"
GITLAB_DEFAULT_API_VERSION: str = "v4"
GITHUB_DEFAULT_URL: str = "https://api.github.com"
GITHUB_DEFAULT_API_VERSION: str = "2022-11-28"

# Header names
GITLAB_TOKEN_HEADER: str = "PRIVATE-TOKEN"
GITHUB_VERSION_HEADER: str = "X-GitHub-Api-Version"
AUTHORIZATION_HEADER: str = "Authorization"

# Accept header per provider
ACCEPT_HEADERS: Dict[str, str] = {
    "gitlab": "application/json",
    "github": "application/vnd.github+json",
}

# Headers whose values must never reach logs
SENSITIVE_HEADERS: Tuple[str, ...] = (
    AUTHORIZATION_HEADER.lower(),
    GITLAB_TOKEN_HEADER.lower(),
    "job-token",
    "cookie",
)

REDACTED: str = "***"

# Pagination headers
GITLAB_NEXT_PAGE_HEADER: str = "x-next-page"
LINK_HEADER: str = "link"

# Literal serialization of boolean parameters
TRUE_LITERAL: str = "true"
FALSE_LITERAL: str = "false"
