"""GitHub commit and commit-status routes."""

from typing import Any, Dict, List, Literal, Optional, Union, assert_never, cast

from gitaccounts.models.github_api import GitHubCombinedStatus, GitHubCommit, GitHubCommitStatus
from gitaccounts.models.transport import Encoding, HTTPMethod
from gitaccounts.routes.base import PaginatedRoute, Route, compact_params, segment

GitHubStatusState = Literal["error", "failure", "pending", "success"]


class GitHubCommitRoute(Route):
    """Base class of the GitHub commit family. See CommitRoute for the variants."""

    @property
    def method(self) -> HTTPMethod:
        route = cast("CommitRoute", self)
        if isinstance(route, (ListCommits, GetCommit, ListCommitStatuses, GetCombinedStatus)):
            return HTTPMethod.GET
        if isinstance(route, CreateCommitStatus):
            return HTTPMethod.POST
        assert_never(route)

    @property
    def encoding(self) -> Encoding:
        route = cast("CommitRoute", self)
        if isinstance(route, (ListCommits, GetCommit, ListCommitStatuses, GetCombinedStatus)):
            return Encoding.URL
        if isinstance(route, CreateCommitStatus):
            return Encoding.JSON
        assert_never(route)

    @property
    def path(self) -> str:
        route = cast("CommitRoute", self)
        repo = f"repos/{segment(route.owner)}/{segment(route.repo)}"
        if isinstance(route, ListCommits):
            return f"{repo}/commits"
        if isinstance(route, GetCommit):
            return f"{repo}/commits/{segment(route.ref)}"
        if isinstance(route, ListCommitStatuses):
            return f"{repo}/commits/{segment(route.ref)}/statuses"
        if isinstance(route, GetCombinedStatus):
            return f"{repo}/commits/{segment(route.ref)}/status"
        if isinstance(route, CreateCommitStatus):
            return f"{repo}/statuses/{segment(route.sha)}"
        assert_never(route)

    @property
    def params(self) -> Dict[str, Any]:
        route = cast("CommitRoute", self)
        if isinstance(route, ListCommits):
            return compact_params(
                {
                    "sha": route.sha,
                    "path": route.file_path,
                    "author": route.author,
                    "since": route.since,
                    "until": route.until,
                    **route.pagination_params(),
                }
            )
        if isinstance(route, ListCommitStatuses):
            return compact_params(route.pagination_params())
        if isinstance(route, (GetCommit, GetCombinedStatus)):
            return {}
        if isinstance(route, CreateCommitStatus):
            return compact_params(
                {
                    "state": route.state,
                    "target_url": route.target_url,
                    "description": route.description,
                    "context": route.context,
                }
            )
        assert_never(route)

    @property
    def response_type(self) -> Any:
        route = cast("CommitRoute", self)
        if isinstance(route, ListCommits):
            return List[GitHubCommit]
        if isinstance(route, GetCommit):
            return GitHubCommit
        if isinstance(route, ListCommitStatuses):
            return List[GitHubCommitStatus]
        if isinstance(route, GetCombinedStatus):
            return GitHubCombinedStatus
        if isinstance(route, CreateCommitStatus):
            return GitHubCommitStatus
        assert_never(route)


class ListCommits(GitHubCommitRoute, PaginatedRoute):
    owner: str
    repo: str
    # Branch name or SHA to start listing from
    sha: Optional[str] = None
    file_path: Optional[str] = None
    author: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None


class GetCommit(GitHubCommitRoute):
    owner: str
    repo: str
    ref: str


class ListCommitStatuses(GitHubCommitRoute, PaginatedRoute):
    owner: str
    repo: str
    ref: str


class GetCombinedStatus(GitHubCommitRoute):
    owner: str
    repo: str
    ref: str


class CreateCommitStatus(GitHubCommitRoute):
    owner: str
    repo: str
    sha: str
    state: GitHubStatusState
    target_url: Optional[str] = None
    description: Optional[str] = None
    context: Optional[str] = None


CommitRoute = Union[ListCommits, GetCommit, ListCommitStatuses, GetCombinedStatus, CreateCommitStatus]
