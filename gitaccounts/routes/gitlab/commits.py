"""GitLab commit routes (Commits API)."""

from typing import Any, Dict, List, Literal, Optional, Union, assert_never, cast

from gitaccounts.models.gitlab_api import (
    GitLabCommit,
    GitLabCommitComment,
    GitLabCommitStatus,
    GitLabDiff,
)
from gitaccounts.models.transport import Encoding, HTTPMethod
from gitaccounts.routes.base import PaginatedRoute, Route, compact_params, segment

GitLabPipelineState = Literal["pending", "running", "success", "failed", "canceled"]


class GitLabCommitRoute(Route):
    """Base class of the GitLab commit family. See CommitRoute for the variants."""

    @property
    def method(self) -> HTTPMethod:
        route = cast("CommitRoute", self)
        if isinstance(route, (ReadCommits, ReadCommit, ReadCommitDiffs, ReadCommitComments, ReadCommitStatuses)):
            return HTTPMethod.GET
        if isinstance(route, (PostCommitComment, SetCommitStatus)):
            return HTTPMethod.POST
        assert_never(route)

    @property
    def encoding(self) -> Encoding:
        route = cast("CommitRoute", self)
        if isinstance(route, (ReadCommits, ReadCommit, ReadCommitDiffs, ReadCommitComments, ReadCommitStatuses)):
            return Encoding.URL
        if isinstance(route, PostCommitComment):
            return Encoding.JSON
        if isinstance(route, SetCommitStatus):
            return Encoding.FORM
        assert_never(route)

    @property
    def path(self) -> str:
        route = cast("CommitRoute", self)
        if isinstance(route, ReadCommits):
            return f"project/{segment(route.id)}/repository/commits"
        if isinstance(route, ReadCommit):
            return f"project/{segment(route.id)}/repository/commits/{segment(route.sha)}"
        if isinstance(route, ReadCommitDiffs):
            return f"project/{segment(route.id)}/repository/commits/{segment(route.sha)}/diff"
        if isinstance(route, (ReadCommitComments, PostCommitComment)):
            return f"project/{segment(route.id)}/repository/commits/{segment(route.sha)}/comments"
        if isinstance(route, ReadCommitStatuses):
            return f"project/{segment(route.id)}/repository/commits/{segment(route.sha)}/statuses"
        if isinstance(route, SetCommitStatus):
            return f"project/{segment(route.id)}/statuses/{segment(route.sha)}"
        assert_never(route)

    @property
    def params(self) -> Dict[str, Any]:
        route = cast("CommitRoute", self)
        if isinstance(route, ReadCommits):
            return compact_params(
                {
                    "ref_name": route.ref_name,
                    "since": route.since,
                    "until": route.until,
                    **route.pagination_params(),
                }
            )
        if isinstance(route, ReadCommit):
            return {}
        if isinstance(route, (ReadCommitDiffs, ReadCommitComments)):
            return compact_params(route.pagination_params())
        if isinstance(route, ReadCommitStatuses):
            return compact_params(
                {
                    "ref": route.ref,
                    "stage": route.stage,
                    "name": route.name,
                    "all": route.all,
                    **route.pagination_params(),
                }
            )
        if isinstance(route, PostCommitComment):
            return compact_params(
                {"note": route.note, "path": route.file_path, "line": route.line, "line_type": route.line_type}
            )
        if isinstance(route, SetCommitStatus):
            return compact_params(
                {
                    "state": route.state,
                    "ref": route.ref,
                    "name": route.name,
                    "target_url": route.target_url,
                    "description": route.description,
                    "coverage": route.coverage,
                    "pipeline_id": route.pipeline_id,
                }
            )
        assert_never(route)

    @property
    def response_type(self) -> Any:
        route = cast("CommitRoute", self)
        if isinstance(route, ReadCommits):
            return List[GitLabCommit]
        if isinstance(route, ReadCommit):
            return GitLabCommit
        if isinstance(route, ReadCommitDiffs):
            return List[GitLabDiff]
        if isinstance(route, ReadCommitComments):
            return List[GitLabCommitComment]
        if isinstance(route, PostCommitComment):
            return GitLabCommitComment
        if isinstance(route, ReadCommitStatuses):
            return List[GitLabCommitStatus]
        if isinstance(route, SetCommitStatus):
            return GitLabCommitStatus
        assert_never(route)


class ReadCommits(GitLabCommitRoute, PaginatedRoute):
    id: str
    ref_name: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None


class ReadCommit(GitLabCommitRoute):
    id: str
    sha: str


class ReadCommitDiffs(GitLabCommitRoute, PaginatedRoute):
    id: str
    sha: str


class ReadCommitComments(GitLabCommitRoute, PaginatedRoute):
    id: str
    sha: str


class ReadCommitStatuses(GitLabCommitRoute, PaginatedRoute):
    id: str
    sha: str
    ref: Optional[str] = None
    stage: Optional[str] = None
    name: Optional[str] = None
    all: Optional[bool] = None


class PostCommitComment(GitLabCommitRoute):
    id: str
    sha: str
    note: str
    # Sent as "path"; named file_path to avoid shadowing Route.path
    file_path: Optional[str] = None
    line: Optional[int] = None
    line_type: Optional[Literal["new", "old"]] = None


class SetCommitStatus(GitLabCommitRoute):
    id: str
    sha: str
    state: GitLabPipelineState
    ref: Optional[str] = None
    name: Optional[str] = None
    target_url: Optional[str] = None
    description: Optional[str] = None
    coverage: Optional[float] = None
    pipeline_id: Optional[int] = None


CommitRoute = Union[
    ReadCommits,
    ReadCommit,
    ReadCommitDiffs,
    ReadCommitComments,
    ReadCommitStatuses,
    PostCommitComment,
    SetCommitStatus,
]
