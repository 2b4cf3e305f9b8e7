"""
Pydantic models for GitHub REST API responses.

Uses extra="ignore" to discard fields we don't use.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class GitHubAccount(BaseModel):
    """User/app sub-object (author, committer, creator)."""

    model_config = ConfigDict(extra="ignore")

    login: str
    id: int
    type: Optional[str] = None
    html_url: Optional[str] = None


class GitHubGitActor(BaseModel):
    """Git-level author/committer inside a commit object."""

    model_config = ConfigDict(extra="ignore")

    name: str
    email: str
    date: datetime


class GitHubCommitDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str
    author: Optional[GitHubGitActor]
    committer: Optional[GitHubGitActor]
    comment_count: Optional[int] = None


class GitHubParent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sha: str
    url: Optional[str] = None


class GitHubCommitFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    filename: str
    status: str
    additions: int
    deletions: int
    changes: int
    patch: Optional[str] = None


class GitHubCommit(BaseModel):
    """Commit from GET /repos/:owner/:repo/commits[/:ref]."""

    model_config = ConfigDict(extra="ignore")

    sha: str
    commit: GitHubCommitDetail
    # Null when the git author has no GitHub account
    author: Optional[GitHubAccount]
    committer: Optional[GitHubAccount]
    parents: List[GitHubParent]
    html_url: str
    # Only present on the single-commit endpoint
    files: Optional[List[GitHubCommitFile]] = None


class GitHubCommitStatus(BaseModel):
    """Status from /repos/:owner/:repo/commits/:ref/statuses or POST /statuses/:sha."""

    model_config = ConfigDict(extra="ignore")

    id: int
    state: str
    context: str
    description: Optional[str]
    target_url: Optional[str]
    created_at: datetime
    updated_at: datetime
    creator: Optional[GitHubAccount] = None


class GitHubCombinedStatus(BaseModel):
    """Combined status from GET /repos/:owner/:repo/commits/:ref/status."""

    model_config = ConfigDict(extra="ignore")

    state: str
    sha: str
    total_count: int
    statuses: List[GitHubCommitStatus]


class GitHubErrorBody(BaseModel):
    """Error payload: {"message": ..., "documentation_url": ..., "errors": [...]}."""

    model_config = ConfigDict(extra="ignore")

    message: str
    documentation_url: Optional[str] = None
    errors: Optional[List[Any]] = None

    def summary(self) -> str:
        return self.message
