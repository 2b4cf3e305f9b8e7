"""
Pydantic models for GitLab REST API responses.

All use extra="ignore" to discard fields we don't use. Fields GitLab always
sends are required (nullable ones are Optional without a default) so a
malformed payload fails loudly instead of being filled in.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator


class GitLabUser(BaseModel):
    """Author sub-object within comments and statuses."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    name: str
    state: Optional[str] = None
    avatar_url: Optional[str] = None
    web_url: Optional[str] = None


class GitLabCommitStats(BaseModel):
    model_config = ConfigDict(extra="ignore")

    additions: int
    deletions: int
    total: int


class GitLabCommit(BaseModel):
    """Commit from GET /projects/:id/repository/commits[/:sha]."""

    model_config = ConfigDict(extra="ignore")

    id: str
    short_id: str
    title: str
    message: str
    author_name: str
    author_email: str
    authored_date: datetime
    committer_name: str
    committer_email: str
    committed_date: datetime
    created_at: datetime
    parent_ids: List[str]
    web_url: Optional[str] = None
    # Only present on the single-commit endpoint
    stats: Optional[GitLabCommitStats] = None
    status: Optional[str] = None


class GitLabDiff(BaseModel):
    """File diff from GET /projects/:id/repository/commits/:sha/diff."""

    model_config = ConfigDict(extra="ignore")

    old_path: str
    new_path: str
    a_mode: Optional[str]
    b_mode: Optional[str]
    diff: str
    new_file: bool
    renamed_file: bool
    deleted_file: bool


class GitLabCommitComment(BaseModel):
    """Comment from GET/POST /projects/:id/repository/commits/:sha/comments."""

    model_config = ConfigDict(extra="ignore")

    note: str
    author: GitLabUser
    path: Optional[str] = None
    line: Optional[int] = None
    line_type: Optional[str] = None
    created_at: Optional[datetime] = None


class GitLabCommitStatus(BaseModel):
    """Pipeline status from /projects/:id/repository/commits/:sha/statuses."""

    model_config = ConfigDict(extra="ignore")

    id: int
    sha: str
    ref: Optional[str]
    status: str
    name: str
    target_url: Optional[str]
    description: Optional[str]
    created_at: datetime
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    allow_failure: bool
    coverage: Optional[float] = None
    author: Optional[GitLabUser] = None


class GitLabUpload(BaseModel):
    """Uploaded file from POST /projects/:id/uploads."""

    model_config = ConfigDict(extra="ignore")

    alt: str
    url: str
    full_path: str
    markdown: str
    id: Optional[int] = None


class GitLabErrorBody(BaseModel):
    """
    Error payload returned with non-2xx statuses.

    GitLab uses either {"message": ...} (string, list or field->errors map)
    or the OAuth style {"error": ..., "error_description": ...}.
    """

    model_config = ConfigDict(extra="ignore")

    message: Optional[Union[str, List[Any], Dict[str, Any]]] = None
    error: Optional[str] = None
    error_description: Optional[str] = None

    @model_validator(mode="after")
    def require_message_or_error(self) -> "GitLabErrorBody":
        if self.message is None and self.error is None:
            raise ValueError("error body has neither 'message' nor 'error'")
        return self

    def summary(self) -> str:
        if isinstance(self.message, str):
            return self.message
        if self.message is not None:
            return str(self.message)
        if self.error_description:
            return f"{self.error}: {self.error_description}"
        return str(self.error)
