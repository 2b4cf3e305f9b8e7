from gitaccounts.routes.gitlab.commits import (
    CommitRoute,
    GitLabCommitRoute,
    PostCommitComment,
    ReadCommit,
    ReadCommitComments,
    ReadCommitDiffs,
    ReadCommits,
    ReadCommitStatuses,
    SetCommitStatus,
)
from gitaccounts.routes.gitlab.projects import GitLabProjectRoute, ProjectRoute, UploadFile

__all__ = [
    "CommitRoute",
    "GitLabCommitRoute",
    "PostCommitComment",
    "ReadCommit",
    "ReadCommitComments",
    "ReadCommitDiffs",
    "ReadCommits",
    "ReadCommitStatuses",
    "SetCommitStatus",
    "GitLabProjectRoute",
    "ProjectRoute",
    "UploadFile",
]
