from gitaccounts.routes.github.commits import (
    CommitRoute,
    CreateCommitStatus,
    GetCombinedStatus,
    GetCommit,
    GitHubCommitRoute,
    ListCommits,
    ListCommitStatuses,
)

__all__ = [
    "CommitRoute",
    "CreateCommitStatus",
    "GetCombinedStatus",
    "GetCommit",
    "GitHubCommitRoute",
    "ListCommits",
    "ListCommitStatuses",
]
