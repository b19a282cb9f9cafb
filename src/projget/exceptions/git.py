from __future__ import annotations

from pathlib import Path

from projget.exceptions.base import ProjgetError


class GitError(ProjgetError):
    """Exception for local git operation failures.

    Network-facing failures (probe, clone) are reported as return values by
    the gateway; this exception covers problems with the local repository
    or the git installation itself.

    Attributes:
        message: Human-readable error message.
        operation: Git operation that failed (e.g., "init", "remote").
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        """Initialize the GitError.

        Args:
            message: Human-readable error message.
            operation: Git operation that failed.
        """
        self.operation = operation
        super().__init__(message)


class GitNotFoundError(GitError):
    """Raised when the git CLI is not installed or not in PATH."""

    def __init__(self, message: str = "Git CLI not found") -> None:
        super().__init__(message, operation="git_check")


class NotARepositoryError(GitError):
    """Raised when a path expected to hold a repository does not.

    Attributes:
        path: Directory that is not a repo.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = path
        super().__init__(message, operation="repo_check")
