"""Custom error hierarchy for git-repo-status."""

from __future__ import annotations


class RepoStatusError(RuntimeError):
    """Base error for the package."""


class ConfigError(RepoStatusError):
    """Raised when an environment setting is invalid."""


class NotARepositoryError(RepoStatusError):
    """Raised when a path is not inside a git working copy."""


class GitCommandError(RepoStatusError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class RepositoryLockedError(GitCommandError):
    """Raised when git could not take a lock file held by another process."""


class CheckoutPreconditionError(RepoStatusError):
    """Raised when a requested branch exists neither locally nor on a remote."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' was not found locally or on any remote.")


__all__ = [
    "RepoStatusError",
    "ConfigError",
    "NotARepositoryError",
    "GitCommandError",
    "RepositoryLockedError",
    "CheckoutPreconditionError",
]
