"""Protocol definitions for the repository store and the command runner."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from .models import BranchRef, HeadRef, RemoteRef, StatusCounters, TagRef


class RepositoryHandle(Protocol):
    """An open working copy. Handles live for a single read or write."""

    @property
    def working_directory(self) -> Path: ...

    def status(self) -> StatusCounters: ...

    def branches(self) -> Sequence[BranchRef]: ...

    def head(self) -> HeadRef: ...

    def tags(self) -> Sequence[TagRef]: ...

    def remotes(self) -> Sequence[RemoteRef]: ...

    def stash_count(self) -> int: ...

    def create_branch(self, name: str, at: str) -> BranchRef: ...

    def checkout(self, name: str) -> HeadRef: ...

    def close(self) -> None: ...

    def __enter__(self) -> RepositoryHandle: ...

    def __exit__(self, *exc_info: object) -> None: ...


class RepositoryBackend(Protocol):
    """Locates and opens working copies."""

    def discover(self, path: Path) -> Path | None:
        """Return the working directory root enclosing ``path``, or None."""
        ...

    def open(self, root: Path) -> RepositoryHandle:
        """Open the working copy at ``root``.

        Raises:
            NotARepositoryError: if ``root`` is not a working copy
            RepositoryLockedError: if a lock file blocks the read
        """
        ...


class CommandRunner(Protocol):
    """Runs arbitrary git subcommands against a working copy."""

    def run(self, repository_path: Path, args: Sequence[str]) -> int:
        """Run ``git <args>`` inside ``repository_path`` and return its exit status.

        Raises:
            GitCommandError: if the command exits with a nonzero status
        """
        ...
