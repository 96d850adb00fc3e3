"""Operations that change a working copy: checkout, fetch, pull and push."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .exceptions import CheckoutPreconditionError
from .git import GitCommander, GitRepository
from .models import BranchRef, RepositorySnapshot
from .protocol import CommandRunner, RepositoryBackend

logger = logging.getLogger(__name__)


def find_local_branch(branches: Iterable[BranchRef], name: str) -> BranchRef | None:
    return next((b for b in branches if not b.is_remote and b.name == name), None)


def find_upstream_candidate(branches: Iterable[BranchRef], name: str) -> BranchRef | None:
    """Pick the remote branch a new local ``name`` should track.

    A full path segment match (``origin/name``) wins over a plain suffix match.
    """

    remotes = [b for b in branches if b.is_remote and "HEAD" not in b.name]
    exact = next((b for b in remotes if b.name.endswith(f"/{name}")), None)
    if exact is not None:
        return exact
    return next((b for b in remotes if b.name.endswith(name)), None)


@dataclass
class RepositoryWriter:
    backend: RepositoryBackend = GitRepository
    runner: CommandRunner = field(default_factory=GitCommander)

    def checkout(self, repository: RepositorySnapshot, branch_name: str) -> bool:
        """Switch ``repository`` to ``branch_name``.

        An existing local branch is checked out directly. Otherwise a local
        branch is created at the matching remote branch, set to track it and
        checked out.

        Returns:
            True when HEAD ends up on ``branch_name``.

        Raises:
            CheckoutPreconditionError: if no local or remote branch matches
        """

        path = Path(repository.path)
        with self.backend.open(path) as repo:
            branches = list(repo.branches())
            if find_local_branch(branches, branch_name) is not None:
                logger.info("Switching to local branch %s", branch_name)
                head = repo.checkout(branch_name)
            else:
                upstream = find_upstream_candidate(branches, branch_name)
                if upstream is None or upstream.tip_sha is None:
                    raise CheckoutPreconditionError(branch_name)
                logger.info("Creating %s from %s", branch_name, upstream.name)
                repo.create_branch(branch_name, upstream.tip_sha)
                self.set_upstream(repository, branch_name, upstream.name)
                head = repo.checkout(branch_name)
            return head.friendly_name == branch_name

    def fetch(self, repository: RepositorySnapshot, *, prune: bool = False) -> None:
        args = ["fetch", "--all"]
        if prune:
            args.append("--prune")
        self._run(repository, args)

    def pull(self, repository: RepositorySnapshot) -> None:
        self._run(repository, ["pull"])

    def push(self, repository: RepositorySnapshot) -> None:
        self._run(repository, ["push"])

    def set_upstream(self, repository: RepositorySnapshot, local_branch: str, upstream_branch: str) -> None:
        self._run(repository, ["branch", f"--set-upstream-to={upstream_branch}", local_branch])

    def _run(self, repository: RepositorySnapshot, args: list[str]) -> int:
        logger.debug("git %s in %s", " ".join(args), repository.path)
        return self.runner.run(Path(repository.path), args)


__all__ = ["RepositoryWriter", "find_local_branch", "find_upstream_candidate"]
