"""Build repository snapshots."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .branches import local_branch_names, merge_branch_catalog
from .exceptions import RepositoryLockedError
from .git import GitRepository
from .head import resolve_head_details
from .models import RepositorySnapshot
from .protocol import RepositoryBackend, RepositoryHandle
from .retry import RetryPolicy
from .urls import build_remote_urls

logger = logging.getLogger(__name__)


def build_snapshot(repo: RepositoryHandle) -> RepositorySnapshot:
    """Read everything the snapshot needs from an open handle."""

    status = repo.status()
    head = repo.head()
    details = resolve_head_details(head, repo.tags())
    branches = list(repo.branches())
    workdir = Path(repo.working_directory)
    has_upstream = bool(head.upstream_canonical_name)
    return RepositorySnapshot(
        name=workdir.name,
        path=str(workdir),
        location=str(workdir.parent),
        current_branch=details.name,
        has_upstream=has_upstream,
        is_detached=details.is_detached,
        is_on_tag=details.is_on_tag,
        ahead_by=head.ahead_by if has_upstream else None,
        behind_by=head.behind_by if has_upstream else None,
        untracked=status.untracked,
        modified=status.modified,
        missing=status.missing,
        added=status.added,
        staged=status.staged,
        removed=status.removed,
        ignored=status.ignored,
        branches=tuple(branch.name for branch in branches),
        local_branches=tuple(local_branch_names(branches)),
        all_branches=tuple(merge_branch_catalog(branches)),
        remote_urls=tuple(build_remote_urls(repo.remotes(), details)),
        stash_count=repo.stash_count(),
    )


@dataclass
class RepositoryReader:
    """Reads a snapshot of the working copy enclosing a path.

    Lock errors are retried according to ``retry_policy`` and re-raised when
    the attempts run out. Every other failure yields ``RepositorySnapshot.EMPTY``.
    """

    backend: RepositoryBackend = GitRepository
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    def read_repository(self, path: str | Path | None) -> RepositorySnapshot:
        root = self._discover(path)
        if root is None:
            return RepositorySnapshot.EMPTY
        return self.retry_policy.call(self._read, root)

    async def read_repository_async(self, path: str | Path | None) -> RepositorySnapshot:
        root = await asyncio.to_thread(self._discover, path)
        if root is None:
            return RepositorySnapshot.EMPTY
        return await self.retry_policy.call_async(asyncio.to_thread, self._read, root)

    def _discover(self, path: str | Path | None) -> Path | None:
        if path is None or not str(path).strip():
            return None
        try:
            root = self.backend.discover(Path(path))
        except Exception:
            logger.debug("Could not look for a repository at %s", path, exc_info=True)
            return None
        if root is None:
            logger.debug("No repository encloses %s", path)
        return root

    def _read(self, root: Path) -> RepositorySnapshot:
        try:
            with self.backend.open(root) as repo:
                return build_snapshot(repo)
        except RepositoryLockedError:
            raise
        except Exception:
            logger.debug("Could not read repository at %s", root, exc_info=True)
            return RepositorySnapshot.EMPTY


__all__ = ["RepositoryReader", "build_snapshot"]
