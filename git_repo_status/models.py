"""Dataclasses shared across modules."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, ClassVar


class HeadKind(enum.Enum):
    """What HEAD points at."""

    BRANCH = "branch"
    DETACHED = "detached"


@dataclass(frozen=True)
class HeadRef:
    """Raw HEAD information as reported by the repository."""

    kind: HeadKind
    friendly_name: str
    tip_sha: str | None = None
    upstream_canonical_name: str | None = None
    ahead_by: int | None = None
    behind_by: int | None = None

    @property
    def is_detached(self) -> bool:
        return self.kind is HeadKind.DETACHED


@dataclass(frozen=True)
class BranchRef:
    """A local or remote-tracking branch."""

    name: str
    is_remote: bool
    tip_sha: str | None = None


@dataclass(frozen=True)
class TagRef:
    name: str
    target_sha: str | None = None


@dataclass(frozen=True)
class RemoteRef:
    name: str
    url: str


@dataclass(frozen=True)
class StatusCounters:
    """Working tree file counts, one per status category."""

    untracked: int = 0
    modified: int = 0
    missing: int = 0
    added: int = 0
    staged: int = 0
    removed: int = 0
    ignored: int = 0


@dataclass(frozen=True)
class HeadDetails:
    """Display name and classification of the current position."""

    name: str
    is_detached: bool
    is_on_tag: bool


@dataclass(frozen=True)
class RepositorySnapshot:
    """Read-only view of a working copy at the time it was read.

    ``RepositorySnapshot.EMPTY`` stands for "no repository here" or "could not
    be read". It is a regular result, not an error.
    """

    EMPTY: ClassVar[RepositorySnapshot]

    name: str = ""
    path: str = ""
    location: str = ""
    current_branch: str = ""
    has_upstream: bool = False
    is_detached: bool = False
    is_on_tag: bool = False
    ahead_by: int | None = None
    behind_by: int | None = None
    untracked: int | None = None
    modified: int | None = None
    missing: int | None = None
    added: int | None = None
    staged: int | None = None
    removed: int | None = None
    ignored: int | None = None
    branches: tuple[str, ...] = ()
    local_branches: tuple[str, ...] = ()
    all_branches: tuple[str, ...] = ()
    remote_urls: tuple[str, ...] = ()
    stash_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.name

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("branches", "local_branches", "all_branches", "remote_urls"):
            data[key] = list(data[key])
        return data


RepositorySnapshot.EMPTY = RepositorySnapshot()
