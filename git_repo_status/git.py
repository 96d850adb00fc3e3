"""Repository access through the git command line."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError, NotARepositoryError, RepositoryLockedError
from .models import BranchRef, HeadKind, HeadRef, RemoteRef, StatusCounters, TagRef

logger = logging.getLogger(__name__)

_LOCK_RE = re.compile(
    r"unable to create '[^']*\.lock'|cannot lock ref|could not lock config file",
    re.IGNORECASE,
)
_HEADS = "refs/heads/"
_REMOTES = "refs/remotes/"
_TAGS = "refs/tags/"
DETACHED_HEAD_NAME = "(no branch)"


def run_git(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    command = ["git", *args]
    logger.debug("Running %s in %s", " ".join(command), cwd or ".")
    result = subprocess.run(
        command,
        cwd=str(cwd) if cwd else None,
        env=env,
        encoding="utf-8",
        errors="surrogateescape",
        capture_output=True,
    )
    if check and result.returncode != 0:
        error = RepositoryLockedError if is_lock_error(result.stderr) else GitCommandError
        raise error(command, result.returncode, stdout=result.stdout, stderr=result.stderr)
    return result


def is_lock_error(stderr: str) -> bool:
    return bool(_LOCK_RE.search(stderr))


def discover_repository(path: Path) -> Path | None:
    """Return the working directory root enclosing ``path``."""

    candidate = Path(path).expanduser()
    if not candidate.exists():
        return None
    if not candidate.is_dir():
        candidate = candidate.parent
    try:
        result = run_git(["rev-parse", "--show-toplevel"], cwd=candidate, env=_read_env(), check=False)
    except OSError as exc:
        logger.debug("Could not run git in %s: %s", candidate, exc)
        return None
    root = result.stdout.strip()
    if result.returncode != 0 or not root:
        return None
    return Path(root)


def _read_env() -> dict[str, str]:
    env = dict(os.environ)
    # Messages are matched against English text; reads must not take index.lock.
    env["LC_ALL"] = "C"
    env["GIT_OPTIONAL_LOCKS"] = "0"
    return env


def _count_status(porcelain: str) -> StatusCounters:
    counts = dict.fromkeys(("untracked", "modified", "missing", "added", "staged", "removed", "ignored"), 0)
    entries = iter(porcelain.split("\0"))
    for entry in entries:
        if len(entry) < 3:
            continue
        code = entry[:2]
        if code == "??":
            counts["untracked"] += 1
            continue
        if code == "!!":
            counts["ignored"] += 1
            continue
        index, worktree = code
        if index in "RC":
            # Renames and copies are followed by the original path.
            next(entries, None)
        if "U" in code or code in ("AA", "DD"):
            counts["modified"] += 1
            continue
        if index == "A":
            counts["added"] += 1
        elif index in "MTRC":
            counts["staged"] += 1
        elif index == "D":
            counts["removed"] += 1
        if worktree in "MT":
            counts["modified"] += 1
        elif worktree == "D":
            counts["missing"] += 1
    return StatusCounters(**counts)


class GitRepository:
    """Working copy handle backed by ``git`` subprocesses."""

    def __init__(self, root: Path):
        self._root = Path(root)
        self._env = _read_env()
        self._closed = False

    @classmethod
    def discover(cls, path: Path) -> Path | None:
        return discover_repository(path)

    @classmethod
    def open(cls, root: Path) -> GitRepository:
        result = run_git(["rev-parse", "--is-inside-work-tree"], cwd=root, env=_read_env(), check=False)
        if result.returncode != 0 or result.stdout.strip() != "true":
            raise NotARepositoryError(f"Not a git working copy: {root}")
        return cls(root)

    def __enter__(self) -> GitRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._closed = True

    @property
    def working_directory(self) -> Path:
        return self._root

    def _git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        if self._closed:
            raise ValueError(f"Repository handle for {self._root} is closed")
        return run_git(args, cwd=self._root, env=self._env, check=check)

    def status(self) -> StatusCounters:
        proc = self._git(["status", "--porcelain=v1", "-z", "--ignored", "--untracked-files=normal"])
        return _count_status(proc.stdout)

    def branches(self) -> list[BranchRef]:
        proc = self._git(["for-each-ref", "--format=%(refname)%00%(objectname)", _HEADS, _REMOTES])
        items: list[BranchRef] = []
        for line in proc.stdout.splitlines():
            refname, _, sha = line.partition("\0")
            if refname.startswith(_HEADS):
                items.append(BranchRef(name=refname[len(_HEADS):], is_remote=False, tip_sha=sha or None))
            elif refname.startswith(_REMOTES):
                items.append(BranchRef(name=refname[len(_REMOTES):], is_remote=True, tip_sha=sha or None))
        return items

    def head(self) -> HeadRef:
        symbolic = self._git(["symbolic-ref", "-q", "HEAD"], check=False)
        tip = self._git(["rev-parse", "-q", "--verify", "HEAD^{commit}"], check=False).stdout.strip() or None
        ref = symbolic.stdout.strip()
        if symbolic.returncode != 0 or not ref.startswith(_HEADS):
            return HeadRef(kind=HeadKind.DETACHED, friendly_name=DETACHED_HEAD_NAME, tip_sha=tip)
        name = ref[len(_HEADS):]
        upstream = self._git(["for-each-ref", "--format=%(upstream)", ref]).stdout.strip() or None
        ahead_by = behind_by = None
        if upstream and tip:
            counted = self._git(["rev-list", "--left-right", "--count", f"HEAD...{upstream}"], check=False)
            if counted.returncode == 0:
                ahead, _, behind = counted.stdout.strip().partition("\t")
                ahead_by, behind_by = int(ahead), int(behind)
        return HeadRef(
            kind=HeadKind.BRANCH,
            friendly_name=name,
            tip_sha=tip,
            upstream_canonical_name=upstream,
            ahead_by=ahead_by,
            behind_by=behind_by,
        )

    def tags(self) -> list[TagRef]:
        proc = self._git(["for-each-ref", "--format=%(refname)%00%(objectname)%00%(*objectname)", _TAGS])
        items: list[TagRef] = []
        for line in proc.stdout.splitlines():
            refname, sha, peeled = (line.split("\0") + ["", ""])[:3]
            items.append(TagRef(name=refname[len(_TAGS):], target_sha=peeled or sha or None))
        return items

    def remotes(self) -> list[RemoteRef]:
        proc = self._git(["config", "--get-regexp", r"^remote\..*\.url$"], check=False)
        items: list[RemoteRef] = []
        for line in proc.stdout.splitlines():
            key, _, url = line.partition(" ")
            items.append(RemoteRef(name=key[len("remote."):-len(".url")], url=url.strip()))
        return items

    def stash_count(self) -> int:
        proc = self._git(["stash", "list"], check=False)
        return len([line for line in proc.stdout.splitlines() if line.strip()])

    def create_branch(self, name: str, at: str) -> BranchRef:
        self._git(["branch", name, at])
        return BranchRef(name=name, is_remote=False, tip_sha=at)

    def checkout(self, name: str) -> HeadRef:
        self._git(["checkout", name])
        return self.head()


class GitCommander:
    """Command runner that shells out to ``git`` inside the working copy."""

    def run(self, repository_path: Path, args: Sequence[str]) -> int:
        return run_git(list(args), cwd=Path(repository_path)).returncode


__all__ = [
    "run_git",
    "is_lock_error",
    "discover_repository",
    "GitRepository",
    "GitCommander",
    "DETACHED_HEAD_NAME",
]
