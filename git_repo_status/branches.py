"""Merge local and remote branch names into one display catalog."""

from __future__ import annotations

from typing import Iterable

from .models import BranchRef

REMOTE_ONLY_SUFFIX = " (r)"
LOCAL_ONLY_SUFFIX = " (l)"
_ORIGIN_PREFIX = "origin/"


def local_branch_names(branches: Iterable[BranchRef]) -> list[str]:
    return [branch.name for branch in branches if not branch.is_remote]


def stripped_remote_branch_names(branches: Iterable[BranchRef]) -> list[str]:
    """Remote names without ``origin/``, skipping symbolic ``HEAD`` pointers.

    Only a leading ``origin/`` is removed; other remotes keep their prefix.
    """

    names = []
    for branch in branches:
        if not branch.is_remote or "HEAD" in branch.name:
            continue
        name = branch.name
        if name.startswith(_ORIGIN_PREFIX):
            name = name[len(_ORIGIN_PREFIX):]
        names.append(name)
    return names


def merge_branch_catalog(branches: Iterable[BranchRef]) -> list[str]:
    """Return the sorted union of local and remote names.

    Names present on both sides appear once without annotation. Remote-only
    names get `` (r)`` and local-only names get `` (l)``.
    """

    branches = list(branches)
    local = set(local_branch_names(branches))
    remote = set(stripped_remote_branch_names(branches))
    catalog = set(local & remote)
    catalog.update(f"{name}{REMOTE_ONLY_SUFFIX}" for name in remote - local)
    catalog.update(f"{name}{LOCAL_ONLY_SUFFIX}" for name in local - remote)
    return sorted(catalog)


def strip_annotation(entry: str) -> str:
    """Turn a catalog entry back into a plain branch name."""

    for suffix in (REMOTE_ONLY_SUFFIX, LOCAL_ONLY_SUFFIX):
        if entry.endswith(suffix):
            return entry[: -len(suffix)]
    return entry


__all__ = [
    "REMOTE_ONLY_SUFFIX",
    "LOCAL_ONLY_SUFFIX",
    "local_branch_names",
    "stripped_remote_branch_names",
    "merge_branch_catalog",
    "strip_annotation",
]
