"""Turn remote URLs into web URLs a browser can open."""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urlparse

from .models import HeadDetails, RemoteRef

_SCP_LIKE_RE = re.compile(r"^(?P<user>[\w.-]+)@(?P<host>[^:/]+):(?P<path>.*)$")
COMMITS_PATH = "/-/commits/"
ALL_BRANCHES_PATH = "/-/branches/all"
TREE_PATH = "/tree/"


def is_ssh_shorthand(url: str) -> bool:
    """True for scp-like ``user@host:path`` remotes such as ``git@host:group/project.git``."""

    return bool(_SCP_LIKE_RE.match(url))


def _strip_git_suffix(url: str) -> str:
    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url


def web_base_url(url: str) -> str:
    """Best-effort https base for a remote URL.

    Unrecognized input is returned with only the ``.git`` suffix removed.
    """

    url = url.strip()
    match = _SCP_LIKE_RE.match(url)
    if match:
        path = match.group("path").lstrip("/")
        return _strip_git_suffix(f"https://{match.group('host')}/{path}")
    if url.startswith("ssh://"):
        parsed = urlparse(url)
        host = parsed.hostname or parsed.netloc
        return _strip_git_suffix(f"https://{host}{parsed.path}")
    return _strip_git_suffix(url)


def build_urls_for_remote(url: str, branch: str) -> list[str]:
    if not url.strip():
        return []
    base = web_base_url(url)
    if is_ssh_shorthand(url.strip()):
        return [f"{base}{COMMITS_PATH}{branch}", f"{base}{ALL_BRANCHES_PATH}"]
    return [f"{base}{TREE_PATH}{branch}"]


def build_remote_urls(remotes: Iterable[RemoteRef], head: HeadDetails) -> list[str]:
    """Browse URLs for every remote, in remote order."""

    urls: list[str] = []
    for remote in remotes:
        urls.extend(build_urls_for_remote(remote.url, head.name))
    return urls


__all__ = [
    "is_ssh_shorthand",
    "web_base_url",
    "build_urls_for_remote",
    "build_remote_urls",
]
