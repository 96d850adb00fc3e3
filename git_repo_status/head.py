"""Classify HEAD and pick the name shown for the current position."""

from __future__ import annotations

from typing import Iterable

from .models import HeadDetails, HeadRef, TagRef


def find_tag_for_commit(tags: Iterable[TagRef], sha: str) -> TagRef | None:
    """Return the first tag pointing at ``sha`` in enumeration order."""

    return next((tag for tag in tags if tag.target_sha == sha), None)


def resolve_head_details(head: HeadRef, tags: Iterable[TagRef]) -> HeadDetails:
    if not head.is_detached:
        return HeadDetails(name=head.friendly_name, is_detached=False, is_on_tag=False)

    tag = find_tag_for_commit(tags, head.tip_sha) if head.tip_sha else None
    if tag is not None:
        name = tag.name
    else:
        name = head.tip_sha or head.friendly_name
    return HeadDetails(name=name, is_detached=True, is_on_tag=tag is not None)


__all__ = ["find_tag_for_commit", "resolve_head_details"]
