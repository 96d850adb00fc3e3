"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Iterable, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .branches import strip_annotation
from .exceptions import RepoStatusError


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise RepoStatusError(
            "Interactive mode requires a TTY. Pass the branch name to run non-interactively."
        )


def fuzzy_select(message: str, choices: Sequence[Choice | str]) -> Any:
    _ensure_tty()
    return inquirer.fuzzy(message=message, choices=choices).execute()


def build_branch_choices(catalog: Iterable[str], *, exclude: str | None = None) -> list[Choice]:
    """Choices for the branch picker: label is the catalog entry, value the bare name."""

    result: list[Choice] = []
    seen: set[str] = set()
    for entry in catalog:
        name = strip_annotation(entry)
        if not name or name == exclude or name in seen:
            continue
        seen.add(name)
        result.append(Choice(value=name, name=entry))
    return result


def select_branch(catalog: Iterable[str], *, current: str | None = None) -> str:
    choices = build_branch_choices(catalog, exclude=current)
    if not choices:
        raise RepoStatusError("No other branches to switch to.")
    return str(fuzzy_select("Switch to branch", choices))


__all__ = ["fuzzy_select", "build_branch_choices", "select_branch"]
