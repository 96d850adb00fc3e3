"""Typer-based CLI for git-repo-status."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .branches import strip_annotation
from .config import Settings, load_settings
from .exceptions import RepoStatusError
from .interactive import select_branch
from .models import RepositorySnapshot
from .reader import RepositoryReader
from .writer import RepositoryWriter

app = typer.Typer(help="Inspect branch and sync state of a git working copy", add_completion=False)
console = Console()

_PATH_ARGUMENT = typer.Argument(Path("."), help="Any path inside the working copy.")
_REPO_OPTION = typer.Option(Path("."), "--repo", "-r", help="Any path inside the working copy.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-repo-status {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    try:
        settings = load_settings()
    except RepoStatusError as err:
        _fail(str(err))
    _configure_logging(logging.DEBUG if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@app.command(help="Show the status snapshot of a working copy")
def status(
    ctx: typer.Context,
    path: Path = _PATH_ARGUMENT,
    as_json: bool = typer.Option(False, "--json", help="Output JSON for scripting."),
) -> None:
    snapshot = _read(ctx, path)
    if as_json:
        typer.echo(json.dumps(snapshot.to_dict(), indent=2))
        return
    if snapshot.is_empty:
        console.print(f"No repository found at {path}.")
        return
    console.print(_render_snapshot(snapshot))


@app.command(help="List local and remote branches as one catalog")
def branches(ctx: typer.Context, path: Path = _PATH_ARGUMENT) -> None:
    snapshot = _require_snapshot(ctx, path)
    for entry in snapshot.all_branches:
        marker = "*" if strip_annotation(entry) == snapshot.current_branch else " "
        console.print(f"{marker} {entry}", markup=False, highlight=False)


@app.command(help="Print web URLs for the repository's remotes")
def urls(ctx: typer.Context, path: Path = _PATH_ARGUMENT) -> None:
    snapshot = _require_snapshot(ctx, path)
    if not snapshot.remote_urls:
        console.print("No remotes configured.")
        return
    for url in snapshot.remote_urls:
        typer.echo(url)


@app.command(help="Switch to a branch, creating it from its remote when needed")
def checkout(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Branch to switch to. Prompts when omitted."),
    repo: Path = _REPO_OPTION,
) -> None:
    snapshot = _require_snapshot(ctx, repo)
    try:
        target = branch or select_branch(snapshot.all_branches, current=snapshot.current_branch)
        switched = RepositoryWriter().checkout(snapshot, target)
    except RepoStatusError as err:
        _fail(str(err))
    if not switched:
        _fail(f"Checkout finished but HEAD is not on {target}.")
    console.print(f"Switched to [bold]{target}[/bold]")


@app.command(help="Fetch all remotes")
def fetch(
    ctx: typer.Context,
    repo: Path = _REPO_OPTION,
    prune: Optional[bool] = typer.Option(
        None, "--prune/--no-prune", help="Prune deleted remote branches. Defaults to the environment setting."
    ),
) -> None:
    snapshot = _require_snapshot(ctx, repo)
    settings: Settings = ctx.obj["settings"]
    _write(lambda writer: writer.fetch(snapshot, prune=settings.prune_on_fetch if prune is None else prune))
    console.print(f"Fetched {snapshot.name}")


@app.command(help="Pull the current branch")
def pull(ctx: typer.Context, repo: Path = _REPO_OPTION) -> None:
    snapshot = _require_snapshot(ctx, repo)
    _write(lambda writer: writer.pull(snapshot))
    console.print(f"Pulled {snapshot.current_branch}")


@app.command(help="Push the current branch")
def push(ctx: typer.Context, repo: Path = _REPO_OPTION) -> None:
    snapshot = _require_snapshot(ctx, repo)
    _write(lambda writer: writer.push(snapshot))
    console.print(f"Pushed {snapshot.current_branch}")


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read(ctx: typer.Context, path: Path) -> RepositorySnapshot:
    settings: Settings = ctx.obj["settings"]
    reader = RepositoryReader(retry_policy=settings.retry_policy())
    try:
        return reader.read_repository(path)
    except RepoStatusError as err:
        _fail(str(err))


def _require_snapshot(ctx: typer.Context, path: Path) -> RepositorySnapshot:
    snapshot = _read(ctx, path)
    if snapshot.is_empty:
        _fail(f"No readable git repository at {path}.")
    return snapshot


def _write(action) -> None:
    try:
        action(RepositoryWriter())
    except RepoStatusError as err:
        _fail(str(err))


def _render_snapshot(snapshot: RepositorySnapshot) -> Table:
    table = Table(show_header=False, title=snapshot.name, title_justify="left")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Path", snapshot.path)
    table.add_row("Branch", _describe_head(snapshot))
    table.add_row("Upstream", _describe_tracking(snapshot))
    counters = [
        ("untracked", snapshot.untracked),
        ("modified", snapshot.modified),
        ("missing", snapshot.missing),
        ("added", snapshot.added),
        ("staged", snapshot.staged),
        ("removed", snapshot.removed),
        ("ignored", snapshot.ignored),
    ]
    table.add_row("Changes", ", ".join(f"{label} {count}" for label, count in counters if count) or "clean")
    table.add_row("Stashes", str(snapshot.stash_count))
    table.add_row("Branches", str(len(snapshot.all_branches)))
    for url in snapshot.remote_urls:
        table.add_row("URL", url)
    return table


def _describe_head(snapshot: RepositorySnapshot) -> str:
    if snapshot.is_on_tag:
        return f"{snapshot.current_branch} (detached at tag)"
    if snapshot.is_detached:
        return f"{snapshot.current_branch} (detached)"
    return snapshot.current_branch


def _describe_tracking(snapshot: RepositorySnapshot) -> str:
    if not snapshot.has_upstream:
        return "none"
    if snapshot.ahead_by is None or snapshot.behind_by is None:
        return "gone"
    return f"ahead {snapshot.ahead_by}, behind {snapshot.behind_by}"


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
