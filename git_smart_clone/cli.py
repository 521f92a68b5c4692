"""Typer-based CLI for git-smart-clone."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pyperclip
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Settings, load_settings
from .exceptions import GitSmartCloneError, UserAbort, ValidationError
from .fs import detect_project
from .git import CloneExecutor
from .interactive import confirm_target
from .models import ClonePlacement, CloneOutcome, PlacementMode, RepositoryReference
from .placement import resolve
from .urls import parse_repository
from .watcher import ClipboardWatcher, read_clipboard

app = typer.Typer(
    help="Clone git repositories straight from the clipboard",
    add_completion=False,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

_MODE_LABELS = {
    PlacementMode.MERGE_INTO_ROOT: "workspace root",
    PlacementMode.NEW_SUBFOLDER: "new subfolder",
    PlacementMode.NEW_IN_HOME: "new folder in home",
}


@dataclass(slots=True)
class AppState:
    settings: Settings
    console: Console
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-smart-clone {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the git-smart-clone version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    console = Console()
    try:
        settings = load_settings()
    except GitSmartCloneError as err:
        _fail(str(err))
    ctx.obj = AppState(settings=settings, console=console, verbose=verbose)


@app.command(help="Show the project markers found in a directory")
def inspect(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="Directory to inspect (defaults to the current one)."),
) -> None:
    state = _require_state(ctx)
    target = path.expanduser().resolve()
    detection = detect_project(target, state.settings.marker_files, state.settings.marker_dirs)
    if detection.markers:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Marker")
        table.add_column("Kind")
        for marker in detection.markers:
            table.add_row(marker, "directory" if marker.endswith("/") else "file")
        state.console.print(table)
    if detection.has_markers:
        if not detection.markers:
            state.console.print(f"[yellow]{escape(str(target))} could not be read; treating it as an existing project.[/yellow]")
        state.console.print("Existing project: clones will go into a new subfolder.")
    else:
        state.console.print("No project markers: clones will go directly into this directory.")


@app.command(help="Clone a repository URL (defaults to the clipboard contents)")
def clone(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(None, help="Repository URL. Read from the clipboard when omitted."),
    workspace: Optional[Path] = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root to clone into (defaults to the current directory).",
        file_okay=False,
    ),
    home: bool = typer.Option(False, "--home", help="Ignore the workspace and clone into the home directory."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept the suggested location without prompting."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show where the clone would go and stop."),
    reserve: Optional[bool] = typer.Option(
        None,
        "--reserve/--no-reserve",
        help="Create the chosen subfolder immediately so concurrent clones cannot take it.",
    ),
) -> None:
    state = _require_state(ctx)
    try:
        text = url if url is not None else _read_clipboard_text()
        repo = parse_repository(text)
        if repo is None:
            raise ValidationError(f"Not a git repository URL: {(text or '').strip() or '(empty)'}")
        outcome = _clone_flow(
            state,
            repo,
            _workspace_root(workspace, home),
            yes=yes,
            dry_run=dry_run,
            reserve=state.settings.reserve if reserve is None else reserve,
        )
    except (ValidationError, UserAbort) as exc:
        _fail(str(exc))
    if outcome is not None and not outcome.succeeded:
        raise typer.Exit(1)


@app.command(help="Watch the clipboard and clone detected repositories on Enter")
def watch(
    ctx: typer.Context,
    workspace: Optional[Path] = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root to clone into (defaults to the current directory).",
        file_okay=False,
    ),
    home: bool = typer.Option(False, "--home", help="Ignore the workspace and clone into the home directory."),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        min=0.1,
        help="Seconds between clipboard checks (defaults to GIT_SMART_CLONE_INTERVAL or 1).",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept suggested locations without prompting."),
    reserve: Optional[bool] = typer.Option(
        None,
        "--reserve/--no-reserve",
        help="Create the chosen subfolder immediately so concurrent clones cannot take it.",
    ),
) -> None:
    state = _require_state(ctx)
    root = _workspace_root(workspace, home)
    status = _DetectionStatus(state.console)
    watcher = ClipboardWatcher(
        status.detected,
        status.cleared,
        interval=interval or state.settings.interval,
        read_clipboard=read_clipboard,
    )
    watcher.start()
    state.console.print("Watching the clipboard. Press Enter to clone the detected repository, Ctrl+C to quit.")
    try:
        while True:
            try:
                state.console.input()
            except EOFError:
                break
            repo = watcher.current
            if repo is None:
                state.console.print("[yellow]No repository URL on the clipboard.[/yellow]")
                continue
            status.paused = True
            try:
                _clone_flow(
                    state,
                    repo,
                    root,
                    yes=yes,
                    dry_run=False,
                    reserve=state.settings.reserve if reserve is None else reserve,
                )
            except (ValidationError, UserAbort) as exc:
                state.console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            finally:
                status.paused = False
    except KeyboardInterrupt:
        state.console.print()
    finally:
        watcher.stop()


class _DetectionStatus:
    """Prints watcher transitions once instead of on every tick."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self.shown: str | None = None
        self.paused = False

    def detected(self, repo: RepositoryReference) -> None:
        if repo.normalized_url == self.shown:
            return
        self.shown = repo.normalized_url
        if not self.paused:
            self.console.print(f"[cyan]Detected[/cyan] [bold]{repo.name}[/bold] ({escape(repo.raw_url)})")

    def cleared(self) -> None:
        if self.shown is None:
            return
        self.shown = None
        if not self.paused:
            self.console.print("[dim]Clipboard no longer holds a repository URL.[/dim]")


def _clone_flow(
    state: AppState,
    repo: RepositoryReference,
    root: Path | None,
    *,
    yes: bool,
    dry_run: bool,
    reserve: bool,
) -> CloneOutcome | None:
    placement = resolve(
        repo,
        root,
        reserve=reserve and not dry_run,
        marker_files=state.settings.marker_files,
        marker_dirs=state.settings.marker_dirs,
    )
    reserved = reserve and not dry_run and placement.mode is PlacementMode.NEW_SUBFOLDER
    _show_placement(state.console, repo, placement)
    if dry_run:
        return None

    try:
        target = placement.target_path if yes else confirm_target(placement)
    except (ValidationError, UserAbort):
        if reserved:
            _release_reservation(placement.target_path)
        raise
    if reserved and target != placement.target_path:
        _release_reservation(placement.target_path)

    outcome = _run_clone(state, repo, placement, target)
    if outcome.succeeded:
        state.console.print(f"[green]✓[/green] {escape(outcome.message)}")
        state.console.print(f"  {outcome.target_path}")
    else:
        if reserved and target == placement.target_path:
            _release_reservation(target)
        state.console.print(f"[red]✗[/red] {escape(outcome.message)}", style="red")
    return outcome


def _run_clone(
    state: AppState,
    repo: RepositoryReference,
    placement: ClonePlacement,
    target: Path,
) -> CloneOutcome:
    cancel = threading.Event()
    with CloneExecutor(git=state.settings.git) as executor:
        future = executor.submit(repo, placement, target, cancel)
        with state.console.status(f"Cloning {repo.name}…"):
            try:
                return future.result()
            except KeyboardInterrupt:
                cancel.set()
                state.console.print("[yellow]Cancelling clone…[/yellow]")
                return future.result()


def _show_placement(console: Console, repo: RepositoryReference, placement: ClonePlacement) -> None:
    console.print(f"[bold]{repo.name}[/bold] ← {escape(repo.normalized_url)}")
    console.print(f"Placement: {_MODE_LABELS[placement.mode]} → {placement.target_path}")
    console.print(placement.prompt_message)


def _workspace_root(workspace: Path | None, home: bool) -> Path | None:
    if home:
        return None
    return (workspace or Path.cwd()).expanduser().resolve()


def _read_clipboard_text() -> str:
    try:
        return read_clipboard() or ""
    except pyperclip.PyperclipException as exc:
        raise ValidationError(f"Could not read the clipboard: {exc}") from exc


def _release_reservation(path: Path) -> None:
    try:
        path.rmdir()
    except OSError as exc:
        logger.debug("Leaving %s in place: %s", path, exc)


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
