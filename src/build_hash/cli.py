"""CLI app definition and command registration."""

from typing import Annotated, Optional

import typer

from build_hash.config import SettingsError, SettingsStore
from build_hash.gate import BuildGate, HashWriteFailed, UserCancelled
from build_hash.utils import check_command, console, project_root, set_project_root
from build_hash.version import get_version
from build_hash.writer import read_hash

# Exit codes for the pre-build check
EXIT_CANCELLED = 1
EXIT_WRITE_FAILED = 2


def _version_callback(value: bool):
    if value:
        console.print(get_version())
        raise typer.Exit()


def _prompt_confirm(change_count: int) -> bool:
    """Ask the user whether to build from a dirty working tree."""
    console.print()
    console.print("GIT: Commit your changes!", style="bold yellow")
    console.print(f"There are still {change_count} uncommitted change(s).", style="yellow")
    return typer.confirm("Do you want to proceed with the build?", default=False)


def _always(answer: bool):
    return lambda change_count: answer


def _make_gate(confirm=_prompt_confirm) -> BuildGate:
    return BuildGate(SettingsStore(project_root()), confirm)


app = typer.Typer(
    help="Stamp the current git revision into a text file before building.",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit.", callback=_version_callback, is_eager=True),
    ] = False,
    directory: Annotated[
        str,
        typer.Option("--directory", "-C", help="Project root (default: current directory)."),
    ] = None,
) -> None:
    """Stamp the current git revision into a text file before building."""
    set_project_root(directory)


# ============================================
# Commands
# ============================================


@app.command()
def check(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Build a dirty tree without asking.")] = False,
    non_interactive: Annotated[
        bool, typer.Option("--non-interactive", help="Cancel a dirty build instead of asking.")
    ] = False,
) -> None:
    """Pre-build gate: warn about uncommitted changes, then write the hash file."""
    if yes and non_interactive:
        console.print("ERROR: Provide --yes or --non-interactive, not both.", style="bold red")
        raise typer.Exit(1)
    if not check_command("git"):
        console.print("WARNING: git is not installed; the hash will be 'unknown'.", style="yellow")

    if yes:
        gate = _make_gate(_always(True))
    elif non_interactive:
        gate = _make_gate(_always(False))
    else:
        gate = _make_gate()

    try:
        content = gate.run()
    except UserCancelled:
        console.print("Build cancelled: commit your changes or re-run with --yes.", style="bold yellow")
        raise typer.Exit(EXIT_CANCELLED)
    except HashWriteFailed as exc:
        console.print(f"ERROR: {exc}", style="bold red")
        raise typer.Exit(EXIT_WRITE_FAILED)
    console.print(f"Build version: {content}", style="bold green")


@app.command()
def save(
    suffix: Annotated[str, typer.Option(help="Text appended to the hash.")] = "",
    output: Annotated[str, typer.Option(help="Write here instead of the configured path.")] = None,
) -> None:
    """Save the current hash now, outside of any build."""
    try:
        content = _make_gate().save_hash(suffix, output)
    except HashWriteFailed as exc:
        console.print(f"ERROR: {exc}", style="bold red")
        raise typer.Exit(EXIT_WRITE_FAILED)
    console.print(f"Saved: {content}", style="bold green")


@app.command()
def settings(
    output_path: Annotated[str, typer.Option(help="Where the hash file is written.")] = None,
    warn: Annotated[
        Optional[bool],
        typer.Option("--warn/--no-warn", help="Ask before building with uncommitted changes."),
    ] = None,
) -> None:
    """Show the settings, updating any field given as an option."""
    store = SettingsStore(project_root())
    try:
        if output_path is not None or warn is not None:
            record = store.update(output_path=output_path, warn_on_dirty=warn)
        else:
            record = store.get_or_create()
    except SettingsError as exc:
        console.print(f"ERROR: {exc}", style="bold red")
        raise typer.Exit(EXIT_WRITE_FAILED)

    console.print("=== SETTINGS ===", style="bold cyan")
    console.print(f"  Settings file:  {store.path}")
    console.print(f"  Hash file path: {record.output_path}")
    console.print(f"  Show warning:   {'yes' if record.warn_on_dirty else 'no'}")


@app.command()
def show() -> None:
    """Print the hash file as the built application will read it."""
    store = SettingsStore(project_root())
    try:
        path = store.resolve_output_path()
    except SettingsError as exc:
        console.print(f"ERROR: {exc}", style="bold red")
        raise typer.Exit(EXIT_WRITE_FAILED)
    content = read_hash(path)
    if content is None:
        console.print(f"No hash file at '{path}'. Run 'build-hash save' first.", style="yellow")
        raise typer.Exit(1)
    console.print(content, highlight=False)
