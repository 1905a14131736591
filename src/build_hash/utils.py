"""Core utility functions: logging, project root resolution, platform detection."""

import os
import shutil
import sys

import platformdirs
from rich.console import Console

console = Console()

LOG_NAME = "build-hash"

_project_root: str | None = None


def set_project_root(path: str | None) -> None:
    """Pin the directory that relative settings and artifact paths resolve against."""
    global _project_root
    _project_root = os.path.abspath(os.path.expanduser(path)) if path else None


def project_root() -> str:
    """Return the pinned project root, or the current directory if none was set."""
    return _project_root or os.getcwd()


def resolve_path(path: str, root: str | None = None) -> str:
    """Resolve *path* against *root* (default: the project root) unless already absolute.

    Pure function apart from the project_root() fallback.
    """
    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(root or project_root(), path))


def resolve_logs_dir() -> str:
    """Find the per-user log directory, creating it if needed.

    Never under the project root: a log file there would show up in
    git status and make a clean working tree look dirty.
    """
    logs_dir = platformdirs.user_log_dir(LOG_NAME, appauthor=False)
    os.makedirs(logs_dir, exist_ok=True)
    return logs_dir


def log(message: str, style: str = "") -> None:
    """Write a message to both the console (with optional style) and the tool log file."""
    if style:
        console.print(message, style=style, highlight=False)
    else:
        console.print(message, highlight=False)

    try:
        logs_dir = resolve_logs_dir()
        log_file = os.path.join(logs_dir, f"{LOG_NAME}.log")
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(message + "\n")
    except Exception:
        pass  # Never break a build over logging


def is_windows() -> bool:
    return sys.platform == "win32"


def check_command(name: str) -> bool:
    """Check if a command is available on PATH."""
    return shutil.which(name) is not None
