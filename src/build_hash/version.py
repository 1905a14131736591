"""Version information for the tool itself, stamped with its own git revision.

Runs the same probes the gate uses against this file's repo, not the
caller's cwd, so editable installs report exactly which code is running.
"""

import os

from build_hash.git_helpers import REVISION_COMMAND, STATUS_COMMAND, count_lines, first_line
from build_hash.runner import run_shell

PACKAGE_VERSION = "1.0.0"

_REPO_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def format_version(commit: str | None, change_count: int) -> str:
    """Pure function: '1.0.0 (g3a7f2c1+)' style version string."""
    dirty = "+" if change_count > 0 else ""
    return f"{PACKAGE_VERSION} (g{commit or 'unknown'}{dirty})"


def get_version() -> str:
    """Return the package version plus the short hash of its source checkout."""
    if not os.path.isdir(os.path.join(_REPO_DIR, ".git")):
        return format_version(None, 0)
    commit = first_line(run_shell(REVISION_COMMAND, cwd=_REPO_DIR, quiet=True))
    status = run_shell(STATUS_COMMAND, cwd=_REPO_DIR, quiet=True) or ""
    return format_version(commit, count_lines(status))
