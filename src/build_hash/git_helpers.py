"""Git probes: current short revision and pending working-tree changes."""

from typing import NamedTuple

from build_hash.runner import run_shell
from build_hash.utils import log

REVISION_COMMAND = "git rev-parse --short HEAD"
STATUS_COMMAND = "git status --porcelain"

UNKNOWN_REVISION = "unknown"


class RevisionResult(NamedTuple):
    short_hash: str
    found: bool


def first_line(output: str | None) -> str | None:
    """Return the text before the first newline, or all of it if there is none.

    Pure function: None passes through unchanged.
    """
    if output is None:
        return None
    return output.split("\n", 1)[0]


def count_lines(output: str) -> int:
    """Count newline-delimited lines in command output.

    Pure function: empty output is zero lines, and a final line counts
    whether or not it ends with a newline ('a\\nb' and 'a\\nb\\n' are both 2).
    """
    if not output:
        return 0
    count = output.count("\n") + 1
    if output.endswith("\n"):
        count -= 1
    return count


def current_short_revision(cwd: str | None = None) -> RevisionResult:
    """Return the short hash of HEAD, or the 'unknown' sentinel if git gave nothing.

    A trailing carriage return is stripped and an empty first line counts as no result.
    """
    line = first_line(run_shell(REVISION_COMMAND, cwd=cwd))
    if line is None:
        log("GitTools: no git hash found!", style="red")
        return RevisionResult(UNKNOWN_REVISION, found=False)

    # Tolerate cmd.exe line endings; nothing else is trimmed
    line = line.rstrip("\r")
    if not line:
        log("GitTools: no git hash found!", style="red")
        return RevisionResult(UNKNOWN_REVISION, found=False)

    log(f"GitTools: git hash is '{line}'")
    return RevisionResult(line, found=True)


def pending_change_count(cwd: str | None = None) -> int:
    """Count modified, new or untracked paths in the working tree.

    Returns 0 when git status cannot be run at all, so an unavailable git
    never blocks a build.
    """
    log("GitTools: counting modified, new or untracked files in working tree.")
    output = run_shell(STATUS_COMMAND, cwd=cwd)
    if output is None:
        return 0
    count = count_lines(output)
    log(f"GitTools: {count} pending change(s)")
    return count
