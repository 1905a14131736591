"""Hash artifact I/O: the small text file the built application reads at runtime."""

import os


def write_hash(revision: str, suffix: str, output_path: str) -> None:
    """Replace the artifact at *output_path* with exactly ``revision + suffix``.

    Creates missing parent directories. Any previous artifact is removed
    first, never appended to. OSError propagates to the caller unretried.
    """
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if os.path.lexists(output_path):
        os.remove(output_path)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(revision + suffix)


def read_hash(output_path: str) -> str | None:
    """Return the artifact content, or None if no artifact has been written."""
    try:
        with open(output_path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
