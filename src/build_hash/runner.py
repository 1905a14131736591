"""Shell command execution with a bounded wait and concurrent stdout capture."""

import functools
import subprocess
import threading
import time

from build_hash.config import DEFAULT_TIMEOUT_SECONDS
from build_hash.utils import is_windows, log

_READ_SIZE = 4096


@functools.lru_cache(maxsize=None)
def shell_invocation() -> tuple[str, str]:
    """Return the (interpreter, single-command flag) pair for this host.

    Resolved once per process: cmd.exe /c on Windows, bash -c elsewhere.
    """
    if is_windows():
        return ("cmd.exe", "/c")
    return ("bash", "-c")


def _silent(message: str, style: str = "") -> None:
    pass


def _drain(stream, chunks: list[bytes]) -> None:
    """Read *stream* into *chunks* as bytes arrive, until EOF.

    Reads whatever is available rather than whole lines, so an unterminated
    last line is captured too.
    """
    try:
        while True:
            chunk = stream.read1(_READ_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
    except (OSError, ValueError):
        pass  # Pipe closed underneath us; keep what was read


def _decode(chunks: list[bytes]) -> str:
    """Join captured bytes into text with '\\n' line endings."""
    text = b"".join(chunks).decode("utf-8", errors="replace")
    return text.replace("\r\n", "\n")


def run_shell(
    command: str,
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    cwd: str | None = None,
    quiet: bool = False,
) -> str | None:
    """Run *command* through the host shell and return its captured stdout.

    Stdout is drained by a reader thread while the main thread waits, so
    commands with more output than the pipe buffer cannot deadlock. If the
    process is still running after *timeout* seconds, whatever was captured
    so far is returned and the process is left alone.

    Returns None only when the interpreter could not be launched. The exit
    code is logged but does not change the result. *quiet* suppresses the
    trace lines.
    """
    trace = _silent if quiet else log
    shell, flag = shell_invocation()
    trace(f"Exec: attempting to execute command: {shell} {flag} \"{command}\"", style="dim")

    kwargs = {}
    if is_windows():
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

    try:
        proc = subprocess.Popen(
            [shell, flag, command],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            cwd=cwd,
            **kwargs,
        )
    except OSError as exc:
        trace(f"Exec: could not start '{shell}': {exc}", style="red")
        return None

    chunks: list[bytes] = []
    reader = threading.Thread(target=_drain, args=(proc.stdout, chunks), daemon=True)
    reader.start()

    deadline = time.monotonic() + timeout
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        trace(
            f"Exec: '{command}' still running after {timeout}s, using partial output",
            style="yellow",
        )
        return _decode(list(chunks))

    # Grandchildren may hold the pipe open past our child's exit
    reader.join(timeout=max(0.0, deadline - time.monotonic()))
    trace(f"Exec: done (exit: {proc.returncode})", style="dim")
    return _decode(list(chunks))
