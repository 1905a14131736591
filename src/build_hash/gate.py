"""Pre-build gate: probe the working tree, confirm dirty builds, stamp the hash.

Flow for one build attempt:
1. Count pending changes with git status.
2. If the tree is dirty and warnings are on, ask the caller whether to
   proceed. A "no" aborts the build before anything is written.
3. Write the short hash to the configured artifact, with a '+' suffix
   whenever the tree was dirty (even when the warning was switched off).
"""

from enum import Enum
from typing import Callable

from build_hash.config import SettingsStore
from build_hash.git_helpers import current_short_revision, pending_change_count
from build_hash.utils import log, resolve_path
from build_hash.writer import write_hash

DIRTY_SUFFIX = "+"

# Receives the pending change count, returns True to build anyway
ConfirmCallback = Callable[[int], bool]


class BuildAborted(Exception):
    """Base for conditions that must stop the build."""


class UserCancelled(BuildAborted):
    """The user declined to build from a dirty working tree."""


class HashWriteFailed(BuildAborted):
    """The settings record or hash artifact could not be written."""


class GateState(Enum):
    IDLE = "idle"
    PROBING = "probing"
    CLEAN = "clean"
    DIRTY_CONFIRM_PENDING = "dirty-confirm-pending"
    PROCEEDING = "proceeding"
    ABORTED = "aborted"
    WRITTEN = "written"


def select_suffix(change_count: int) -> str:
    """Pure function: '+' for a dirty tree, '' for a clean one."""
    return DIRTY_SUFFIX if change_count > 0 else ""


def needs_confirmation(change_count: int, warn_on_dirty: bool) -> bool:
    """Pure function: the user is only asked when the tree is dirty and warnings are on."""
    return change_count > 0 and warn_on_dirty


class BuildGate:
    """Runs the probe -> confirm -> write sequence for a single build.

    *confirm* is only called for dirty trees with warnings enabled. *cwd* is
    where git runs; it defaults to the settings store's root.
    """

    def __init__(self, store: SettingsStore, confirm: ConfirmCallback, cwd: str | None = None):
        self.store = store
        self.confirm = confirm
        self.cwd = cwd or store.root
        self.state = GateState.IDLE

    def run(self) -> str:
        """Gate one build. Returns the artifact content written.

        Raises UserCancelled if the user declines a dirty build, and
        HashWriteFailed if settings or the artifact cannot be written.
        """
        self.state = GateState.PROBING
        change_count = pending_change_count(cwd=self.cwd)
        try:
            warn_on_dirty = self.store.get_or_create().warn_on_dirty
        except OSError as exc:
            self.state = GateState.ABORTED
            raise HashWriteFailed(str(exc)) from exc

        if needs_confirmation(change_count, warn_on_dirty):
            self.state = GateState.DIRTY_CONFIRM_PENDING
            if not self.confirm(change_count):
                self.state = GateState.ABORTED
                log("GitTools: build cancelled, there are still uncommitted changes.", style="yellow")
                raise UserCancelled(
                    "User canceled build because there are still uncommitted changes."
                )
            self.state = GateState.PROCEEDING
        else:
            self.state = GateState.CLEAN

        content = self.save_hash(select_suffix(change_count))
        self.state = GateState.WRITTEN
        return content

    def save_hash(self, suffix: str = "", output_path: str | None = None) -> str:
        """Probe the revision and write ``hash + suffix`` to the artifact.

        Uses the configured output path unless *output_path* is given.
        Returns the content written.
        """
        try:
            if output_path:
                path = resolve_path(output_path, self.store.root)
            else:
                path = self.store.resolve_output_path()
        except OSError as exc:
            self.state = GateState.ABORTED
            raise HashWriteFailed(str(exc)) from exc

        log(f"GitTools: writing git hash into '{path}'")
        revision = current_short_revision(cwd=self.cwd)
        content = revision.short_hash + suffix
        try:
            write_hash(revision.short_hash, suffix, path)
        except OSError as exc:
            self.state = GateState.ABORTED
            log(f"GitTools: could not write '{path}': {exc}", style="red")
            raise HashWriteFailed(f"Could not write hash file '{path}': {exc}") from exc

        log(f"GitTools: wrote '{content}' to '{path}'", style="green")
        return content

    def as_hook(self) -> Callable[[], None]:
        """Return a no-argument pre-build callback for host build systems.

        The callback raises a BuildAborted subclass when the build must stop.
        """
        def _hook() -> None:
            self.run()

        return _hook
