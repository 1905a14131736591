"""Configuration constants and the persisted settings record.

The settings record lives in a small JSON file inside the project so it is
versioned with the code it describes. It holds two fields: where the hash
artifact is written, and whether a dirty working tree should prompt before
building.
"""

import json
import os
from dataclasses import dataclass, replace

from build_hash.utils import log, project_root, resolve_path

# ---------------------------------------------------------------------------
# Fixed locations and defaults
# ---------------------------------------------------------------------------

SETTINGS_FILE_PATH = "Assets/Editor/GitHashSettings.json"
DEFAULT_OUTPUT_PATH = "Assets/Resources/GitHash.txt"
DEFAULT_TIMEOUT_SECONDS = 5

# On-disk key names
_KEY_OUTPUT_PATH = "GitHashTextAssetPath"
_KEY_WARN_ON_DIRTY = "ShowWarning"


class SettingsError(OSError):
    """The settings file exists but could not be read, parsed, or written."""


@dataclass
class VersionRecord:
    output_path: str = DEFAULT_OUTPUT_PATH
    warn_on_dirty: bool = True

    def to_json(self) -> dict:
        return {_KEY_OUTPUT_PATH: self.output_path, _KEY_WARN_ON_DIRTY: self.warn_on_dirty}

    @classmethod
    def from_json(cls, data: dict) -> "VersionRecord":
        """Build a record from the on-disk dict, defaulting any missing key.

        Raises SettingsError when a present key has the wrong type.
        """
        output_path = data.get(_KEY_OUTPUT_PATH, DEFAULT_OUTPUT_PATH)
        warn_on_dirty = data.get(_KEY_WARN_ON_DIRTY, True)
        if not isinstance(output_path, str) or not output_path:
            raise SettingsError(f"{_KEY_OUTPUT_PATH} must be a non-empty string, got {output_path!r}")
        if not isinstance(warn_on_dirty, bool):
            raise SettingsError(f"{_KEY_WARN_ON_DIRTY} must be true or false, got {warn_on_dirty!r}")
        return cls(output_path=output_path, warn_on_dirty=warn_on_dirty)


class SettingsStore:
    """Load-or-create access to the project's VersionRecord.

    The record is created with defaults on first access and written back on
    every update. Nothing here ever deletes the settings file.
    """

    def __init__(self, root: str | None = None):
        self.root = os.path.abspath(root) if root else project_root()
        self.path = resolve_path(SETTINGS_FILE_PATH, self.root)
        self._record: VersionRecord | None = None

    def get_or_create(self) -> VersionRecord:
        """Return the persisted record, creating it with defaults if absent."""
        if self._record is not None:
            return self._record

        if os.path.exists(self.path):
            self._record = self._load()
        else:
            record = VersionRecord()
            self._save(record)
            log(f"Created settings with defaults at '{self.path}'", style="cyan")
            self._record = record
        return self._record

    def update(self, output_path: str | None = None, warn_on_dirty: bool | None = None) -> VersionRecord:
        """Change either field and persist immediately. Omitted fields are kept."""
        record = self.get_or_create()
        if output_path is not None:
            if not output_path.strip():
                raise SettingsError("Output path must not be empty")
            record = replace(record, output_path=output_path)
        if warn_on_dirty is not None:
            record = replace(record, warn_on_dirty=warn_on_dirty)
        self._save(record)
        self._record = record
        return record

    def resolve_output_path(self, record: VersionRecord | None = None) -> str:
        """Absolute artifact path; relative paths resolve against the store root."""
        record = record or self.get_or_create()
        return resolve_path(record.output_path, self.root)

    def _load(self) -> VersionRecord:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Settings file '{self.path}' is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise SettingsError(f"Could not read settings file '{self.path}': {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file '{self.path}' must contain a JSON object")
        return VersionRecord.from_json(data)

    def _save(self, record: VersionRecord) -> None:
        try:
            os.makedirs(os.path.dirname(self.path), exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(record.to_json(), f, indent=2)
                f.write("\n")
        except OSError as exc:
            raise SettingsError(f"Could not write settings file '{self.path}': {exc}") from exc
