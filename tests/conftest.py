"""Shared fixtures: keep log output out of the real per-user log directory."""

import pytest

import build_hash.utils as utils


@pytest.fixture(autouse=True)
def log_dir(monkeypatch, tmp_path_factory):
    logs = tmp_path_factory.mktemp("logs")
    monkeypatch.setattr(utils, "resolve_logs_dir", lambda: str(logs))
    return logs
