"""Tests for path resolution and log file output."""

import os

import build_hash.utils as utils
from build_hash.utils import log, project_root, resolve_logs_dir, resolve_path, set_project_root


# --- resolve_path ---

def test_relative_path_joins_root():
    assert resolve_path("Assets/GitHash.txt", "/proj") == os.path.normpath("/proj/Assets/GitHash.txt")


def test_absolute_path_is_unchanged(tmp_path):
    target = str(tmp_path / "GitHash.txt")
    assert resolve_path(target, "/proj") == target


def test_dot_segments_are_normalized():
    assert resolve_path("./a/../b.txt", "/proj") == os.path.normpath("/proj/b.txt")


# --- project root ---

def test_project_root_defaults_to_cwd(monkeypatch, tmp_path):
    monkeypatch.setattr(utils, "_project_root", None)
    monkeypatch.chdir(tmp_path)
    assert project_root() == os.getcwd()


def test_pinned_project_root_wins_over_cwd(monkeypatch, tmp_path):
    monkeypatch.setattr(utils, "_project_root", None)
    set_project_root(str(tmp_path / "game"))
    assert project_root() == str(tmp_path / "game")


# --- log ---

def test_log_appends_plain_message_to_log_file(monkeypatch, tmp_path, log_dir):
    monkeypatch.chdir(tmp_path)
    log("first", style="green")
    log("second")
    assert (log_dir / "build-hash.log").read_text() == "first\nsecond\n"


def test_log_writes_nothing_under_project_root(monkeypatch, tmp_path, tmp_path_factory):
    user_logs = tmp_path_factory.mktemp("user-logs")
    monkeypatch.setattr(utils, "resolve_logs_dir", resolve_logs_dir)
    monkeypatch.setattr(utils.platformdirs, "user_log_dir", lambda *a, **kw: str(user_logs))
    monkeypatch.setattr(utils, "_project_root", None)
    monkeypatch.chdir(tmp_path)

    log("trace line")

    assert list(tmp_path.iterdir()) == []
    assert (user_logs / "build-hash.log").read_text() == "trace line\n"


def test_logs_dir_is_the_per_user_log_dir(monkeypatch, tmp_path):
    user_logs = tmp_path / "user-logs"
    monkeypatch.setattr(utils.platformdirs, "user_log_dir", lambda *a, **kw: str(user_logs))
    assert resolve_logs_dir() == str(user_logs)
    assert user_logs.is_dir()


def test_log_survives_unwritable_logs_dir(monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the directory should be")
    monkeypatch.setattr(utils, "resolve_logs_dir", lambda: str(blocker))
    log("still printed")  # must not raise
