"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from betterrm.core.audit import AuditLogger
from betterrm.filesystem.protected import ProtectedPathSet
from betterrm.models.options import RemoveOptions


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME, XDG directories and the system config at tmp_path.

    Keeps tests from reading /etc/better-rm.conf, writing to the real
    audit log or connecting to syslog.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / ".local" / "state"))
    monkeypatch.delenv("BETTER_RM_TRASH", raising=False)
    monkeypatch.setattr(
        "betterrm.core.config.get_system_config_path",
        lambda: tmp_path / "etc" / "better-rm.conf",
    )
    monkeypatch.setattr("betterrm.cli.main.attach_syslog", lambda: None)
    return home


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Scratch directory for removal targets (symlink-resolved)."""
    path = (tmp_path / "work").resolve()
    path.mkdir()
    return path


@pytest.fixture
def empty_registry() -> ProtectedPathSet:
    """Registry without the built-in defaults."""
    return ProtectedPathSet()


@pytest.fixture
def audit(tmp_path: Path) -> AuditLogger:
    """Audit logger writing to tmp_path/audit.jsonl."""
    return AuditLogger(log_path=tmp_path / "audit.jsonl")


@pytest.fixture
def default_options() -> RemoveOptions:
    """Options matching a plain `better-rm FILE` invocation."""
    return RemoveOptions()


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes | str | None]]:
    """Return a function capturing every entry below a root with its content."""
    return _snapshot


def _snapshot(root: Path) -> dict[str, bytes | str | None]:
    state: dict[str, bytes | str | None] = {}
    for path in sorted(root.rglob("*")):
        key = str(path.relative_to(root))
        if path.is_symlink():
            state[key] = f"-> {path.readlink()}"
        elif path.is_dir():
            state[key] = None
        else:
            state[key] = path.read_bytes()
    return state


@pytest.fixture
def make_deep_tree() -> Callable[[Path, int], Path]:
    """Return a function building a single chain of nested directories.

    Directories are created one level at a time, since os.makedirs recurses
    once per missing level.
    """

    def _make(root: Path, depth: int) -> Path:
        path = str(root)
        os.mkdir(path)
        for _ in range(depth):
            path = os.path.join(path, "d")
            os.mkdir(path)
        return Path(path)

    return _make
