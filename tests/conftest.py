"""Shared fixtures for ignore-filtering tests."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user-level settings and .env files out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def git_project_root(project_root) -> Path:
    (project_root / ".git" / "info").mkdir(parents=True)
    return project_root


@pytest.fixture
def create_file(project_root):
    """Create a file below the project root, making parent directories."""
    def _create(relpath: str, content: str | bytes = "") -> Path:
        path = project_root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path
    return _create
