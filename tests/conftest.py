"""Pytest configuration and fixtures for stud tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.helpers.git_repo import run_git


@pytest.fixture(autouse=True)
def _isolated_git_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep user/global git and stud config out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_EDITOR", "true")
    monkeypatch.setenv("STUD_CONFIG_HOME", str(home / ".config" / "stud"))


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    os.chdir(tmp_path)

    run_git("init", "-q", "-b", "main", cwd=tmp_path)
    run_git("config", "user.email", "test@test.com", cwd=tmp_path)
    run_git("config", "user.name", "Test", cwd=tmp_path)

    (tmp_path / "README.md").write_text("# Test Repo")
    run_git("add", "-A", cwd=tmp_path)
    run_git("commit", "-q", "-m", "Initial commit", cwd=tmp_path)

    yield tmp_path

    os.chdir(orig_dir)


@pytest.fixture
def tmp_remote_repo(tmp_repo: Path, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Attach a bare ``origin`` holding ``main`` and ``develop`` to tmp_repo.

    Returns:
        Path to the bare remote repository
    """
    remote = tmp_path_factory.mktemp("remote") / "origin.git"
    run_git("init", "-q", "--bare", "-b", "main", str(remote))
    run_git("remote", "add", "origin", str(remote), cwd=tmp_repo)
    run_git("push", "-q", "-u", "origin", "main", cwd=tmp_repo)
    run_git("push", "-q", "origin", "main:develop", cwd=tmp_repo)
    run_git("fetch", "-q", "origin", cwd=tmp_repo)
    return remote
