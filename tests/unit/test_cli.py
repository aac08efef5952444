"""Tests for the stud command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from stud.cli import cli
from tests.helpers.git_repo import commit_file, run_git


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


def _write_config(repo: Path, **values: str) -> None:
    (repo / ".git" / "stud.config").write_text(yaml.safe_dump(values))


def _read_config(repo: Path) -> dict:
    return yaml.safe_load((repo / ".git" / "stud.config").read_text())


class TestCli:
    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("branches", "config", "flatten", "rename", "status"):
            assert name in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "stud" in result.output

    def test_outside_repository(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(cli, ["status"])
        assert result.exit_code == 1
        assert "Not in a git repository" in result.output


class TestStatus:
    def test_counts(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        _write_config(tmp_repo, baseBranch="main")
        run_git("switch", "-q", "-c", "feat/x", cwd=tmp_repo)
        commit_file(tmp_repo, "a.txt", "one")
        commit_file(tmp_repo, "b.txt", "two")

        result = cli_runner.invoke(cli, ["status"])

        assert result.exit_code == 0, result.output
        assert "origin/main" in result.output
        assert "no upstream" in result.output
        assert "2" in result.output

    def test_detached_head(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        run_git("checkout", "-q", "--detach", "HEAD", cwd=tmp_repo)
        result = cli_runner.invoke(cli, ["status"])
        assert result.exit_code == 1
        assert "detached" in result.output


class TestBranches:
    def test_lists_matches(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        run_git("branch", "feat/AB-1-x", cwd=tmp_repo)
        run_git("push", "-q", "origin", "main:fix/AB-1-y", cwd=tmp_repo)

        result = cli_runner.invoke(cli, ["branches", "ab-1"])

        assert result.exit_code == 0, result.output
        assert "feat/AB-1-x" in result.output
        assert "fix/AB-1-y" in result.output

    def test_no_matches(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        result = cli_runner.invoke(cli, ["branches", "AB-9", "--no-fetch"])
        assert result.exit_code == 0
        assert "No branches found for AB-9" in result.output

    def test_invalid_key(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        result = cli_runner.invoke(cli, ["branches", "nokey", "--no-fetch"])
        assert result.exit_code == 1
        assert "Invalid issue key" in result.output


class TestRename:
    def test_local_and_remote(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        run_git("switch", "-q", "-c", "feat/old", cwd=tmp_repo)
        run_git("push", "-q", "-u", "origin", "feat/old", cwd=tmp_repo)

        result = cli_runner.invoke(cli, ["rename", "feat/new", "--yes"])

        assert result.exit_code == 0, result.output
        assert run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=tmp_repo) == "feat/new"
        assert run_git("rev-parse", "--abbrev-ref", "@{u}", cwd=tmp_repo) == "origin/feat/new"
        assert run_git("ls-remote", "--heads", "origin", "feat/old", cwd=tmp_repo) == ""

    def test_invalid_name(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        result = cli_runner.invoke(cli, ["rename", "bad..name", "--yes"])
        assert result.exit_code == 1
        assert "Invalid branch name" in result.output

    def test_target_exists(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        run_git("switch", "-q", "-c", "feat/old", cwd=tmp_repo)
        run_git("branch", "feat/taken", cwd=tmp_repo)
        result = cli_runner.invoke(cli, ["rename", "feat/taken", "--yes"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_protected_branch(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        result = cli_runner.invoke(cli, ["rename", "feat/main-copy", "--yes"])
        assert result.exit_code == 1
        assert "protected branch main" in result.output

    @pytest.fixture
    def behind_remote(self, tmp_remote_repo: Path, tmp_repo: Path) -> str:
        """feat/old pushed with one extra commit that the local copy lacks."""
        run_git("switch", "-q", "-c", "feat/old", cwd=tmp_repo)
        remote_sha = commit_file(tmp_repo, "README.md", "Remote edit", content="remote side\n")
        run_git("push", "-q", "-u", "origin", "feat/old", cwd=tmp_repo)
        run_git("reset", "-q", "--hard", "HEAD~1", cwd=tmp_repo)
        return remote_sha

    def test_rebases_onto_remote_before_renaming(
        self, cli_runner: CliRunner, tmp_repo: Path, behind_remote: str
    ) -> None:
        result = cli_runner.invoke(cli, ["rename", "feat/new", "--yes"])

        assert result.exit_code == 0, result.output
        assert "Rebased feat/old onto origin/feat/old" in result.output
        assert run_git("rev-parse", "feat/new", cwd=tmp_repo) == behind_remote
        assert run_git("rev-parse", "--abbrev-ref", "@{u}", cwd=tmp_repo) == "origin/feat/new"

    def test_sync_declined_keeps_local_history(
        self, cli_runner: CliRunner, tmp_repo: Path, behind_remote: str
    ) -> None:
        local_sha = run_git("rev-parse", "feat/old", cwd=tmp_repo)

        result = cli_runner.invoke(cli, ["rename", "feat/new"], input="n\ny\n")

        assert result.exit_code == 0, result.output
        assert run_git("rev-parse", "feat/new", cwd=tmp_repo) == local_sha

    def test_conflicting_sync_aborts(self, cli_runner: CliRunner, tmp_repo: Path, behind_remote: str) -> None:
        commit_file(tmp_repo, "README.md", "Local edit", content="local side\n")

        result = cli_runner.invoke(cli, ["rename", "feat/new", "--yes"])

        assert result.exit_code == 1
        assert "would conflict" in result.output
        assert "Resolve it manually" in result.output
        assert run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=tmp_repo) == "feat/old"
        assert run_git("ls-remote", "--heads", "origin", "feat/new", cwd=tmp_repo) == ""

    def test_declined(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        run_git("switch", "-q", "-c", "feat/old", cwd=tmp_repo)
        result = cli_runner.invoke(cli, ["rename", "feat/new"], input="n\n")
        assert result.exit_code == 0
        assert run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=tmp_repo) == "feat/old"


class TestFlatten:
    def test_folds_fixups(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        _write_config(tmp_repo, baseBranch="main")
        run_git("switch", "-q", "-c", "feat/x", cwd=tmp_repo)
        commit_file(tmp_repo, "a.txt", "Add a")
        commit_file(tmp_repo, "a.txt", "fixup! Add a", content="a2")

        result = cli_runner.invoke(cli, ["flatten"])

        assert result.exit_code == 0, result.output
        assert run_git("log", "--format=%s", "origin/main..HEAD", cwd=tmp_repo) == "Add a"

    def test_nothing_to_flatten(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        _write_config(tmp_repo, baseBranch="main")
        result = cli_runner.invoke(cli, ["flatten"])
        assert result.exit_code == 0
        assert "No fixup or squash commits" in result.output

    def test_dirty_tree(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        (tmp_repo / "dirty.txt").write_text("x")
        result = cli_runner.invoke(cli, ["flatten"])
        assert result.exit_code == 1
        assert "not clean" in result.output


class TestConfig:
    def test_show_masks_tokens(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        _write_config(tmp_repo, baseBranch="main", githubToken="ghp_abcdefgh1234")
        result = cli_runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "****1234" in result.output
        assert "ghp_abcdefgh1234" not in result.output

    def test_show_empty(self, cli_runner: CliRunner, tmp_repo: Path) -> None:
        result = cli_runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "No configuration" in result.output

    def test_init(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        with patch("stud.console.Prompt.ask", side_effect=["develop", "gitlab"]):
            result = cli_runner.invoke(cli, ["config", "init", "--skip-token"])

        assert result.exit_code == 0, result.output
        assert _read_config(tmp_repo) == {"baseBranch": "develop", "gitProvider": "gitlab"}

    def test_init_unknown_base_branch(self, cli_runner: CliRunner, tmp_remote_repo: Path, tmp_repo: Path) -> None:
        with patch("stud.console.Prompt.ask", side_effect=["trunk"]):
            result = cli_runner.invoke(cli, ["config", "init", "--skip-token"])

        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert not (tmp_repo / ".git" / "stud.config").exists()
