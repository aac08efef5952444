"""BranchOperator -- mutating branch workflows built on the runner and inspector."""

import contextlib
import os
import tempfile
from pathlib import Path
from shlex import quote

from stud.constants import DEFAULT_REMOTE
from stud.git.inspector import RepositoryInspector
from stud.git.runner import CommandResult, CommandRunner
from stud.git.sequence import BACKUP_SUFFIX, SCRIPT_PREFIX, build_sequence_editor_script
from stud.git.types import BranchStatus, RenameState
from stud.logging import get_logger

logger = get_logger("git.operator")


class BranchOperator:
    """Branch creation, renaming, deletion, syncing and history rewriting.

    Multi-step workflows have no rollback: a failing step raises GitError and
    the repository keeps whatever the completed steps produced.
    """

    def __init__(self, runner: CommandRunner, inspector: RepositoryInspector | None = None) -> None:
        """Initialize the operator.

        Args:
            runner: Command runner bound to the repository
            inspector: Inspector sharing the same runner (created if omitted)
        """
        self.runner = runner
        self.inspector = inspector or RepositoryInspector(runner)

    # ------------------------------------------------------------------
    # Create / switch
    # ------------------------------------------------------------------

    def create_branch(self, name: str, start_point: str) -> None:
        """Create ``name`` from ``start_point`` and switch to it."""
        self.runner.must_run(f"git switch -c {quote(name)} {quote(start_point)}")
        logger.info(f"Created branch {name} from {start_point}")

    def checkout(self, ref: str) -> None:
        self.runner.must_run(f"git checkout {quote(ref)}")

    def switch_branch(self, name: str) -> None:
        self.runner.must_run(f"git switch {quote(name)}")

    def switch_to_remote_branch(self, name: str, remote: str = DEFAULT_REMOTE) -> None:
        """Create a local branch tracking ``<remote>/<name>`` and switch to it."""
        self.runner.must_run(f"git switch -c {quote(name)} --track {quote(remote)}/{quote(name)}")
        logger.info(f"Switched to {name} tracking {remote}/{name}")

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_branch(self, name: str, remote_exists: bool = True) -> None:
        """Delete a merged local branch.

        Args:
            name: Branch to delete
            remote_exists: Whether the branch still exists on the remote; when
                it does not, stale remote-tracking refs are pruned first so
                they do not make git consider the branch unmerged
        """
        if not remote_exists:
            self.prune_remote_tracking_refs()
        self.runner.must_run(f"git branch -d {quote(name)}")
        logger.info(f"Deleted branch {name}")

    def delete_branch_force(self, name: str) -> None:
        self.runner.must_run(f"git branch -D {quote(name)}")
        logger.info(f"Force-deleted branch {name}")

    def delete_remote_branch(self, remote: str, name: str) -> None:
        self.runner.must_run(f"git push {quote(remote)} --delete {quote(name)}")
        logger.info(f"Deleted {remote}/{name}")

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def rename_local_branch(self, old: str, new: str) -> None:
        """Rename a local branch, in place when it is checked out."""
        if self.inspector.current_branch() == old:
            self.runner.must_run(f"git branch -m {quote(new)}")
        else:
            self.runner.must_run(f"git branch -m {quote(old)} {quote(new)}")
        logger.info(f"Renamed local branch {old} -> {new}")

    def rename_remote_branch(self, old: str, new: str, remote: str = DEFAULT_REMOTE) -> RenameState:
        """Rename a branch on ``remote``, whether or not it was renamed locally.

        The local name to push from is looked up first, so the workflow gives
        the same remote and tracking state when ``old`` was already renamed
        to ``new`` by a separate local rename.

        Args:
            old: Current branch name on the remote
            new: Desired branch name
            remote: Remote name

        Returns:
            RenameState.COMPLETE once every step has run
        """
        if self.inspector.local_branch_exists(old):
            state, local_name = RenameState.NOT_RENAMED, old
        elif self.inspector.local_branch_exists(new):
            state, local_name = RenameState.LOCAL_RENAMED, new
        else:
            state, local_name = RenameState.LOCAL_RENAMED, None

        if local_name is not None:
            self.runner.must_run(
                f"git push --set-upstream {quote(remote)} {quote(local_name)}:{quote(new)}"
            )
        else:
            # No local copy at all: publish the remote-tracking ref under the new name
            self.runner.must_run(
                f"git push {quote(remote)} refs/remotes/{quote(remote)}/{quote(old)}:refs/heads/{quote(new)}"
            )
        state = RenameState.REMOTE_RENAMED
        logger.debug(f"Rename {old} -> {new}: {state}")

        self.delete_remote_branch(remote, old)

        if local_name is not None:
            self.runner.must_run(
                f"git branch --set-upstream-to={quote(remote)}/{quote(new)} {quote(local_name)}"
            )
        state = RenameState.COMPLETE
        logger.info(f"Renamed {remote}/{old} -> {remote}/{new}")
        return state

    # ------------------------------------------------------------------
    # Remote synchronisation
    # ------------------------------------------------------------------

    def fetch(self, remote: str = DEFAULT_REMOTE) -> None:
        self.runner.must_run(f"git fetch {quote(remote)}")

    def prune_remote_tracking_refs(self, remote: str = DEFAULT_REMOTE) -> None:
        self.runner.must_run(f"git fetch --prune {quote(remote)}")

    def push_to_origin(self, branch: str) -> CommandResult:
        """Push ``branch`` to origin and set its upstream; the caller inspects the result."""
        return self.runner.run(f"git push --set-upstream origin {quote(branch)}")

    def pull(self, remote: str, branch: str) -> None:
        self.runner.must_run(f"git pull {quote(remote)} {quote(branch)}")

    def pull_with_rebase(self, remote: str, branch: str) -> None:
        self.runner.must_run(f"git pull --rebase {quote(remote)} {quote(branch)}")

    def force_push_with_lease(self, remote: str | None = None, branch: str | None = None) -> CommandResult:
        """Force-push the current branch, or ``remote branch`` when both are given."""
        if remote and branch:
            return self.runner.must_run(f"git push --force-with-lease {quote(remote)} {quote(branch)}")
        return self.runner.must_run("git push --force-with-lease")

    def push_tags(self, remote: str = DEFAULT_REMOTE, branch: str = "main") -> None:
        self.runner.must_run(f"git push --tags {quote(remote)} {quote(branch)}")

    # ------------------------------------------------------------------
    # Commits and history
    # ------------------------------------------------------------------

    def stage_all(self) -> None:
        self.runner.must_run("git add -A")

    def commit(self, message: str) -> None:
        self.runner.must_run(f"git commit -m {quote(message)}")

    def commit_fixup(self, sha: str) -> None:
        self.runner.must_run(f"git commit --fixup {quote(sha)}")

    def undo_last_commit(self) -> None:
        """Drop the last commit, keeping its changes staged."""
        self.runner.must_run("git reset --soft HEAD~1")

    def rebase(self, onto: str, branch: str | None = None) -> None:
        """Rebase the current branch, or switch to ``branch`` and rebase it, onto ``onto``."""
        if branch:
            self.runner.must_run(f"git rebase {quote(onto)} {quote(branch)}")
        else:
            self.runner.must_run(f"git rebase {quote(onto)}")

    def merge(self, branch: str) -> None:
        self.runner.must_run(f"git merge --no-ff {quote(branch)}")

    def tag(self, name: str, message: str) -> None:
        self.runner.must_run(f"git tag -a {quote(name)} -m {quote(message)}")

    def has_fixup_commits(self, since_sha: str) -> bool:
        return self.inspector.has_fixup_commits(since_sha)

    def find_latest_logical_sha(self, base: str) -> str | None:
        return self.inspector.find_latest_logical_sha(base)

    def find_first_logical_sha(self, base: str) -> str | None:
        return self.inspector.find_first_logical_sha(base)

    def rebase_autosquash(self, since_sha: str) -> None:
        """Fold fixup!/squash! commits after ``since_sha`` into their targets.

        squash! messages are combined without opening an editor. The
        sequence-editor script and its ``.bak`` sibling are removed once the
        rebase returns, whether it succeeded or raised.

        Raises:
            GitError: If the rebase fails
        """
        fd, script_name = tempfile.mkstemp(prefix=SCRIPT_PREFIX)
        script = Path(script_name)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(build_sequence_editor_script())
            script.chmod(0o755)

            self.runner.must_run(
                f"git rebase -i --autosquash {quote(since_sha)}",
                env={"GIT_SEQUENCE_EDITOR": str(script), "GIT_EDITOR": "true"},
            )
            logger.info(f"Autosquashed commits since {since_sha[:8]}")
        finally:
            for leftover in (script, Path(f"{script}{BACKUP_SUFFIX}")):
                with contextlib.suppress(FileNotFoundError):
                    leftover.unlink()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_branch_status(self, branch: str, base: str, remote_upstream: str | None) -> BranchStatus:
        """Ahead/behind counts against ``base`` and, if known, the upstream.

        Without an upstream both remote-relative counts are 0.
        """
        ahead_remote = behind_remote = 0
        if remote_upstream:
            ahead_remote = self.inspector.ahead_behind(branch, remote_upstream)
            behind_remote = self.inspector.ahead_behind(remote_upstream, branch)

        return BranchStatus(
            ahead_base=self.inspector.ahead_behind(branch, base),
            behind_base=self.inspector.ahead_behind(base, branch),
            ahead_remote=ahead_remote,
            behind_remote=behind_remote,
        )
