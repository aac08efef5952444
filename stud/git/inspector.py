"""RepositoryInspector -- read-only queries turned into typed facts."""

import re
from pathlib import Path
from shlex import quote

from stud.constants import (
    BRANCH_PREFIXES,
    DEFAULT_REMOTE,
    FIXUP_SUBJECT,
    GitProvider,
    ISSUE_KEY,
    ISSUE_KEY_IN_BRANCH,
)
from stud.exceptions import RepositoryError
from stud.git.remote_url import detect_provider, parse_remote_url
from stud.git.runner import CommandRunner
from stud.git.types import BranchMatches, RepositoryRemoteInfo
from stud.logging import get_logger

logger = get_logger("git.inspector")

VALID_BRANCH_NAME = re.compile(r"^[a-zA-Z0-9._/-]+$")


def validate_branch_name(name: str) -> bool:
    """Check a branch name against the subset of git's ref rules stud allows.

    Args:
        name: Candidate branch name

    Returns:
        True if the name is usable
    """
    if not VALID_BRANCH_NAME.match(name):
        return False
    if ".." in name or "//" in name:
        return False
    if name.startswith(("/", "-", ".")) or name.endswith(("/", ".", ".lock")):
        return False
    return True


def project_key_from_issue_key(issue_key: str) -> str:
    """Project part of an issue key (``PROJ-123`` -> ``PROJ``).

    Raises:
        RepositoryError: If the key is not LETTERS-DIGITS
    """
    match = ISSUE_KEY.match(issue_key.upper())
    if not match:
        raise RepositoryError(
            f"Invalid issue key format: {issue_key}",
            details={"issue_key": issue_key},
        )
    return match.group(1)


class RepositoryInspector:
    """Read-only repository queries.

    Queries whose failure simply means "the fact does not hold" (no upstream,
    branch missing, count unavailable) use the tolerant runner mode and map a
    failed command to None, False, 0 or an empty list.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    # ------------------------------------------------------------------
    # HEAD and upstream
    # ------------------------------------------------------------------

    def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None if git cannot tell."""
        result = self.runner.run("git rev-parse --abbrev-ref HEAD")
        if not result.success or not result.output:
            return None
        return result.output

    def upstream_branch(self) -> str | None:
        """Upstream of the current branch (``origin/feat/x``), or None."""
        result = self.runner.run("git rev-parse --abbrev-ref @{u}")
        if not result.success or not result.output:
            return None
        return result.output

    def issue_key_from_branch(self) -> str | None:
        """Issue key embedded in the current branch name, upper-cased."""
        branch = self.current_branch()
        if branch is None:
            return None
        match = ISSUE_KEY_IN_BRANCH.search(branch)
        return match.group(1).upper() if match else None

    def git_dir(self) -> Path:
        """Absolute path of the repository's git metadata directory.

        Raises:
            RepositoryError: If the working directory is not a git repository
        """
        result = self.runner.run("git rev-parse --git-dir")
        if not result.success or not result.output:
            raise RepositoryError(
                "Not in a git repository.",
                details={"path": str(self.runner.repo_path)},
            )
        git_dir = Path(result.output.rstrip("/"))
        if not git_dir.is_absolute():
            git_dir = self.runner.repo_path / git_dir
        return git_dir

    # ------------------------------------------------------------------
    # Branch existence and listings
    # ------------------------------------------------------------------

    def local_branch_exists(self, name: str) -> bool:
        result = self.runner.run(f"git rev-parse --verify --quiet refs/heads/{quote(name)}")
        return result.success

    def remote_branch_exists(self, remote: str, name: str) -> bool:
        result = self.runner.run(f"git ls-remote --heads {quote(remote)} {quote(name)}")
        return bool(result.output)

    def local_branches(self, pattern: str | None = None) -> list[str]:
        """Short names of local branches, optionally filtered by a glob."""
        command = "git branch --format='%(refname:short)'"
        if pattern:
            command += f" --list {quote(pattern)}"
        result = self.runner.run(command)
        if not result.success:
            return []
        return result.lines()

    def remote_branches(self, remote: str = DEFAULT_REMOTE, pattern: str | None = None) -> list[str]:
        """Branch names on a remote as reported by ``ls-remote``."""
        command = f"git ls-remote --heads {quote(remote)}"
        if pattern:
            command += f" {quote(pattern)}"
        result = self.runner.run(command)
        if not result.success:
            return []

        branches = []
        for line in result.lines():
            _, _, ref = line.partition("\t")
            if ref.startswith("refs/heads/"):
                branches.append(ref[len("refs/heads/") :])
        return branches

    def find_branches_by_issue_key(self, issue_key: str, remote: str = DEFAULT_REMOTE) -> BranchMatches:
        """Local and remote branches named ``<prefix>/<KEY>...`` for any known prefix.

        Args:
            issue_key: Issue key such as ``PROJ-123``
            remote: Remote to list

        Returns:
            BranchMatches with de-duplicated names in discovery order
        """
        matches = BranchMatches()
        for prefix in BRANCH_PREFIXES:
            pattern = f"{prefix}/{issue_key}*"
            for name in self.local_branches(pattern):
                if name not in matches.local:
                    matches.local.append(name)
            for name in self.remote_branches(remote, pattern):
                if name not in matches.remote:
                    matches.remote.append(name)

        logger.debug(
            f"Branches for {issue_key}: {len(matches.local)} local, {len(matches.remote)} remote"
        )
        return matches

    # ------------------------------------------------------------------
    # Divergence and ancestry
    # ------------------------------------------------------------------

    def ahead_behind(self, a: str, b: str) -> int:
        """Number of commits reachable from ``a`` but not from ``b``.

        Returns 0 when the count cannot be computed.
        """
        result = self.runner.run(f"git rev-list --count {quote(b)}..{quote(a)}")
        if not result.success:
            return 0
        try:
            return max(int(result.output), 0)
        except ValueError:
            return 0

    def is_ancestor(self, ref: str, branch: str) -> bool:
        """True if ``ref`` is ``branch`` or one of its ancestors.

        ``merge-base --is-ancestor`` exits 0 or 1 with an answer. Any other
        exit means the check itself failed, in which case the rebase dry run
        decides: a rebase of ``branch`` onto ``ref`` has nothing to pull in
        exactly when ``ref`` is already contained in ``branch``.
        """
        result = self.runner.run(f"git merge-base --is-ancestor {quote(ref)} {quote(branch)}")
        if result.exit_code in (0, 1):
            return result.exit_code == 0

        logger.debug(f"Ancestry check failed for {ref}..{branch}, falling back to rebase dry run")
        dry_run = self.runner.run(f"git rev-list --count {quote(branch)}..{quote(ref)}")
        return dry_run.success and dry_run.output == "0"

    def is_merged_into(self, branch: str, target: str) -> bool:
        """True if ``branch`` appears in ``git branch --merged <target>``."""
        result = self.runner.run(f"git branch --merged {quote(target)} --format='%(refname:short)'")
        if not result.success:
            return False
        return branch in result.lines()

    def merge_base(self, a: str, b: str) -> str:
        return self.runner.must_run(f"git merge-base {quote(a)} {quote(b)}").output

    def is_branch_based_on(self, branch: str, base: str) -> bool:
        """True if the merge base of ``branch`` and ``base`` is the tip of ``base``."""
        merge_base = self.runner.run(f"git merge-base {quote(base)} {quote(branch)}")
        base_tip = self.runner.run(f"git rev-parse {quote(base)}")
        if not merge_base.success or not base_tip.success:
            return False
        return merge_base.output == base_tip.output

    def can_rebase_branch(self, branch: str, onto: str) -> bool:
        """Dry-run merge of the two histories; False if it would conflict."""
        result = self.runner.run(f"git merge-tree --write-tree {quote(onto)} {quote(branch)}")
        return result.success

    def is_head_pushed(self) -> bool:
        """True if HEAD is contained in its upstream."""
        upstream = self.upstream_branch()
        if upstream is None:
            return False
        return self.ahead_behind("HEAD", upstream) == 0

    def has_at_least_one_commit(self, base: str) -> bool:
        return self.ahead_behind("HEAD", base) > 0

    # ------------------------------------------------------------------
    # Commits and working tree
    # ------------------------------------------------------------------

    def porcelain_status(self) -> str:
        return self.runner.must_run("git status --porcelain").stdout

    def has_changes(self) -> bool:
        return bool(self.porcelain_status().strip())

    def commit_message(self, sha: str) -> str:
        return self.runner.must_run(f"git log -1 --pretty=%B {quote(sha)}").output

    def has_fixup_commits(self, since_sha: str) -> bool:
        """True if any commit in ``since_sha..HEAD`` is a fixup!/squash! commit."""
        result = self.runner.run(
            f"git log {quote(since_sha)}..HEAD --format=%s --grep='^fixup!' --grep='^squash!'"
        )
        if not result.success:
            return False
        return any(FIXUP_SUBJECT.match(subject) for subject in result.lines())

    def find_latest_logical_sha(self, base: str) -> str | None:
        """Most recent non-fixup commit in ``base..HEAD``."""
        result = self.runner.run(
            f"git log {quote(base)}..HEAD --format=%H"
            ' --grep="^fixup!" --grep="^squash!" --invert-grep --max-count=1'
        )
        if not result.success or not result.output:
            return None
        return result.output

    def find_first_logical_sha(self, base: str) -> str | None:
        """Earliest non-fixup commit in ``base..HEAD``."""
        result = self.runner.run(
            f"git log {quote(base)}..HEAD --reverse --format=%H"
            ' --grep="^fixup!" --grep="^squash!" --invert-grep'
        )
        if not result.success:
            return None
        lines = result.lines()
        return lines[0] if lines else None

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------

    def remote_url(self, remote: str = DEFAULT_REMOTE) -> str | None:
        result = self.runner.run(f"git config --get remote.{remote}.url")
        if not result.success:
            return None
        return result.output or None

    def resolve_remote_url(self, remote: str = DEFAULT_REMOTE) -> RepositoryRemoteInfo:
        """Owner, name and provider of a remote."""
        return parse_remote_url(self.remote_url(remote))

    def detect_provider(self, remote: str = DEFAULT_REMOTE) -> GitProvider | None:
        """Provider suggested by the remote URL, None when the URL is not host-based."""
        return detect_provider(self.remote_url(remote))
