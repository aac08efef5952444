"""CommandRunner -- spawns git command lines and captures their output."""

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from stud.constants import NO_ERROR_OUTPUT
from stud.exceptions import GitError
from stud.logging import get_logger

logger = get_logger("git.runner")


@dataclass(frozen=True)
class CommandResult:
    """Result of one command invocation."""

    command: str
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Stdout with surrounding whitespace removed."""
        return self.stdout.strip()

    @property
    def technical_details(self) -> str:
        """Best-effort failure detail: stderr, then stdout, then a sentinel."""
        if self.stderr.strip():
            return self.stderr.strip()
        if self.stdout.strip():
            return self.stdout.strip()
        return NO_ERROR_OUTPUT

    def lines(self) -> list[str]:
        """Non-empty stripped stdout lines."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


class CommandRunner:
    """Runs shell command lines inside a repository working tree.

    ``run`` never raises on a non-zero exit and leaves interpretation to the
    caller. ``must_run`` raises GitError instead. Nothing is retried.
    """

    def __init__(self, repo_path: str | Path = ".", timeout: int = 120) -> None:
        """Initialize the runner.

        Args:
            repo_path: Working directory for every command
            timeout: Timeout in seconds applied to each invocation
        """
        self.repo_path = Path(repo_path).resolve()
        self.timeout = timeout

    def run(self, command: str, env: dict[str, str] | None = None) -> CommandResult:
        """Run a command and return its result whatever the exit status.

        Args:
            command: Shell command line, e.g. ``git rev-parse HEAD``
            env: Extra environment variables for this invocation only

        Returns:
            CommandResult with exit code and captured output
        """
        exec_env = None
        if env:
            exec_env = os.environ.copy()
            exec_env.update(env)

        logger.debug(f"Running: {command}")
        start_time = time.time()
        try:
            proc = subprocess.run(
                command,
                shell=True,
                cwd=str(self.repo_path),
                env=exec_env,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=command,
                exit_code=-1,
                stdout="",
                stderr=f"Command timed out after {self.timeout}s",
                duration_ms=int((time.time() - start_time) * 1000),
            )

        result = CommandResult(
            command=command,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.time() - start_time) * 1000),
        )
        if not result.success:
            logger.debug(f"Command exited {result.exit_code}: {command}")
        return result

    def must_run(self, command: str, env: dict[str, str] | None = None) -> CommandResult:
        """Run a command and raise if it fails.

        Args:
            command: Shell command line
            env: Extra environment variables for this invocation only

        Returns:
            CommandResult of the successful invocation

        Raises:
            GitError: If the command exits non-zero or times out
        """
        result = self.run(command, env=env)
        if not result.success:
            raise GitError(
                f"Git command failed: {command}",
                command=command,
                exit_code=result.exit_code,
                technical_details=result.technical_details,
            )
        return result
