"""Workspace -- the git services for one repository clone, wired together."""

from dataclasses import dataclass
from pathlib import Path

from stud.config import ConfigStore
from stud.console import ConsoleIO
from stud.git.inspector import RepositoryInspector
from stud.git.operator import BranchOperator
from stud.git.runner import CommandRunner
from stud.resolver import ConfigResolver


@dataclass
class Workspace:
    """Runner, inspector, operator, config store and resolver sharing one repo."""

    runner: CommandRunner
    inspector: RepositoryInspector
    operator: BranchOperator
    store: ConfigStore
    resolver: ConfigResolver

    @classmethod
    def open(cls, repo_path: str | Path = ".", io: ConsoleIO | None = None) -> "Workspace":
        """Build the services for the repository containing ``repo_path``.

        Raises:
            RepositoryError: If ``repo_path`` is not inside a git repository
        """
        runner = CommandRunner(repo_path)
        inspector = RepositoryInspector(runner)
        store = ConfigStore.for_git_dir(inspector.git_dir())
        return cls(
            runner=runner,
            inspector=inspector,
            operator=BranchOperator(runner, inspector),
            store=store,
            resolver=ConfigResolver(store, inspector, io or ConsoleIO()),
        )
