"""stud git package -- git orchestration over the git executable.

Re-exports core classes for convenient access:
    from stud.git import BranchOperator, CommandRunner, RepositoryInspector
"""

from stud.git.inspector import RepositoryInspector, project_key_from_issue_key, validate_branch_name
from stud.git.operator import BranchOperator
from stud.git.remote_url import detect_provider, parse_remote_url
from stud.git.runner import CommandResult, CommandRunner
from stud.git.sequence import build_sequence_editor_script
from stud.git.types import BranchMatches, BranchStatus, RenameState, RepositoryRemoteInfo

__all__ = [
    "CommandRunner",
    "CommandResult",
    "RepositoryInspector",
    "BranchOperator",
    "parse_remote_url",
    "detect_provider",
    "build_sequence_editor_script",
    "validate_branch_name",
    "project_key_from_issue_key",
    "BranchMatches",
    "BranchStatus",
    "RenameState",
    "RepositoryRemoteInfo",
]
