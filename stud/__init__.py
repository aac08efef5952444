"""stud - git orchestration for issue-tracker driven workflows.

Coordinates a local repository with its remote and the per-clone
configuration needed to keep base branch and provider decisions repeatable.
"""

__version__ = "0.4.0"

from stud.exceptions import ConfigurationError, GitError, RepositoryError, StudError

__all__ = [
    "__version__",
    "StudError",
    "GitError",
    "RepositoryError",
    "ConfigurationError",
]
