"""stud CLI commands."""

from stud.commands.branches import branches
from stud.commands.config_cmd import config_group
from stud.commands.flatten import flatten
from stud.commands.rename import rename
from stud.commands.status import status

__all__ = [
    "branches",
    "config_group",
    "flatten",
    "rename",
    "status",
]
