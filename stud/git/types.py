"""Shared data types for stud git operations."""

from dataclasses import dataclass, field
from enum import StrEnum

from stud.constants import GitProvider


@dataclass(frozen=True)
class RepositoryRemoteInfo:
    """Owner, name and provider decoded from a remote URL."""

    owner: str | None
    name: str | None
    provider: GitProvider | None

    @property
    def slug(self) -> str | None:
        if self.owner is None or self.name is None:
            return None
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class BranchStatus:
    """Ahead/behind counts of a branch against its base and its upstream."""

    ahead_base: int = 0
    behind_base: int = 0
    ahead_remote: int = 0
    behind_remote: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "ahead_base": self.ahead_base,
            "behind_base": self.behind_base,
            "ahead_remote": self.ahead_remote,
            "behind_remote": self.behind_remote,
        }


@dataclass
class BranchMatches:
    """Branches found for an issue key, split by location."""

    local: list[str] = field(default_factory=list)
    remote: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.local and not self.remote

    def to_dict(self) -> dict[str, list[str]]:
        return {"local": list(self.local), "remote": list(self.remote)}


class RenameState(StrEnum):
    """Progress of a remote branch rename."""

    NOT_RENAMED = "not_renamed"
    LOCAL_RENAMED = "local_renamed"
    REMOTE_RENAMED = "remote_renamed"
    COMPLETE = "complete"
