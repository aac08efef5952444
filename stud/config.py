"""stud configuration: per-clone project config and the global user config."""

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stud.constants import (
    GLOBAL_CONFIG_DIR,
    GLOBAL_CONFIG_ENV,
    GLOBAL_CONFIG_FILE,
    GLOBAL_TOKEN_KEYS,
    PROJECT_CONFIG_FILE,
    GitProvider,
)
from stud.exceptions import RepositoryError
from stud.logging import get_logger

logger = get_logger("config")


class ProjectConfig(BaseModel):
    """Contents of ``<git-dir>/stud.config``.

    Keys owned by other subsystems (``migration_version`` and the like) are
    kept as extra fields so they are written back unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    base_branch: str | None = Field(default=None, alias="baseBranch")
    git_provider: GitProvider | None = Field(default=None, alias="gitProvider")
    github_token: str | None = Field(default=None, alias="githubToken")
    gitlab_token: str | None = Field(default=None, alias="gitlabToken")
    project_key: str | None = Field(default=None, alias="projectKey")
    transition_id: int | str | None = Field(default=None, alias="transitionId")

    @field_validator("git_provider", mode="before")
    @classmethod
    def _unknown_provider_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in {p.value for p in GitProvider}:
            return value.strip().lower()
        return None

    @field_validator("base_branch", "github_token", "gitlab_token", "project_key", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def token_for(self, provider: GitProvider) -> str | None:
        if provider == GitProvider.GITHUB:
            return self.github_token
        return self.gitlab_token

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the on-disk camelCase keys, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ConfigStore:
    """Reads and writes the per-clone YAML config file.

    Writes merge into the document currently on disk, so keys this store
    does not know about survive every update.
    """

    def __init__(self, config_path: str | Path) -> None:
        """Initialize the store.

        Args:
            config_path: Location of ``stud.config`` inside the git directory
        """
        self.config_path = Path(config_path)

    @classmethod
    def for_git_dir(cls, git_dir: str | Path) -> "ConfigStore":
        return cls(Path(git_dir) / PROJECT_CONFIG_FILE)

    def read(self) -> dict[str, Any]:
        """Raw mapping on disk; empty when missing, unreadable or malformed."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def load(self) -> ProjectConfig:
        """Typed view of the config file."""
        try:
            return ProjectConfig.model_validate(self.read())
        except ValidationError as e:
            logger.warning(f"Ignoring invalid config {self.config_path}: {e.error_count()} error(s)")
            return ProjectConfig()

    def write(self, data: dict[str, Any]) -> None:
        """Replace the file contents with ``data``.

        Raises:
            RepositoryError: If the git directory holding the file is missing
        """
        config_dir = self.config_path.parent
        if not config_dir.is_dir():
            raise RepositoryError(
                f"Git directory not found: {config_dir}",
                details={"path": str(config_dir)},
            )

        with open(self.config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def update(self, **changes: Any) -> dict[str, Any]:
        """Merge camelCase ``changes`` into the stored mapping and write it.

        Returns:
            The mapping that was written
        """
        data = self.read()
        data.update(changes)
        self.write(data)
        logger.debug(f"Updated {self.config_path}: {', '.join(sorted(changes))}")
        return data

    def save(self, config: ProjectConfig) -> None:
        """Write every set field of ``config``, keeping other stored keys."""
        self.update(**config.to_dict())


def global_config_path() -> Path:
    """``$STUD_CONFIG_HOME/config.yml`` or ``~/.config/stud/config.yml``."""
    override = os.environ.get(GLOBAL_CONFIG_ENV)
    if override:
        return Path(override).expanduser() / GLOBAL_CONFIG_FILE
    return Path.home() / GLOBAL_CONFIG_DIR / GLOBAL_CONFIG_FILE


def load_global_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load the user-wide config; empty when absent or malformed."""
    config_path = global_config_path() if path is None else Path(path)
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable global config {config_path}: {e}")
        return {}

    return data if isinstance(data, dict) else {}


def global_token(config: dict[str, Any], provider: GitProvider) -> str | None:
    """Token for ``provider`` from a global config mapping.

    The legacy ``GIT_PROVIDER``/``GIT_TOKEN`` pair is honoured when the
    provider-specific key is absent.
    """
    token = config.get(GLOBAL_TOKEN_KEYS[provider])
    if isinstance(token, str) and token.strip():
        return token.strip()

    legacy_token = config.get("GIT_TOKEN")
    if config.get("GIT_PROVIDER") == provider.value and isinstance(legacy_token, str):
        return legacy_token.strip() or None
    return None
