"""ConfigResolver -- makes sure base branch, provider and token are known.

Each item goes through the same steps: read the stored value, validate it,
and return it normalised when valid. Otherwise a candidate is auto-detected,
offered as the prompt default, the answer is validated once (a bad answer
is fatal, there is no second prompt) and persisted through the ConfigStore.
"""

from typing import Any

from stud.config import ConfigStore, global_token, load_global_config
from stud.console import ConsoleIO
from stud.constants import BASE_BRANCH_CANDIDATES, DEFAULT_REMOTE, TOKEN_KEYS, GitProvider
from stud.exceptions import ConfigurationError, RepositoryError
from stud.git.inspector import RepositoryInspector
from stud.logging import get_logger

logger = get_logger("resolver")


def strip_remote_prefix(branch: str, remote: str = DEFAULT_REMOTE) -> str:
    """``origin/main`` -> ``main``; bare names are returned unchanged."""
    prefix = f"{remote}/"
    return branch[len(prefix) :] if branch.startswith(prefix) else branch


def require_non_empty(answer: str) -> str:
    """Input validator rejecting blank answers."""
    if not answer.strip():
        raise ConfigurationError("A base branch name is required.")
    return answer.strip()


class ConfigResolver:
    """Interactive resolution of the settings branch workflows depend on."""

    def __init__(
        self,
        store: ConfigStore,
        inspector: RepositoryInspector,
        io: ConsoleIO,
        global_config: dict[str, Any] | None = None,
        remote: str = DEFAULT_REMOTE,
    ) -> None:
        """Initialize the resolver.

        Args:
            store: Per-clone config store
            inspector: Used for remote existence checks and URL detection
            io: Console collaborator for prompts and warnings
            global_config: User-wide config mapping (loaded lazily if None)
            remote: Remote the base branch lives on
        """
        self.store = store
        self.inspector = inspector
        self.io = io
        self.remote = remote
        self._global_config = global_config

    @property
    def global_config(self) -> dict[str, Any]:
        if self._global_config is None:
            self._global_config = load_global_config()
        return self._global_config

    # ------------------------------------------------------------------
    # Base branch
    # ------------------------------------------------------------------

    def ensure_base_branch_configured(self) -> str:
        """Return the base branch as ``<remote>/<name>``, prompting if needed.

        Raises:
            ConfigurationError: If the answer is empty
            RepositoryError: If the answered branch does not exist on the remote
        """
        stored = self.store.load().base_branch
        if stored:
            name = strip_remote_prefix(stored, self.remote)
            if self.inspector.remote_branch_exists(self.remote, name):
                return f"{self.remote}/{name}"
            self.io.warning(f"Configured base branch '{stored}' was not found on {self.remote}.")

        candidate = self.detect_base_branch()
        answer = self.io.ask(
            "Which branch should be used as the base branch?",
            default=candidate,
            validator=require_non_empty,
        )

        name = strip_remote_prefix(answer, self.remote)
        if not self.inspector.remote_branch_exists(self.remote, name):
            raise RepositoryError(
                f"Base branch '{name}' does not exist on {self.remote}.",
                details={"remote": self.remote, "branch": name},
            )

        self.store.update(baseBranch=name)
        logger.info(f"Base branch set to {self.remote}/{name}")
        return f"{self.remote}/{name}"

    def detect_base_branch(self) -> str | None:
        """First of the usual integration branches present on the remote."""
        for candidate in BASE_BRANCH_CANDIDATES:
            if self.inspector.remote_branch_exists(self.remote, candidate):
                return candidate
        return None

    # ------------------------------------------------------------------
    # Provider
    # ------------------------------------------------------------------

    def ensure_git_provider_configured(self) -> GitProvider:
        """Return the configured provider, prompting if needed.

        Raises:
            ConfigurationError: If the answer is not a known provider
        """
        stored = self.store.load().git_provider
        if stored is not None:
            return stored

        detected = self.inspector.detect_provider(self.remote)
        answer = self.io.choice(
            "Which git provider hosts this repository?",
            [p.value for p in GitProvider],
            default=detected.value if detected else None,
        )

        try:
            provider = GitProvider(answer.strip().lower())
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown git provider: {answer}",
                details={"allowed": [p.value for p in GitProvider]},
            ) from e

        self.store.update(gitProvider=provider.value)
        logger.info(f"Git provider set to {provider}")
        return provider

    # ------------------------------------------------------------------
    # Token
    # ------------------------------------------------------------------

    def ensure_git_token_configured(self, provider: GitProvider | None = None) -> str | None:
        """Return a token for the active provider, or None if the user declines.

        Lookup order: project config, global config, prompt. A token stored
        for the other provider only produces a warning.
        """
        provider = provider or self.ensure_git_provider_configured()
        config = self.store.load()

        token = config.token_for(provider)
        if token:
            return token

        token = global_token(self.global_config, provider)
        if token:
            return token

        other = GitProvider.GITLAB if provider == GitProvider.GITHUB else GitProvider.GITHUB
        if config.token_for(other) or global_token(self.global_config, other):
            self.io.warning(
                f"A {other} token is configured but this repository uses {provider}. "
                f"A {provider} token is needed."
            )

        token = self.io.ask_hidden(f"Enter your {provider} token (leave empty to skip)")
        if not token:
            self.io.note(f"No {provider} token configured.")
            return None

        self.store.update(**{TOKEN_KEYS[provider]: token})
        logger.info(f"Stored {provider} token in project config")
        return token
