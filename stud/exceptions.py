"""stud exception hierarchy."""

from typing import Any


class StudError(Exception):
    """Base exception for all stud errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(StudError):
    """A configuration value was rejected or could not be resolved."""

    pass


class RepositoryError(StudError):
    """The repository is not in a state the requested operation needs."""

    pass


class GitError(StudError):
    """A strict git invocation exited non-zero."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        technical_details: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code
        self.technical_details = technical_details
