"""stud constants and enumerations."""

import re
from enum import StrEnum


class GitProvider(StrEnum):
    """Pull-request platforms stud knows how to talk to."""

    GITHUB = "github"
    GITLAB = "gitlab"


DEFAULT_REMOTE = "origin"

# Remote branches probed, in order, when no base branch is configured
BASE_BRANCH_CANDIDATES: tuple[str, ...] = ("develop", "main", "master")

# Branch naming conventions created by `stud start` style workflows
BRANCH_PREFIXES: tuple[str, ...] = ("feat", "fix", "chore")

PROTECTED_BRANCHES: frozenset[str] = frozenset({"develop", "main", "master"})

PROJECT_CONFIG_FILE = "stud.config"
GLOBAL_CONFIG_DIR = ".config/stud"
GLOBAL_CONFIG_FILE = "config.yml"
GLOBAL_CONFIG_ENV = "STUD_CONFIG_HOME"

# Config keys holding the token for each provider
TOKEN_KEYS: dict[GitProvider, str] = {
    GitProvider.GITHUB: "githubToken",
    GitProvider.GITLAB: "gitlabToken",
}
GLOBAL_TOKEN_KEYS: dict[GitProvider, str] = {
    GitProvider.GITHUB: "GITHUB_TOKEN",
    GitProvider.GITLAB: "GITLAB_TOKEN",
}

NO_ERROR_OUTPUT = "No error output"

FIXUP_SUBJECT = re.compile(r"^(fixup|squash)!")
ISSUE_KEY_IN_BRANCH = re.compile(r"([a-z]+-\d+)", re.IGNORECASE)
ISSUE_KEY = re.compile(r"^([A-Z]+)-\d+$")
