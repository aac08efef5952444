"""Remote URL decoding.

Two URL shapes are understood::

    git@<host>:<owner>/.../<name>(.git)
    https://<host>/<owner>/.../<name>(.git)

The owner may span several ``/`` segments (GitLab subgroups); the last
segment is always the repository name.
"""

import re

from stud.constants import GitProvider
from stud.git.types import RepositoryRemoteInfo

GITHUB_HOST = "github.com"

SSH_URL = re.compile(r"^(?:ssh://)?[\w.-]+@(?P<host>[^:/]+)(?::\d+)?[:/](?P<path>.+?)(?:\.git)?/?$")
HTTPS_URL = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+?)(?:\.git)?/?$")

UNKNOWN_REMOTE = RepositoryRemoteInfo(owner=None, name=None, provider=None)


def provider_for_host(host: str) -> GitProvider:
    """Classify a host: GitHub only for github.com, GitLab-style otherwise."""
    if host.lower() == GITHUB_HOST:
        return GitProvider.GITHUB
    return GitProvider.GITLAB


def parse_remote_url(url: str | None) -> RepositoryRemoteInfo:
    """Decode owner, name and provider from a remote URL.

    Args:
        url: Remote URL as stored in ``remote.<name>.url``

    Returns:
        RepositoryRemoteInfo; all fields are None for unrecognized shapes
    """
    if not url:
        return UNKNOWN_REMOTE

    url = url.strip()
    match = HTTPS_URL.match(url) or SSH_URL.match(url)
    if not match:
        return UNKNOWN_REMOTE

    owner, sep, name = match.group("path").rpartition("/")
    if not sep or not owner or not name:
        return UNKNOWN_REMOTE

    return RepositoryRemoteInfo(
        owner=owner,
        name=name,
        provider=provider_for_host(match.group("host")),
    )


def detect_provider(url: str | None) -> GitProvider | None:
    """Provider to propose in configuration for a remote URL.

    Unlike the URL heuristic alone, anything that does not decode to an
    owner/name pair (``file://`` remotes, local paths) yields None.
    """
    info = parse_remote_url(url)
    if info.owner is None:
        return None
    return info.provider
