"""
Repository name resolution.

Expands ``*`` wildcards in the configured repository list against the
live list of repositories on the server.
"""

import logging
import re
from collections.abc import Callable

from artifact_retention.core.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

WILDCARD = "*"


def has_wildcard(patterns: list[str]) -> bool:
    """Return True if any pattern contains a wildcard."""
    return any(WILDCARD in pattern for pattern in patterns)


def pattern_to_regex(pattern: str) -> re.Pattern:
    """
    Translate a repository pattern into an anchored regex.

    ``*`` matches any run of characters, including none. Everything else
    is matched literally.
    """
    body = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(f"^{body}$")


def _matches_any(name: str, patterns: list[str], compiled: dict[str, re.Pattern]) -> bool:
    for pattern in patterns:
        if WILDCARD not in pattern:
            if name == pattern:
                return True
        elif compiled[pattern].match(name):
            return True
    return False


def resolve_repositories(
    patterns: list[str],
    list_all_repositories: Callable[[], list[str]],
) -> list[str]:
    """
    Resolve repository patterns into concrete repository names.

    Without any wildcard the patterns are returned unchanged and the
    collaborator is not called. Otherwise the full repository list is
    fetched once and filtered; the result follows the order of that list.

    Args:
        patterns: Literal names or wildcard patterns
        list_all_repositories: Collaborator returning every repository name

    Returns:
        Matching repository names

    Raises:
        CollaboratorError: If the repository list cannot be fetched
    """
    if not has_wildcard(patterns):
        return patterns

    logger.info("Repo wildcards detected, fetching all local repositories...")
    try:
        all_repos = list_all_repositories()
    except Exception as e:
        message = e.message if isinstance(e, CollaboratorError) else str(e)
        raise CollaboratorError(
            f"Failed to fetch repositories: {message}",
            collaborator="repository_listing",
        ) from e

    compiled = {p: pattern_to_regex(p) for p in patterns if WILDCARD in p}
    resolved = [name for name in all_repos if _matches_any(name, patterns, compiled)]
    logger.info(f"Resolved repos: {', '.join(resolved)}")
    return resolved
