"""Repository name resolution for wildcard patterns."""

from .resolver import has_wildcard, pattern_to_regex, resolve_repositories

__all__ = ["has_wildcard", "pattern_to_regex", "resolve_repositories"]
