"""Artifactory collaborators: repository listing, search and delete."""

from .artifactory import (
    ArtifactoryClient,
    ArtifactoryConfig,
    RepositoryCatalog,
    build_search_query,
    load_config,
)

__all__ = [
    "ArtifactoryClient",
    "ArtifactoryConfig",
    "RepositoryCatalog",
    "build_search_query",
    "load_config",
]
