"""
Artifact Retention Core Module.

Provides the record types and exception hierarchy shared by every stage
of a cleanup run.
"""

__all__ = [
    "ArtifactKind",
    "ArtifactRecord",
    "CleanupResult",
    "ItemOutcome",
    "RunStatus",
    # Exceptions
    "RetentionError",
    "ConfigurationError",
    "CollaboratorError",
    "DeleteError",
]

from artifact_retention.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    DeleteError,
    RetentionError,
)
from artifact_retention.core.models import (
    ArtifactKind,
    ArtifactRecord,
    CleanupResult,
    ItemOutcome,
    RunStatus,
)
