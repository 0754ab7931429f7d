"""
Artifact Retention - version-aware cleanup for artifact repositories.

Keeps the N most recent versions of every component in a set of
repositories and deletes the rest, with dry-run as the default.
"""

__version__ = "0.1.0"

# Import the runner explicitly: from artifact_retention.cleanup import run_cleanup

__all__ = []
