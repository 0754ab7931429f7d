"""
Artifact Retention Exception Hierarchy.

Defines the custom exceptions raised by the retention engine and its
collaborators. Every error carries a human-readable message and optional
structured details for logging.
"""

from typing import Any


class RetentionError(Exception):
    """
    Base exception for all artifact retention errors.

    All custom exceptions inherit from this class, allowing the runner
    to convert any of them into a FAILURE result.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a RetentionError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RetentionError):
    """
    Errors in run configuration.

    Raised when:
    - No repositories are configured in the payload or properties
    - The version pattern is not a valid regular expression
    - A numeric setting is out of range
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            config_key: Configuration key if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, details=details)
        self.config_key = config_key


class CollaboratorError(RetentionError):
    """
    Errors from an external collaborator.

    Raised when the repository listing, the artifact search or a delete
    call against the artifact server fails.
    """

    def __init__(
        self,
        message: str,
        *,
        collaborator: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a CollaboratorError.

        Args:
            message: Human-readable error message
            collaborator: Which collaborator failed (listing, search, delete)
            status_code: HTTP status code if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if collaborator:
            details["collaborator"] = collaborator
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message, details=details)
        self.collaborator = collaborator
        self.status_code = status_code


class DeleteError(CollaboratorError):
    """Raised when a single artifact cannot be deleted."""

    def __init__(
        self,
        message: str,
        *,
        repository: str | None = None,
        path: str | None = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {}) or {}
        if repository:
            details["repository"] = repository
        if path:
            details["path"] = path
        kwargs["details"] = details

        super().__init__(message, collaborator="delete", **kwargs)
        self.repository = repository
        self.path = path


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, RetentionError):
        return error.message
    return f"{error.__class__.__name__}: {error}"
