"""
Core data models for artifact retention.

Artifact records arrive from the search collaborator and are never
mutated; results are plain values returned to the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtifactKind(Enum):
    """Kinds of catalogued items."""

    FILE = "file"
    FOLDER = "folder"


class RunStatus(Enum):
    """Overall outcome of a cleanup run."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class ArtifactRecord(BaseModel):
    """Immutable descriptor of one catalogued file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repository: str = Field(alias="repo", min_length=1, description="Repository key")
    name: str = Field(description="File name")
    path: str = Field(default=".", description="Folder path, '.' for repository root")
    kind: ArtifactKind = Field(
        default=ArtifactKind.FILE, alias="type", description="File or folder"
    )
    size: int = Field(default=0, ge=0, description="Size in bytes")
    modified_timestamp: str | None = Field(
        default=None, alias="modified", description="ISO timestamp of last modification"
    )

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v):
        """Convert string to ArtifactKind enum."""
        if isinstance(v, str):
            try:
                return ArtifactKind(v)
            except ValueError:
                return ArtifactKind.FILE
        return v

    @property
    def full_path(self) -> str:
        """Path of the artifact inside its repository."""
        if self.path == ".":
            return self.name
        return f"{self.path}/{self.name}"

    @property
    def item_path(self) -> str:
        """Full path, with a trailing slash for folders."""
        if self.kind == ArtifactKind.FOLDER:
            return f"{self.full_path}/"
        return self.full_path

    @property
    def location(self) -> str:
        """Repository-qualified path, as used in delete URLs and log lines."""
        return f"{self.repository}/{self.item_path}"

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.repository, self.path, self.name)

    def __hash__(self) -> int:
        return hash(self.identity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArtifactRecord):
            return NotImplemented
        return self.identity == other.identity


@dataclass(frozen=True)
class ItemOutcome:
    """Settlement of one action run by the batch executor."""

    item: Any
    success: bool
    error: str | None = None


class CleanupResult(BaseModel):
    """Summary returned by a cleanup run."""

    status: RunStatus = Field(description="Overall run status")
    message: str = Field(description="Human-readable summary or error text")
    deleted_count: int = Field(default=0, description="Artifacts selected and processed")
    dry_run: bool = Field(default=True, description="Effective dry-run flag")
    failed_count: int = Field(default=0, description="Actions that did not settle successfully")
    repositories: list[str] = Field(
        default_factory=list, description="Repositories the run operated on"
    )

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase result shape reported to callers."""
        return {
            "status": self.status.value,
            "message": self.message,
            "deletedCount": self.deleted_count,
            "dryRun": self.dry_run,
            "failedCount": self.failed_count,
        }

    @classmethod
    def failure(cls, message: str, *, dry_run: bool = True) -> "CleanupResult":
        """Build a FAILURE result carrying only the error message."""
        return cls(status=RunStatus.FAILURE, message=message, dry_run=dry_run)
