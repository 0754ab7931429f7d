"""Pytest configuration and fixtures."""

import tempfile
import threading
from pathlib import Path
from typing import Callable, Generator

import pytest

from artifact_retention.core.exceptions import CollaboratorError, DeleteError
from artifact_retention.core.models import ArtifactRecord


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_record(
    path: str,
    name: str,
    repo: str = "libs-release-local",
    modified: str | None = None,
    kind: str = "file",
    size: int = 100,
) -> ArtifactRecord:
    """Build an ArtifactRecord the way search results describe one."""
    return ArtifactRecord(
        repo=repo, name=name, path=path, type=kind, size=size, modified=modified
    )


@pytest.fixture
def record_factory() -> Callable[..., ArtifactRecord]:
    """Provide the make_record helper as a fixture."""
    return make_record


class FakeCatalog:
    """In-memory repository catalog recording every call."""

    def __init__(
        self,
        repositories: list[str] | None = None,
        artifacts: list[ArtifactRecord] | None = None,
        fail_listing: bool = False,
        fail_search: bool = False,
        fail_deletes: set[str] | None = None,
    ):
        self.repositories = repositories or []
        self.artifacts = artifacts or []
        self.fail_listing = fail_listing
        self.fail_search = fail_search
        self.fail_deletes = fail_deletes or set()
        self.listing_calls = 0
        self.queries: list[str] = []
        self.deleted: list[str] = []
        self._lock = threading.Lock()

    def list_repositories(self) -> list[str]:
        self.listing_calls += 1
        if self.fail_listing:
            raise CollaboratorError("HTTP 500", collaborator="repository_listing", status_code=500)
        return list(self.repositories)

    def search(self, query: str) -> list[ArtifactRecord]:
        self.queries.append(query)
        if self.fail_search:
            raise CollaboratorError("HTTP 400", collaborator="search", status_code=400)
        return list(self.artifacts)

    def delete(self, record: ArtifactRecord) -> None:
        if record.location in self.fail_deletes:
            raise DeleteError(
                f"Failed to delete {record.location}",
                repository=record.repository,
                path=record.item_path,
                status_code=403,
            )
        with self._lock:
            self.deleted.append(record.location)


@pytest.fixture
def versioned_artifacts() -> list[ArtifactRecord]:
    """Five versions of one component, newest first by modification time."""
    return [
        make_record(f"app/{v}", f"app-{v}.jar", modified=f"2024-01-0{v}T00:00:00.000Z")
        for v in (5, 4, 3, 2, 1)
    ]


@pytest.fixture
def fake_catalog(versioned_artifacts: list[ArtifactRecord]) -> FakeCatalog:
    """Provide a catalog with one repository holding five versions."""
    return FakeCatalog(
        repositories=["libs-release-local", "libs-snapshot-local", "docker-local"],
        artifacts=versioned_artifacts,
    )
