"""Tests for CLI module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from artifact_retention.cli import app
from conftest import FakeCatalog, make_record

runner = CliRunner()


class ContextCatalog(FakeCatalog):
    """FakeCatalog usable as a context manager, like ArtifactoryClient."""

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return None


@pytest.fixture
def cli_catalog(monkeypatch: pytest.MonkeyPatch):
    """Patch the CLI client with an in-memory catalog."""
    for suffix in ("REPOS", "DRY_RUN", "RETAIN_COUNT", "VERSION_PATTERN"):
        monkeypatch.delenv(f"RETENTION_{suffix}", raising=False)

    catalog = ContextCatalog(
        repositories=["libs-local"],
        artifacts=[
            make_record(f"app/{v}", "app.jar", repo="libs-local", modified=f"2024-01-0{v}T00:00:00Z")
            for v in (1, 2, 3, 4)
        ],
    )
    with patch("artifact_retention.cli.ArtifactoryClient", return_value=catalog):
        yield catalog


class TestVersionCommand:
    """Tests for the version command."""

    def test_version(self) -> None:
        """Show version information."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Artifact Retention" in result.stdout
        assert "0.1" in result.stdout


class TestPresetsCommand:
    """Tests for the presets command."""

    def test_presets_listed(self) -> None:
        """Presets table names every preset."""
        result = runner.invoke(app, ["presets"])
        assert result.exit_code == 0
        assert "Version Patterns" in result.stdout
        assert "ci-build-1" in result.stdout
        assert "ci-build-2" in result.stdout


class TestRunCommand:
    """Tests for the run command."""

    def test_dry_run_by_default(self, cli_catalog: ContextCatalog) -> None:
        """Without --no-dry-run nothing is deleted."""
        result = runner.invoke(app, ["run", "--repo", "libs-local", "--retain-count", "2"])
        assert result.exit_code == 0
        assert "SUCCESS" in result.stdout
        assert "2 artifact(s) processed" in result.stdout
        assert cli_catalog.deleted == []

    def test_no_dry_run_deletes(self, cli_catalog: ContextCatalog) -> None:
        """--no-dry-run performs the deletes."""
        result = runner.invoke(
            app, ["run", "-r", "libs-local", "-k", "3", "--no-dry-run"]
        )
        assert result.exit_code == 0
        assert cli_catalog.deleted == ["libs-local/app/1/app.jar"]

    def test_missing_repos_exits_nonzero(self, cli_catalog: ContextCatalog) -> None:
        """FAILURE results exit with code 1."""
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "FAILURE" in result.stdout

    def test_payload_file(self, cli_catalog: ContextCatalog, temp_dir: Path) -> None:
        """Payload files supply run input."""
        payload_file = temp_dir / "payload.json"
        payload_file.write_text(
            json.dumps({"repos": ["libs-*"], "retainCount": 1, "sortByVersion": True})
        )
        result = runner.invoke(app, ["run", "--payload", str(payload_file)])
        assert result.exit_code == 0
        assert "3 artifact(s) processed" in result.stdout
        assert cli_catalog.listing_calls == 1

    def test_unreadable_payload_file(self, cli_catalog: ContextCatalog, temp_dir: Path) -> None:
        """A payload file that is not JSON is rejected."""
        payload_file = temp_dir / "payload.json"
        payload_file.write_text("{not json")
        result = runner.invoke(app, ["run", "--payload", str(payload_file)])
        assert result.exit_code == 1
        assert "Cannot read payload file" in result.stdout

    def test_client_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing ARTIFACTORY_URL stops the command."""
        monkeypatch.delenv("ARTIFACTORY_URL", raising=False)
        result = runner.invoke(app, ["run", "--repo", "libs-local"])
        assert result.exit_code == 1
        assert "ARTIFACTORY_URL" in result.stdout


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_lists_artifacts(self, cli_catalog: ContextCatalog) -> None:
        """plan shows the deletion set and deletes nothing."""
        result = runner.invoke(app, ["plan", "--repo", "libs-local", "--retain-count", "2"])
        assert result.exit_code == 0
        assert "Artifacts to delete (2)" in result.stdout
        assert "Matching artifacts: 4" in result.stdout
        assert cli_catalog.deleted == []

    def test_plan_configuration_error(self, cli_catalog: ContextCatalog) -> None:
        """plan reports configuration errors."""
        result = runner.invoke(app, ["plan", "--repo", "libs-local", "-p", "(["])
        assert result.exit_code == 1
        assert "Invalid versionPattern" in result.stdout
