"""
Artifact Retention CLI - command-line interface.

Plan and run version cleanups against an Artifactory instance.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from artifact_retention.cleanup.runner import plan_cleanup, run_cleanup
from artifact_retention.client.artifactory import ArtifactoryClient
from artifact_retention.config import CleanupPayload, properties_from_env
from artifact_retention.core.exceptions import RetentionError
from artifact_retention.core.models import RunStatus
from artifact_retention.retention.patterns import AUTO_PATTERN, PRESET_PATTERNS
from artifact_retention.retention.versions import extract_version

app = typer.Typer(
    name="artifact-retention",
    help="Artifact Retention - keep the newest versions of every component",
    no_args_is_help=True,
)
console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )


def _build_payload(
    payload_file: Optional[Path],
    repos: Optional[list[str]],
    version_pattern: Optional[str],
    sort_by_version: bool,
    path_prefix: Optional[str],
    retain_count: Optional[int],
    dry_run: bool,
    limit: Optional[int],
    concurrency: Optional[int],
) -> CleanupPayload:
    """Load the payload file, if any, and overlay the given options."""
    data = {}
    if payload_file:
        try:
            data = json.loads(payload_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[red]Cannot read payload file {payload_file}: {e}[/red]")
            raise typer.Exit(1)

    payload = CleanupPayload.model_validate(data)
    # Flags only override the payload when they are set.
    overrides = {
        "repos": repos or None,
        "version_pattern": version_pattern,
        "sort_by_version": True if sort_by_version else None,
        "path_prefix": path_prefix,
        "retain_count": retain_count,
        "dry_run": None if dry_run else False,
        "limit": limit,
        "concurrency": concurrency,
    }
    return payload.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def _open_client() -> ArtifactoryClient:
    try:
        return ArtifactoryClient()
    except RetentionError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


RepoOption = typer.Option(None, "--repo", "-r", help="Repository name or wildcard pattern")
PatternOption = typer.Option(
    None, "--version-pattern", "-p", help="'auto', a preset name, or a regex"
)
SortOption = typer.Option(
    False, "--sort-by-version", help="Order versions by number instead of modification time"
)
PrefixOption = typer.Option(None, "--path-prefix", help="Only consider paths under this prefix")
RetainOption = typer.Option(None, "--retain-count", "-k", help="Versions kept per component")
LimitOption = typer.Option(None, "--limit", help="Maximum artifacts fetched")
PayloadOption = typer.Option(None, "--payload", help="JSON payload file")
LogLevelOption = typer.Option("INFO", "--log-level", help="Logging level")


@app.command()
def run(
    repos: Optional[list[str]] = RepoOption,
    version_pattern: Optional[str] = PatternOption,
    sort_by_version: bool = SortOption,
    path_prefix: Optional[str] = PrefixOption,
    retain_count: Optional[int] = RetainOption,
    dry_run: bool = typer.Option(
        True, "--dry-run/--no-dry-run", help="Only log what would be deleted"
    ),
    limit: Optional[int] = LimitOption,
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", help="Maximum parallel delete calls"
    ),
    payload_file: Optional[Path] = PayloadOption,
    log_level: str = LogLevelOption,
):
    """Run a cleanup. Dry-run unless --no-dry-run is given."""
    configure_logging(log_level)
    payload = _build_payload(
        payload_file, repos, version_pattern, sort_by_version,
        path_prefix, retain_count, dry_run, limit, concurrency,
    )

    with _open_client() as client:
        result = run_cleanup(payload, client, properties_from_env())

    style = "green" if result.status == RunStatus.SUCCESS else "red"
    console.print(
        Panel.fit(
            f"[bold {style}]{result.status.value}[/bold {style}]\n"
            f"{result.message}\n"
            f"Deleted: {result.deleted_count}  Failed: {result.failed_count}\n"
            f"Dry run: {result.dry_run}",
            title="Artifact Retention",
        )
    )

    if result.status != RunStatus.SUCCESS:
        raise typer.Exit(1)


@app.command()
def plan(
    repos: Optional[list[str]] = RepoOption,
    version_pattern: Optional[str] = PatternOption,
    sort_by_version: bool = SortOption,
    path_prefix: Optional[str] = PrefixOption,
    retain_count: Optional[int] = RetainOption,
    limit: Optional[int] = LimitOption,
    payload_file: Optional[Path] = PayloadOption,
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    """Show which artifacts a run would delete, without deleting anything."""
    configure_logging(log_level)
    payload = _build_payload(
        payload_file, repos, version_pattern, sort_by_version,
        path_prefix, retain_count, True, limit, None,
    )

    with _open_client() as client:
        try:
            cleanup_plan = plan_cleanup(payload, client, properties_from_env())
        except RetentionError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

    table = Table(title=f"Artifacts to delete ({len(cleanup_plan.to_delete)})")
    table.add_column("Repository", style="cyan")
    table.add_column("Path")
    table.add_column("Version", style="magenta")
    table.add_column("Modified", style="dim")

    for item in cleanup_plan.to_delete:
        table.add_row(
            item.repository,
            item.item_path,
            extract_version(item) or "",
            item.modified_timestamp or "",
        )

    console.print(table)
    console.print(
        f"\nRepositories: {', '.join(cleanup_plan.repositories) or 'none'}"
        f"\nMatching artifacts: {len(cleanup_plan.matching)}"
    )


@app.command()
def presets():
    """List named version patterns."""
    table = Table(title="Version Patterns")
    table.add_column("Name", style="cyan")
    table.add_column("Regex", style="green")

    table.add_row(AUTO_PATTERN, "(any extracted version)")
    for name, regex in PRESET_PATTERNS.items():
        table.add_row(name, regex)

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from artifact_retention import __version__

    console.print(f"Artifact Retention v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
