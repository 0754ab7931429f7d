"""
Cleanup run orchestration.

One run is a pure function of its payload, its properties and the
injected repository catalog:

    payload -> repository resolution -> search -> version filter
            -> retention selection -> batched delete -> CleanupResult

Every error is converted into a FAILURE result; nothing escapes to the
caller.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from artifact_retention.client.artifactory import RepositoryCatalog, build_search_query
from artifact_retention.config import CleanupPayload, CleanupSettings, merge_payload
from artifact_retention.core.exceptions import RetentionError, format_exception
from artifact_retention.core.models import ArtifactRecord, CleanupResult, RunStatus
from artifact_retention.executor.batch import run_batches
from artifact_retention.repositories.resolver import resolve_repositories
from artifact_retention.retention.patterns import VersionPattern
from artifact_retention.retention.selector import select_for_deletion

logger = logging.getLogger(__name__)


@dataclass
class CleanupPlan:
    """Everything a run decided before executing any delete."""

    settings: CleanupSettings
    pattern: VersionPattern
    repositories: list[str] = field(default_factory=list)
    candidates: list[ArtifactRecord] = field(default_factory=list)
    matching: list[ArtifactRecord] = field(default_factory=list)
    to_delete: list[ArtifactRecord] = field(default_factory=list)


def find_artifacts(
    catalog: RepositoryCatalog,
    repositories: list[str],
    path_prefix: str,
    limit: int,
) -> list[ArtifactRecord]:
    """
    Search for candidate artifacts.

    A failed search is logged and treated as an empty result, so the run
    reports zero deletions instead of failing.
    """
    query = build_search_query(repositories, path_prefix, limit)
    try:
        return catalog.search(query)
    except Exception as e:
        logger.error(f"AQL query failed: {format_exception(e)}")
        return []


def cleanup_item(catalog: RepositoryCatalog, item: ArtifactRecord, dry_run: bool) -> None:
    """Delete one artifact, or only log it in dry-run mode."""
    if dry_run:
        logger.info(f"[dryRun] Would delete {item.location}")
        return
    logger.info(f"Deleting {item.location}")
    catalog.delete(item)
    logger.info(f"Deleted {item.location}")


def resolve_settings(
    payload: CleanupPayload | Mapping | None,
    properties: Mapping[str, str] | None = None,
) -> CleanupSettings:
    """Merge payload and properties into effective settings."""
    return CleanupSettings.from_payload(merge_payload(payload, properties))


def build_plan(settings: CleanupSettings, catalog: RepositoryCatalog) -> CleanupPlan:
    """
    Compute the deletion set for already resolved settings.

    Raises:
        ConfigurationError: If the version pattern is invalid
        CollaboratorError: If wildcard repositories cannot be resolved
    """
    pattern = VersionPattern.parse(settings.version_pattern)

    repositories = resolve_repositories(settings.repos, catalog.list_repositories)
    plan = CleanupPlan(settings=settings, pattern=pattern, repositories=repositories)
    if not repositories:
        logger.info("No repositories matched the given pattern. Nothing to do.")
        return plan

    logger.info(
        f"Starting version cleanup for repos {', '.join(repositories)}, "
        f"pattern: {pattern.source}, retainCount: {settings.retain_count}, "
        f"dryRun: {settings.dry_run}"
    )

    plan.candidates = find_artifacts(
        catalog, repositories, settings.path_prefix, settings.limit
    )
    plan.matching = pattern.filter(plan.candidates)
    plan.to_delete = select_for_deletion(
        plan.matching, settings.retain_count, settings.sort_by_version
    )
    logger.info(
        f"Found {len(plan.matching)} matching artifacts, {len(plan.to_delete)} to delete"
    )
    return plan


def plan_cleanup(
    payload: CleanupPayload | Mapping | None,
    catalog: RepositoryCatalog,
    properties: Mapping[str, str] | None = None,
) -> CleanupPlan:
    """
    Compute the deletion set without deleting anything.

    Raises:
        ConfigurationError: If the merged payload is invalid
        CollaboratorError: If wildcard repositories cannot be resolved
    """
    return build_plan(resolve_settings(payload, properties), catalog)


def run_cleanup(
    payload: CleanupPayload | Mapping | None,
    catalog: RepositoryCatalog,
    properties: Mapping[str, str] | None = None,
) -> CleanupResult:
    """
    Execute a full cleanup run.

    Args:
        payload: Explicit run input; ignored when it names no repository
        catalog: Repository listing, search and delete collaborator
        properties: Fallback string properties

    Returns:
        CleanupResult with SUCCESS or FAILURE status
    """
    dry_run = True
    try:
        settings = resolve_settings(payload, properties)
        dry_run = settings.dry_run
        plan = build_plan(settings, catalog)

        report = run_batches(
            plan.to_delete,
            plan.settings.concurrency,
            lambda item: cleanup_item(catalog, item, dry_run),
        )

        processed = len(plan.to_delete)
        return CleanupResult(
            status=RunStatus.SUCCESS,
            message=f"{processed} artifact(s) processed",
            deleted_count=processed,
            dry_run=dry_run,
            failed_count=report.failed,
            repositories=plan.repositories,
        )

    except RetentionError as e:
        logger.error(e.message)
        return CleanupResult.failure(e.message, dry_run=dry_run)
    except Exception as e:
        logger.exception("Cleanup run failed")
        return CleanupResult.failure(format_exception(e), dry_run=dry_run)
