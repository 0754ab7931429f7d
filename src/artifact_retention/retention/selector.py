"""
Retention selection.

Groups artifacts by component key, orders every group newest first and
returns everything past the first ``retain_count`` items of each group.
"""

import logging

from artifact_retention.core.models import ArtifactRecord
from artifact_retention.retention.components import derive_component_key
from artifact_retention.retention.versions import extract_version, version_sort_key

logger = logging.getLogger(__name__)


def group_by_component(items: list[ArtifactRecord]) -> dict[str, list[ArtifactRecord]]:
    """
    Partition artifacts by component key.

    Groups and the members of each group keep input order.
    """
    groups: dict[str, list[ArtifactRecord]] = {}
    for item in items:
        groups.setdefault(derive_component_key(item), []).append(item)
    return groups


def order_group(
    group: list[ArtifactRecord],
    sort_by_version: bool,
) -> list[ArtifactRecord]:
    """
    Order one group newest first.

    Both orderings are stable, so items that compare equal keep their
    input order.

    Args:
        group: Artifacts sharing a component key
        sort_by_version: Compare extracted versions instead of modification time

    Returns:
        New list, newest first
    """
    if sort_by_version:
        return sorted(
            group,
            key=lambda item: version_sort_key(extract_version(item) or ""),
        )
    # Lexicographic ISO-8601 order is chronological; missing sorts oldest.
    return sorted(group, key=lambda item: item.modified_timestamp or "", reverse=True)


def select_for_deletion(
    items: list[ArtifactRecord],
    retain_count: int,
    sort_by_version: bool = False,
) -> list[ArtifactRecord]:
    """
    Compute the deletion set for a flat artifact list.

    Args:
        items: Candidate artifacts
        retain_count: Versions kept per component
        sort_by_version: Order groups by version instead of modification time

    Returns:
        Artifacts to delete, group by group in group iteration order

    Raises:
        ValueError: If retain_count is negative
    """
    if retain_count < 0:
        raise ValueError(f"retain_count must be >= 0, got {retain_count}")

    to_delete: list[ArtifactRecord] = []
    for key, group in group_by_component(items).items():
        excess = order_group(group, sort_by_version)[retain_count:]
        if excess:
            logger.debug(f"Component {key}: {len(group)} version(s), {len(excess)} to delete")
        to_delete.extend(excess)
    return to_delete
