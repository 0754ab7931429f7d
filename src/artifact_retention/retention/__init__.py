"""
Artifact Retention computation core.

Version extraction and comparison, component keys, version pattern
filtering and the per-component retention selector.
"""

from .components import derive_component_key
from .patterns import AUTO_PATTERN, PRESET_PATTERNS, PatternKind, VersionPattern
from .selector import group_by_component, order_group, select_for_deletion
from .versions import VERSION_REGEX, compare_versions, extract_version, version_sort_key

__all__ = [
    # Versions
    "VERSION_REGEX",
    "extract_version",
    "compare_versions",
    "version_sort_key",
    # Components
    "derive_component_key",
    # Patterns
    "AUTO_PATTERN",
    "PRESET_PATTERNS",
    "PatternKind",
    "VersionPattern",
    # Selection
    "group_by_component",
    "order_group",
    "select_for_deletion",
]
