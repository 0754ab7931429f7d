"""
Version extraction and ordering.

A version token is the first substring of an artifact path that matches
VERSION_REGEX: dot-separated numeric groups, an optional dash suffix of
more numeric groups, and an optional trailing dot.
"""

import re
from functools import cmp_to_key

from artifact_retention.core.models import ArtifactRecord

VERSION_REGEX = re.compile(r"\d+(\.\d+)*(-\d+(\.\d+)*)?\.?")

_SEPARATORS = re.compile(r"[.-]")


def extract_version(record: ArtifactRecord) -> str | None:
    """
    Pull a version token out of an artifact's full path.

    Path segments are scanned first, then the file name again as a
    final fallback. Only the matched substring is returned, not the
    whole segment.

    Args:
        record: Artifact to inspect

    Returns:
        The first matching token, or None if no segment contains one
    """
    parts = record.full_path.split("/")
    for part in [*parts, record.name]:
        match = VERSION_REGEX.search(part)
        if match:
            return match.group(0)
    return None


def _components(version: str) -> list[int]:
    # Empty components come from a trailing dot or an empty token.
    return [int(part) if part else 0 for part in _SEPARATORS.split(version)]


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version tokens, newest first.

    Returns a negative number when ``a`` ranks before ``b`` (``a`` is the
    higher version), a positive number when ``b`` ranks first, and 0 on
    a tie. The shorter token is padded with zeros.
    """
    parts_a = _components(a)
    parts_b = _components(b)
    for i in range(max(len(parts_a), len(parts_b))):
        pa = parts_a[i] if i < len(parts_a) else 0
        pb = parts_b[i] if i < len(parts_b) else 0
        if pa != pb:
            return pb - pa
    return 0


version_sort_key = cmp_to_key(compare_versions)
