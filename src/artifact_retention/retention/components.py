"""Component keys: an artifact path with its version segment stripped."""

from artifact_retention.core.models import ArtifactRecord
from artifact_retention.retention.versions import VERSION_REGEX


def derive_component_key(record: ArtifactRecord) -> str:
    """
    Map an artifact to the component it is a version of.

    The split point is the first version match anywhere in the full path.
    Everything before it, minus one trailing dot, identifies the component;
    without a match the full path is used unchanged.

    Args:
        record: Artifact to classify

    Returns:
        Key of the form ``"<repository>:<prefix>"``
    """
    full_path = record.full_path
    match = VERSION_REGEX.search(full_path)
    if match:
        base = full_path[: match.start()]
        if base.endswith("."):
            base = base[:-1]
        return f"{record.repository}:{base}"
    return f"{record.repository}:{full_path}"
