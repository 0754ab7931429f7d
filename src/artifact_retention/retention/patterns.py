"""
Version pattern filter.

A run's ``versionPattern`` is either ``"auto"``, the name of a preset, or
a raw regular expression. It is resolved once into a VersionPattern and
then applied to every extracted version token.
"""

import re
from dataclasses import dataclass
from enum import Enum

from artifact_retention.core.exceptions import ConfigurationError
from artifact_retention.core.models import ArtifactRecord
from artifact_retention.retention.versions import extract_version

AUTO_PATTERN = "auto"

PRESET_PATTERNS: dict[str, str] = {
    "ci-build-1": r"^\d+\.\d+\.\d+-\d+\.\d+$",
    "ci-build-2": r"^\d+\.\d+\.\d+-\d+\.\d+\.$",
}


class PatternKind(Enum):
    """How a version pattern was specified."""

    AUTO = "auto"
    PRESET = "preset"
    RAW = "raw"


@dataclass(frozen=True)
class VersionPattern:
    """Resolved version acceptance rule."""

    kind: PatternKind
    source: str
    regex: re.Pattern | None = None

    @classmethod
    def parse(cls, value: str | None) -> "VersionPattern":
        """
        Resolve a pattern setting.

        Args:
            value: ``"auto"``, a preset name, a raw regex, or None for auto

        Returns:
            VersionPattern of the matching kind

        Raises:
            ConfigurationError: If a raw pattern does not compile
        """
        if not value or value == AUTO_PATTERN:
            return cls(kind=PatternKind.AUTO, source=AUTO_PATTERN)

        if value in PRESET_PATTERNS:
            return cls(
                kind=PatternKind.PRESET,
                source=value,
                regex=re.compile(PRESET_PATTERNS[value]),
            )

        try:
            regex = re.compile(value)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid versionPattern {value!r}: {e}",
                config_key="versionPattern",
            ) from e
        return cls(kind=PatternKind.RAW, source=value, regex=regex)

    def accepts(self, version: str | None) -> bool:
        """Return True if an extracted version passes this pattern."""
        if not version:
            return False
        if self.kind == PatternKind.AUTO or self.regex is None:
            return True
        return self.regex.search(version) is not None

    def filter(self, items: list[ArtifactRecord]) -> list[ArtifactRecord]:
        """Keep artifacts whose extracted version is accepted, in input order."""
        return [item for item in items if self.accepts(extract_version(item))]
