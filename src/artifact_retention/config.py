"""
Run configuration.

A run is configured from two sources: an explicit payload and a flat
string-valued property mapping. The payload wins whenever it names at
least one repository.

Environment variables (property source):
- RETENTION_REPOS: comma separated names/patterns, or a JSON list
- RETENTION_VERSION_PATTERN: "auto", a preset name, or a regex
- RETENTION_SORT_BY_VERSION: "true" to order by version
- RETENTION_PATH_PREFIX: restrict the search to this path prefix
- RETENTION_RETAIN_COUNT: versions kept per component
- RETENTION_DRY_RUN: "false" to actually delete
- RETENTION_LIMIT: maximum artifacts fetched
- RETENTION_CONCURRENCY: maximum parallel delete calls
"""

import json
import logging
import os
import re
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from artifact_retention.core.exceptions import ConfigurationError
from artifact_retention.retention.patterns import AUTO_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 200
DEFAULT_RETAIN_COUNT = 3
DEFAULT_CONCURRENCY = 10

ENV_PREFIX = "RETENTION_"

_LEADING_INT = re.compile(r"\s*[+-]?\d+")

# Property key -> environment variable suffix
PROPERTY_KEYS = {
    "repos": "REPOS",
    "versionPattern": "VERSION_PATTERN",
    "sortByVersion": "SORT_BY_VERSION",
    "pathPrefix": "PATH_PREFIX",
    "retainCount": "RETAIN_COUNT",
    "dryRun": "DRY_RUN",
    "limit": "LIMIT",
    "concurrency": "CONCURRENCY",
}


class CleanupPayload(BaseModel):
    """Raw run input, as received from a caller or parsed from properties."""

    model_config = ConfigDict(populate_by_name=True)

    repos: list[str] = Field(default_factory=list, description="Repository names or patterns")
    version_pattern: str | None = Field(default=None, alias="versionPattern")
    sort_by_version: bool | None = Field(default=None, alias="sortByVersion")
    path_prefix: str | None = Field(default=None, alias="pathPrefix")
    retain_count: int | None = Field(default=None, alias="retainCount")
    dry_run: bool | None = Field(default=None, alias="dryRun")
    limit: int | None = Field(default=None)
    concurrency: int | None = Field(default=None)


class CleanupSettings(BaseModel):
    """Effective settings for one run, with defaults applied."""

    model_config = ConfigDict(frozen=True)

    repos: list[str]
    version_pattern: str = AUTO_PATTERN
    sort_by_version: bool = False
    path_prefix: str = ""
    retain_count: int = Field(default=DEFAULT_RETAIN_COUNT)
    dry_run: bool = True
    limit: int = Field(default=DEFAULT_LIMIT)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY)

    @classmethod
    def from_payload(cls, payload: CleanupPayload) -> "CleanupSettings":
        """
        Validate a payload and apply defaults.

        Raises:
            ConfigurationError: If no repository is configured or a
                numeric setting is out of range
        """
        check_input(payload)

        settings = cls(
            repos=list(payload.repos),
            version_pattern=payload.version_pattern or AUTO_PATTERN,
            sort_by_version=bool(payload.sort_by_version),
            path_prefix=payload.path_prefix or "",
            retain_count=(
                DEFAULT_RETAIN_COUNT if payload.retain_count is None else payload.retain_count
            ),
            dry_run=payload.dry_run is not False,
            limit=DEFAULT_LIMIT if payload.limit is None else payload.limit,
            concurrency=(
                DEFAULT_CONCURRENCY if payload.concurrency is None else payload.concurrency
            ),
        )

        if settings.retain_count < 0:
            raise ConfigurationError(
                f"retainCount must be >= 0, got {settings.retain_count}",
                config_key="retainCount",
            )
        if settings.limit < 1:
            raise ConfigurationError(
                f"limit must be >= 1, got {settings.limit}", config_key="limit"
            )
        if settings.concurrency < 1:
            raise ConfigurationError(
                f"concurrency must be >= 1, got {settings.concurrency}",
                config_key="concurrency",
            )
        return settings


def check_input(payload: CleanupPayload | None) -> None:
    """Raise ConfigurationError unless the payload names a repository."""
    if payload is None:
        raise ConfigurationError("No payload or properties configured.")
    if not payload.repos:
        raise ConfigurationError(
            "repos must be specified via payload or properties (repos key).",
            config_key="repos",
        )


def get_property(properties: Mapping[str, str] | None, key: str) -> str:
    """Read one property, returning an empty string when unset."""
    if not properties:
        return ""
    return properties.get(key) or ""


def _parse_repos(value: str) -> list[str]:
    if not value:
        return []
    if "[" in value:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"repos property is not valid JSON: {e}", config_key="repos"
            ) from e
        if not isinstance(parsed, list):
            raise ConfigurationError("repos property must be a JSON list", config_key="repos")
        return [str(r) for r in parsed]
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_int(value: str) -> int | None:
    # Leading integer only ("12abc" -> 12, "3.5" -> 3); none or zero -> default.
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(0)) or None


def load_payload_from_properties(properties: Mapping[str, str] | None) -> CleanupPayload:
    """
    Build a payload from a string property mapping.

    Args:
        properties: Mapping keyed by the camelCase payload field names

    Returns:
        CleanupPayload; unset properties stay None so defaults apply
    """
    return CleanupPayload(
        repos=_parse_repos(get_property(properties, "repos")),
        version_pattern=get_property(properties, "versionPattern") or None,
        sort_by_version=get_property(properties, "sortByVersion") == "true",
        path_prefix=get_property(properties, "pathPrefix") or None,
        retain_count=_parse_int(get_property(properties, "retainCount")),
        dry_run=get_property(properties, "dryRun") != "false",
        limit=_parse_int(get_property(properties, "limit")),
        concurrency=_parse_int(get_property(properties, "concurrency")),
    )


def properties_from_env(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Collect run properties from environment variables."""
    env = os.environ if environ is None else environ
    properties = {}
    for key, suffix in PROPERTY_KEYS.items():
        value = env.get(f"{prefix}{suffix}")
        if value:
            properties[key] = value
    return properties


def merge_payload(
    payload: CleanupPayload | Mapping | None,
    properties: Mapping[str, str] | None = None,
) -> CleanupPayload:
    """
    Pick the payload that drives a run.

    The explicit payload is used when it names at least one repository;
    otherwise the payload is read from properties.
    """
    if payload is not None and not isinstance(payload, CleanupPayload):
        payload = CleanupPayload.model_validate(payload)
    if payload is not None and payload.repos:
        return payload
    logger.debug("Payload has no repos, reading properties")
    return load_payload_from_properties(properties)
