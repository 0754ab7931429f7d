"""
Artifactory client - repository listing, AQL search and deletes.

Thin HTTP wrapper around the three server operations a cleanup run needs.
"""

import logging
import os
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from artifact_retention.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    DeleteError,
)
from artifact_retention.core.models import ArtifactRecord

logger = logging.getLogger(__name__)

RETRIABLE_STATUS_CODES = (429, 502, 503, 504)

SEARCH_FIELDS = ("repo", "name", "path", "type", "size", "modified")


class RepositoryCatalog(Protocol):
    """Operations a cleanup run consumes from the artifact server."""

    def list_repositories(self) -> list[str]: ...

    def search(self, query: str) -> list[ArtifactRecord]: ...

    def delete(self, record: ArtifactRecord) -> None: ...


class ArtifactoryConfig(BaseModel):
    """Configuration for the Artifactory client."""

    base_url: str = ""
    access_token: str = ""
    timeout_seconds: int = 60
    verify_ssl: bool = True


def load_config() -> ArtifactoryConfig:
    """
    Load client configuration from environment.

    Environment variables:
    - ARTIFACTORY_URL: Platform base URL, e.g. https://acme.jfrog.io
    - ARTIFACTORY_TOKEN: Access token sent as a bearer token
    - ARTIFACTORY_TIMEOUT: Request timeout in seconds
    - ARTIFACTORY_VERIFY_SSL: "false" to skip certificate verification
    """
    timeout_str = os.getenv("ARTIFACTORY_TIMEOUT", "60")
    try:
        timeout = int(timeout_str)
    except ValueError:
        timeout = 60

    return ArtifactoryConfig(
        base_url=os.getenv("ARTIFACTORY_URL", ""),
        access_token=os.getenv("ARTIFACTORY_TOKEN", ""),
        timeout_seconds=timeout,
        verify_ssl=os.getenv("ARTIFACTORY_VERIFY_SSL", "true").lower() != "false",
    )


def build_search_query(repositories: list[str], path_prefix: str, limit: int) -> str:
    """
    Build the AQL query for candidate artifacts.

    Files only, in any of the given repositories, optionally under a path
    prefix, newest modification first, at most ``limit`` results.
    """
    repos_filter = '"$or":[' + ",".join(f'{{"repo":"{r}"}}' for r in repositories) + "]"
    path_match = f',"path":{{"$match":"{path_prefix}*"}}' if path_prefix else ""
    include = ",".join(f'"{f}"' for f in SEARCH_FIELDS)

    return (
        f'items.find({{{repos_filter},"type":{{"$eq":"file"}}{path_match}}})\n'
        f"    .include({include})\n"
        f'    .sort({{"$desc":["modified"]}})\n'
        f"    .limit({limit})"
    )


class ArtifactoryClient:
    """
    HTTP client for the Artifactory REST API.

    Transient failures (429, 502, 503, 504) are retried with exponential
    backoff; every other HTTP failure raises CollaboratorError.
    """

    def __init__(
        self,
        config: ArtifactoryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration, loaded from environment if None
            transport: Optional httpx transport, mainly for tests

        Raises:
            ConfigurationError: If no base URL is configured
        """
        self._config = config or load_config()
        if not self._config.base_url:
            raise ConfigurationError(
                "Artifactory base URL not configured. Set ARTIFACTORY_URL.",
                config_key="base_url",
            )

        headers = {}
        if self._config.access_token:
            headers["Authorization"] = f"Bearer {self._config.access_token}"

        self._client = httpx.Client(
            base_url=self._config.base_url.rstrip("/"),
            headers=headers,
            timeout=self._config.timeout_seconds,
            verify=self._config.verify_ssl,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(httpx.HTTPStatusError),
        reraise=True,
    )
    def _request_with_retry(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, raising HTTPStatusError only for retriable codes."""
        response = self._client.request(method, url, **kwargs)
        if response.status_code in RETRIABLE_STATUS_CODES:
            response.raise_for_status()
        return response

    def _request(self, collaborator: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._request_with_retry(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise CollaboratorError(
                f"HTTP {e.response.status_code} from {method} {url}",
                collaborator=collaborator,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(
                f"HTTP error during {method} {url}: {e}",
                collaborator=collaborator,
            ) from e

    def list_repositories(self) -> list[str]:
        """Return the keys of every local repository."""
        response = self._request(
            "repository_listing", "GET", "/artifactory/api/repositories",
            params={"type": "local"},
        )
        return [entry["key"] for entry in response.json()]

    def search(self, query: str) -> list[ArtifactRecord]:
        """
        Run an AQL query and parse its results.

        Rows that do not describe an artifact are logged and skipped.

        Raises:
            CollaboratorError: If the request fails or the body is not an
                AQL result document
        """
        logger.info(f"Running AQL: {query}")
        response = self._request(
            "search", "POST", "/artifactory/api/search/aql",
            content=query,
            headers={"Content-Type": "text/plain"},
        )
        try:
            rows = (response.json() or {}).get("results") or []
            rows = list(rows)
        except (ValueError, AttributeError, TypeError) as e:
            raise CollaboratorError(
                f"Malformed AQL response: {e}", collaborator="search"
            ) from e

        records = []
        for row in rows:
            try:
                records.append(ArtifactRecord.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed AQL row {row!r}: {e.error_count()} error(s)")
        return records

    def delete(self, record: ArtifactRecord) -> None:
        """
        Delete one artifact.

        Raises:
            DeleteError: If the server rejects the delete
        """
        try:
            self._request("delete", "DELETE", f"/artifactory/{record.location}")
        except CollaboratorError as e:
            raise DeleteError(
                f"Failed to delete {record.location}: {e.message}",
                repository=record.repository,
                path=record.item_path,
                status_code=e.status_code,
            ) from e

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()
