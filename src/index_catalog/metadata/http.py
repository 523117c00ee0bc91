"""HTTP index metadata client using the cluster's mapping API."""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from ..config import ClusterConfig
from .base import (
    IndexMappings,
    IndexMetadataClient,
    MetadataConnectionError,
    MetadataError,
    MetadataRequestError,
)


logger = logging.getLogger(__name__)

# Local, lenient, open indices only
MAPPING_REQUEST_PARAMS = {
    "local": "true",
    "ignore_unavailable": "true",
    "allow_no_indices": "true",
    "expand_wildcards": "open",
}

# Type name used for single-type (typeless) mapping responses
TYPELESS_TYPE_NAME = "_doc"

# Keys that only appear at the top of a typeless mapping
_TYPELESS_KEYS = frozenset({
    "properties",
    "dynamic",
    "dynamic_templates",
    "date_detection",
    "numeric_detection",
    "_source",
    "_routing",
    "_meta",
    "_field_names",
})


@dataclass
class HttpIndexMetadataClient(IndexMetadataClient):
    """
    Fetches index mappings with ``GET /{names}/_mapping``.

    Config (ClusterConfig):
        url: Base URL of the cluster
        timeout_seconds: Request timeout
        auth_type: none | bearer | api_key | basic
        auth_config: Auth-specific config (token, key/header, username/password)
        headers: Additional headers
        verify_ssl: Verify TLS certificates
    """
    config: ClusterConfig = field(default_factory=ClusterConfig)

    # Optional transport override (e.g. httpx.MockTransport)
    transport: httpx.AsyncBaseTransport | None = None

    async def request_index_metadata(self, names: list[str]) -> IndexMappings:
        start = time.perf_counter()
        url = self._mapping_url(names)

        headers = {"Accept": "application/json", **self.config.headers}
        self._apply_auth(headers)

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_ssl,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=headers, params=MAPPING_REQUEST_PARAMS)

                if response.status_code == 404:
                    # Lenient requests should not 404, but some proxies do
                    logger.debug(f"No indices matched {names}")
                    return {}
                if response.status_code >= 400:
                    raise MetadataRequestError(
                        f"Mapping request failed: {response.status_code} - {response.text[:200]}",
                        status_code=response.status_code,
                    )

                body = response.json()

        except httpx.ConnectError as e:
            raise MetadataConnectionError(f"Failed to connect to {self.config.url}: {e}") from e
        except httpx.TimeoutException as e:
            raise MetadataRequestError(f"Request timeout: {url}") from e
        except MetadataError:
            raise
        except ValueError as e:
            raise MetadataRequestError(f"Malformed mapping response from {url}: {e}") from e

        if not isinstance(body, dict):
            raise MetadataRequestError(f"Malformed mapping response from {url}: expected an object")

        mappings = parse_mapping_response(body)

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(f"Fetched mappings for {len(mappings)} indices in {elapsed:.1f}ms")
        return mappings

    def _mapping_url(self, names: list[str]) -> str:
        target = ",".join(quote(name, safe="*") for name in names) if names else "_all"
        return f"{self.config.url.rstrip('/')}/{target}/_mapping"

    def _apply_auth(self, headers: dict[str, str]) -> None:
        """Apply authentication to headers."""
        auth_type = self.config.auth_type
        auth_config = self.config.auth_config

        if auth_type == "bearer":
            token = auth_config.get("token")
            if token:
                headers["Authorization"] = f"Bearer {token}"
        elif auth_type == "api_key":
            key = auth_config.get("key")
            header_name = auth_config.get("header", "Authorization")
            if key:
                headers[header_name] = f"ApiKey {key}" if header_name == "Authorization" else key
        elif auth_type == "basic":
            username = auth_config.get("username", "")
            password = auth_config.get("password", "")
            creds = base64.b64encode(f"{username}:{password}".encode()).decode()
            headers["Authorization"] = f"Basic {creds}"


def parse_mapping_response(body: dict[str, Any]) -> IndexMappings:
    """
    Convert a mapping API response into concrete index -> type -> mapping.

    Typed responses (``{"idx": {"mappings": {"doc": {...}}}}``) are kept
    as they are. Typeless responses (``{"idx": {"mappings": {"properties": ...}}}``)
    become a single ``_doc`` type.

    Raises:
        MetadataRequestError: If an index entry or its mappings are not objects
    """
    result: IndexMappings = {}
    for index_name, index_body in body.items():
        if index_body is None:
            index_body = {}
        if not isinstance(index_body, dict):
            raise MetadataRequestError(f"Malformed mapping response: entry for [{index_name}] is not an object")

        mappings = index_body.get("mappings") or {}
        if not isinstance(mappings, dict):
            raise MetadataRequestError(f"Malformed mapping response: mappings of [{index_name}] are not an object")

        result[index_name] = _normalize_types(mappings)
    return result


def _normalize_types(mappings: dict[str, Any]) -> dict[str, dict[str, Any]]:
    if not mappings:
        return {}
    if _TYPELESS_KEYS.intersection(mappings):
        return {TYPELESS_TYPE_NAME: mappings}
    return {type_name: definition or {} for type_name, definition in mappings.items()}
