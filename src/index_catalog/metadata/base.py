"""Index metadata client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# concrete index name -> type name -> raw mapping definition
IndexMappings = dict[str, dict[str, dict[str, Any]]]


class MetadataError(Exception):
    """Base exception for index metadata requests."""
    pass


class MetadataConnectionError(MetadataError):
    """Raised when the cluster cannot be reached."""
    pass


class MetadataRequestError(MetadataError):
    """Raised when the cluster rejects or fails a metadata request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IndexMetadataClient(ABC):
    """
    Source of index mapping metadata.

    Implementations must:
    - expand wildcard expressions and aliases to concrete indices
    - answer from the local cluster only (no cross-cluster expansion)
    - be lenient: names that match nothing, or are unavailable, simply
      produce no entry instead of an error
    - return mappings only (no settings or alias payloads)
    """

    @abstractmethod
    async def request_index_metadata(self, names: list[str]) -> IndexMappings:
        """
        Fetch the mappings for every concrete index the names resolve to.

        Args:
            names: Index names, aliases or wildcard patterns

        Returns:
            Concrete index name -> {type name -> raw mapping}

        Raises:
            MetadataError: If the request itself fails
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        pass
