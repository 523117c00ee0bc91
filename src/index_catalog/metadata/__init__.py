"""Index metadata clients."""

from .base import (
    IndexMappings,
    IndexMetadataClient,
    MetadataConnectionError,
    MetadataError,
    MetadataRequestError,
)
from .http import HttpIndexMetadataClient, parse_mapping_response
from .memory import InMemoryIndexMetadataClient

__all__ = [
    "IndexMappings",
    "IndexMetadataClient",
    "MetadataError",
    "MetadataConnectionError",
    "MetadataRequestError",
    "HttpIndexMetadataClient",
    "InMemoryIndexMetadataClient",
    "parse_mapping_response",
]
