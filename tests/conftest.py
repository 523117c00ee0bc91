"""Shared test fixtures for index catalog tests."""

import pytest

from index_catalog.config import Config
from index_catalog.metadata.base import IndexMappings, IndexMetadataClient
from index_catalog.metadata.memory import InMemoryIndexMetadataClient
from index_catalog.resolver import IndexResolver


# =============================================================================
# Mapping Fixtures
# =============================================================================

@pytest.fixture
def doc_mapping() -> dict:
    """A plain single-type mapping."""
    return {
        "properties": {
            "title": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
            "pages": {"type": "integer"},
        },
    }


@pytest.fixture
def default_mapping() -> dict:
    """A _default_ template mapping."""
    return {"properties": {"ingested_at": {"type": "date"}}}


# =============================================================================
# Metadata Client Fixtures
# =============================================================================

class StaticMetadataClient(IndexMetadataClient):
    """Answers every request with the same mappings, in the given order."""

    def __init__(self, mappings: IndexMappings):
        self.mappings = mappings
        self.requests: list[list[str]] = []

    async def request_index_metadata(self, names: list[str]) -> IndexMappings:
        self.requests.append(list(names))
        return dict(self.mappings)


@pytest.fixture
def metadata_client(doc_mapping, default_mapping) -> InMemoryIndexMetadataClient:
    """
    In-memory cluster with:
    - a, b, c, concrete_1: valid single-type indices
    - multi_type: two real types
    - with_default: _default_ + one real type
    - no_types: no mapping types at all
    - .security: internal index
    - myalias -> concrete_1, wide -> a + b
    """
    client = InMemoryIndexMetadataClient()
    for name in ("a", "b", "c", "concrete_1"):
        client.add_index(name, {"doc": doc_mapping})
    client.add_index("multi_type", {"doc2": doc_mapping, "doc1": doc_mapping})
    client.add_index("with_default", {"_default_": default_mapping, "doc": doc_mapping})
    client.add_index("no_types", {})
    client.add_index(".security", {"doc": doc_mapping})
    client.add_alias("myalias", "concrete_1")
    client.add_alias("wide", "a", "b")
    return client


@pytest.fixture
def static_client():
    """Factory for clients with a fixed, ordered answer."""
    return StaticMetadataClient


# =============================================================================
# Resolver Fixtures
# =============================================================================

@pytest.fixture
def config() -> Config:
    """Default test configuration."""
    return Config()


@pytest.fixture
def resolver(metadata_client, config) -> IndexResolver:
    """Resolver without a filter."""
    return IndexResolver(client=metadata_client, config=config.resolver)


# =============================================================================
# Test Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "http: tests for the HTTP metadata client")
