"""
Index Catalog - SQL tables from search index metadata

Resolves index names, aliases and wildcard patterns into the
single-table-per-name model a SQL layer needs:
- one mapping type per index, one table per name
- aliases over several indices reported as invalid, not merged
- internal indices hidden from listings and lookups alike
- pluggable visibility filters that can hide but never reveal
"""

__version__ = "0.1.0"

from .catalog import (
    AllowListFilter,
    Catalog,
    EsIndex,
    FilteredCatalog,
    GetIndexResult,
    Invalid,
    NotFound,
    PreloadedCatalog,
    Valid,
)
from .config import Config
from .mapping import DataType
from .resolver import IndexResolver, create_resolver, validate_index

__all__ = [
    "AllowListFilter",
    "Catalog",
    "Config",
    "DataType",
    "EsIndex",
    "FilteredCatalog",
    "GetIndexResult",
    "IndexResolver",
    "Invalid",
    "NotFound",
    "PreloadedCatalog",
    "Valid",
    "create_resolver",
    "validate_index",
]
