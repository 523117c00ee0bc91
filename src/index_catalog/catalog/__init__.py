"""Catalog system - request-scoped tables resolved from index metadata."""

from .types import EsIndex, GetIndexResult, Invalid, NotFound, Valid, result_rank
from .catalog import Catalog, FilteredCatalog, IndexFilter, PreloadedCatalog, apply_filter
from .filters import AllowListFilter, chain_filters

__all__ = [
    "EsIndex",
    "GetIndexResult",
    "Valid",
    "Invalid",
    "NotFound",
    "result_rank",
    "Catalog",
    "PreloadedCatalog",
    "FilteredCatalog",
    "IndexFilter",
    "apply_filter",
    "AllowListFilter",
    "chain_filters",
]
