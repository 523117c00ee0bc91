"""Request-scoped catalogs of resolved index names."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Mapping

from .types import GetIndexResult, NotFound, result_rank


logger = logging.getLogger(__name__)

# Visibility/authorization hook: receives a result, returns the same
# result or a downgraded one
IndexFilter = Callable[[GetIndexResult], GetIndexResult]


class Catalog(ABC):
    """
    Read-only lookup of requested names to resolution results.

    Catalogs are built once per resolution call and never mutated.
    """

    @abstractmethod
    def lookup(self, name: str) -> GetIndexResult:
        """
        Get the result for a name.

        Names without an entry resolve to NotFound.
        """
        ...

    @abstractmethod
    def list(self) -> list[GetIndexResult]:
        """All entries, ordered by the name they were requested under."""
        ...

    @abstractmethod
    def names(self) -> list[str]:
        """Requested names that have an entry, sorted."""
        ...

    def __contains__(self, name: object) -> bool:
        return name in self.names()


class PreloadedCatalog(Catalog):
    """Catalog over a fixed set of results computed up front."""

    def __init__(self, results: Mapping[str, GetIndexResult] | None = None):
        self._results: Mapping[str, GetIndexResult] = MappingProxyType(dict(results or {}))

    def lookup(self, name: str) -> GetIndexResult:
        return self._results.get(name, NotFound(name))

    def list(self) -> list[GetIndexResult]:
        return [self._results[name] for name in self.names()]

    def names(self) -> list[str]:
        return sorted(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return f"PreloadedCatalog({dict(self._results)!r})"


class FilteredCatalog(Catalog):
    """
    Catalog that passes every result of a wrapped catalog through a filter.

    The filter may only hide information: a Valid result may become Invalid
    or NotFound, an Invalid result may become NotFound. Anything a filter
    returns that ranks above its input is ignored and the input is kept.
    """

    def __init__(self, delegate: Catalog, index_filter: IndexFilter):
        self._delegate = delegate
        self._filter = index_filter

    @property
    def delegate(self) -> Catalog:
        return self._delegate

    def lookup(self, name: str) -> GetIndexResult:
        return apply_filter(self._filter, self._delegate.lookup(name))

    def list(self) -> list[GetIndexResult]:
        return [result for _, result in self._visible()]

    def names(self) -> list[str]:
        return [name for name, _ in self._visible()]

    def _visible(self) -> list[tuple[str, GetIndexResult]]:
        # Entries the filter turns into NotFound no longer exist for the caller
        entries = ((name, self.lookup(name)) for name in self._delegate.names())
        return [(name, result) for name, result in entries if not isinstance(result, NotFound)]

    def __repr__(self) -> str:
        return f"FilteredCatalog({self._delegate!r}, {self._filter!r})"


def apply_filter(index_filter: IndexFilter, result: GetIndexResult) -> GetIndexResult:
    """Run a filter over a result, refusing any upgrade."""
    filtered = index_filter(result)
    if result_rank(filtered) > result_rank(result):
        logger.warning(f"Ignoring filter upgrade of {result!r} to {filtered!r}")
        return result
    return filtered
