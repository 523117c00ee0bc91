"""Ready-made index filters."""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass

from .catalog import IndexFilter
from .types import GetIndexResult, NotFound, Valid


@dataclass(frozen=True)
class AllowListFilter:
    """
    Hide valid indices whose name matches none of the allowed patterns.

    Patterns use shell-style wildcards (``logs-*``, ``metrics-202?``).
    Invalid and NotFound results pass through untouched.
    """
    patterns: tuple[str, ...] = ()

    def __call__(self, result: GetIndexResult) -> GetIndexResult:
        if not isinstance(result, Valid):
            return result
        if self.allows(result.name):
            return result
        return NotFound(result.name)

    def allows(self, name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.patterns)


def chain_filters(*filters: IndexFilter) -> IndexFilter:
    """
    Combine filters, applied left to right.

    Stops as soon as a result is no longer Valid.
    """
    def chained(result: GetIndexResult) -> GetIndexResult:
        for index_filter in filters:
            if not isinstance(result, Valid):
                break
            result = index_filter(result)
        return result

    return chained
