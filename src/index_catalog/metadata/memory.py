"""In-memory index metadata client."""

from __future__ import annotations

import copy
import fnmatch
import logging
from dataclasses import dataclass, field
from typing import Any

from .base import IndexMappings, IndexMetadataClient


logger = logging.getLogger(__name__)


@dataclass
class InMemoryIndexMetadataClient(IndexMetadataClient):
    """
    Metadata client over a fixed set of indices and aliases.

    Useful for embedding a catalog without a cluster, and for tests.
    Name resolution follows the cluster's lenient rules:
    - ``*`` and ``?`` wildcards match index and alias names
    - a name prefixed with ``-`` removes earlier matches
    - names that match nothing are ignored
    """
    # concrete index -> type name -> raw mapping
    indices: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)

    # alias -> concrete indices
    aliases: dict[str, list[str]] = field(default_factory=dict)

    # When set, every request raises this instead of answering
    failure: Exception | None = None

    # Every names list received, in order
    requests: list[list[str]] = field(default_factory=list, init=False)

    def add_index(self, name: str, types: dict[str, dict[str, Any]] | None = None) -> None:
        self.indices[name] = types or {}

    def add_alias(self, alias: str, *concrete: str) -> None:
        self.aliases[alias] = list(concrete)

    async def request_index_metadata(self, names: list[str]) -> IndexMappings:
        self.requests.append(list(names))
        if self.failure is not None:
            raise self.failure

        matched = self.resolve_names(names)
        logger.debug(f"Resolved {names} to {matched}")

        # Copies, so callers can never reach the stored definitions
        return {name: copy.deepcopy(self.indices[name]) for name in matched}

    def resolve_names(self, names: list[str]) -> list[str]:
        """Expand names, aliases and wildcards into sorted concrete index names."""
        matched: set[str] = set()
        for expression in names or ["*"]:
            if expression.startswith("-") and matched:
                matched -= self._expand(expression[1:])
            else:
                matched |= self._expand(expression)
        return sorted(matched)

    def _expand(self, expression: str) -> set[str]:
        if expression == "_all":
            expression = "*"

        concrete: set[str] = set()
        for index_name in self.indices:
            if fnmatch.fnmatchcase(index_name, expression):
                concrete.add(index_name)
        for alias, targets in self.aliases.items():
            if fnmatch.fnmatchcase(alias, expression):
                concrete.update(t for t in targets if t in self.indices)
        return concrete
