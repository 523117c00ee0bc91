"""Catalog types - resolved tables and per-name resolution outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from ..mapping.types import DataType


@dataclass(frozen=True, slots=True)
class EsIndex:
    """
    A resolved table: a name plus its columns.

    The name is the one the caller asked for, which may be an alias
    rather than the concrete index behind it.
    """
    name: str
    columns: Mapping[str, DataType] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the column mapping so the table cannot change after resolution
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.columns.items())))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (columns sorted by name)."""
        return {
            "name": self.name,
            "columns": {name: self.columns[name].value for name in sorted(self.columns)},
        }


@dataclass(frozen=True, slots=True)
class Valid:
    """The name resolved to a single queryable table."""
    index: EsIndex

    @property
    def name(self) -> str:
        return self.index.name

    def to_dict(self) -> dict[str, Any]:
        return {"status": "valid", "index": self.index.to_dict()}


@dataclass(frozen=True, slots=True)
class Invalid:
    """The schema exists but breaks a compatibility rule."""
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": "invalid", "reason": self.reason}


@dataclass(frozen=True, slots=True)
class NotFound:
    """The name is absent or deliberately hidden (e.g. an internal index)."""
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": "not_found", "name": self.name}


GetIndexResult = Union[Valid, Invalid, NotFound]

# Visibility order used to tell a downgrade from an upgrade
_RANK: dict[type, int] = {NotFound: 0, Invalid: 1, Valid: 2}


def result_rank(result: GetIndexResult) -> int:
    """
    Rank a result by how much it exposes: NotFound < Invalid < Valid.

    Raises:
        TypeError: If the value is not one of the three result variants
    """
    rank = _RANK.get(type(result))
    if rank is None:
        raise TypeError(f"Not an index result: {result!r}")
    return rank
