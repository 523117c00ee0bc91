"""Translate raw index mappings into column -> DataType tables.

A type mapping looks like:

```json
{
  "properties": {
    "title":  {"type": "text", "fields": {"raw": {"type": "keyword"}}},
    "author": {"properties": {"name": {"type": "keyword"}}},
    "tags":   {"type": "nested", "properties": {"label": {"type": "keyword"}}}
  }
}
```

and translates to:

```python
{
    "title": DataType.TEXT,
    "author": DataType.OBJECT,
    "author.name": DataType.KEYWORD,
    "tags": DataType.NESTED,
    "tags.label": DataType.KEYWORD,
}
```
"""

from __future__ import annotations

from typing import Any

from .types import DataType


class MappingError(Exception):
    """Raised when a mapping holds a field that cannot be exposed to SQL."""
    pass


def from_es(mapping: dict[str, Any]) -> dict[str, DataType]:
    """
    Translate a single type's mapping definition into columns.

    Args:
        mapping: The type mapping (the object holding ``properties``)

    Returns:
        Column name -> DataType, with sub-fields of objects flattened
        into dotted names

    Raises:
        MappingError: If a field definition is malformed or its type is
            not supported
    """
    if not isinstance(mapping, dict):
        raise MappingError(f"has a malformed mapping of type [{type(mapping).__name__}]")

    columns: dict[str, DataType] = {}
    _walk_properties(mapping.get("properties") or {}, "", columns)
    return columns


def _walk_properties(
    properties: dict[str, Any],
    prefix: str,
    columns: dict[str, DataType],
) -> None:
    if not isinstance(properties, dict):
        raise MappingError(f"has malformed properties for [{prefix.rstrip('.') or 'root'}]")

    for field_name, definition in properties.items():
        column = f"{prefix}{field_name}"

        if not isinstance(definition, dict):
            raise MappingError(f"has a malformed definition for field [{column}]")

        data_type = _field_type(column, definition)
        columns[column] = data_type

        # Multi-fields ("fields") are alternate indexings of the same
        # value, not separate columns
        if data_type.is_compound:
            _walk_properties(definition.get("properties") or {}, f"{column}.", columns)


def _field_type(column: str, definition: dict[str, Any]) -> DataType:
    es_type = definition.get("type")
    if es_type is None:
        # Objects are implied by the presence of sub-properties
        if "properties" in definition:
            return DataType.OBJECT
        raise MappingError(f"has field [{column}] without a type")

    data_type = DataType.from_es_name(str(es_type))
    if data_type is None:
        raise MappingError(f"has unsupported field [{column}] of type [{es_type}]")
    return data_type
