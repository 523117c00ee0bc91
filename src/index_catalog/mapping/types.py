"""SQL-facing data types for index mapping fields."""

from __future__ import annotations

from enum import Enum


class DataType(str, Enum):
    """Data types a raw field definition translates into."""
    NULL = "null"
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    HALF_FLOAT = "half_float"
    SCALED_FLOAT = "scaled_float"
    DOUBLE = "double"
    KEYWORD = "keyword"
    TEXT = "text"
    BINARY = "binary"
    DATE = "date"
    IP = "ip"
    # Compound types - their sub-fields become dotted columns
    OBJECT = "object"
    NESTED = "nested"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC

    @property
    def is_compound(self) -> bool:
        return self in (DataType.OBJECT, DataType.NESTED)

    @property
    def is_string(self) -> bool:
        return self in (DataType.KEYWORD, DataType.TEXT)

    @classmethod
    def from_es_name(cls, es_type: str) -> DataType | None:
        """Look up a type by its mapping name. Returns None if unsupported."""
        try:
            return cls(es_type.lower())
        except ValueError:
            return None


_NUMERIC = frozenset({
    DataType.BYTE,
    DataType.SHORT,
    DataType.INTEGER,
    DataType.LONG,
    DataType.FLOAT,
    DataType.HALF_FLOAT,
    DataType.SCALED_FLOAT,
    DataType.DOUBLE,
})
