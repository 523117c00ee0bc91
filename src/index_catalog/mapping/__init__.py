"""Field mapping translation - raw index mappings to SQL data types."""

from .types import DataType
from .translator import MappingError, from_es

__all__ = [
    "DataType",
    "MappingError",
    "from_es",
]
