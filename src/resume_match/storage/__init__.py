"""Storage backends for resume_match documents."""

from .base import StorageBackend, coerce_embedding
from .duckdb import DuckDBStorage

__all__ = [
    "StorageBackend",
    "coerce_embedding",
    "DuckDBStorage",
]
