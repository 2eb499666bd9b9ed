"""
Storage interface for documents and their embeddings.
"""

from __future__ import annotations

import json
import logging
from numbers import Real
from typing import Any, Protocol

from ..models import Document

logger = logging.getLogger(__name__)


def coerce_embedding(raw: Any) -> list[float] | None:
    """
    Normalize a stored embedding to ``list[float]`` or ``None``.

    Backends may hand back a JSON string, a list, or nothing at all; the
    matching core only ever sees a numeric list or ``None``.
    """
    if raw is None:
        return None
    value = raw
    if isinstance(raw, (bytes, bytearray)):
        value = raw.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except ValueError:
            logger.warning("Discarding unparseable stored embedding")
            return None
    if not isinstance(value, (list, tuple)) or not value:
        return None
    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in value):
        logger.warning("Discarding stored embedding with non-numeric values")
        return None
    return [float(v) for v in value]


class StorageBackend(Protocol):
    """Protocol for document persistence used by the embedding workflows."""

    def initialize(self) -> None:
        """Initialize required tables."""

    def add_document(
        self,
        *,
        owner_id: str,
        filename: str,
        text: str,
        embedding: list[float] | None = None,
    ) -> Document:
        """Insert a new document and return it."""

    def fetch_documents(self, owner_id: str) -> list[Document]:
        """Return all documents of an owner in insertion order."""

    def get_document(self, doc_id: str) -> Document | None:
        """Get a document by id."""

    def update_embedding(self, doc_id: str, vector: list[float] | None) -> None:
        """Replace (or clear) the stored embedding of a document."""

    def delete_document(self, doc_id: str) -> bool:
        """Delete a document. Return True if it existed."""

    def close(self) -> None:
        """Release backend resources."""
