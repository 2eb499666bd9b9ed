"""
Embedding workflows: document upload and batch regeneration.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from ..errors import EmbeddingError
from ..models import BatchResult, Document
from ..storage import StorageBackend

if TYPE_CHECKING:
    from ..embeddings import EmbeddingClient

logger = logging.getLogger(__name__)

_MIN_BATCH_DELAY = 1.0
_MAX_BATCH_DELAY = 2.0
_DELAY_STEP = 0.1


def batch_delay(total: int) -> float:
    """Seconds to wait between two embedding requests of a batch of *total* items."""
    if total <= 1:
        return _MIN_BATCH_DELAY
    return min(_MAX_BATCH_DELAY, _MIN_BATCH_DELAY + _DELAY_STEP * (total - 1))


class EmbeddingPipeline:
    """
    Attach embeddings to stored documents.

    Failures are absorbed per document: an upload always stores the document
    and a batch always runs to the end, leaving failed documents without an
    embedding.
    """

    def __init__(
        self,
        storage: StorageBackend,
        client: EmbeddingClient,
        *,
        sleep: Callable[[float], None] = time.sleep,
        throttle: bool = True,
    ) -> None:
        self.storage = storage
        self.client = client
        self.throttle = throttle
        self._sleep = sleep

    def ingest(self, *, owner_id: str, filename: str, text: str) -> Document:
        """Store a new document and try to embed it."""
        vector = self.client.try_embed(text)
        document = self.storage.add_document(
            owner_id=owner_id,
            filename=filename,
            text=text,
            embedding=vector or None,
        )
        if not document.has_embedding:
            logger.info("Stored %s without an embedding", filename or document.id)
        return document

    def regenerate(self, owner_id: str, *, only_missing: bool = False) -> BatchResult:
        """Re-embed an owner's documents one at a time."""
        documents = self.storage.fetch_documents(owner_id)
        if only_missing:
            documents = [doc for doc in documents if not doc.has_embedding]

        total = len(documents)
        delay = batch_delay(total)
        succeeded = 0
        failed = 0
        skipped = 0
        failed_ids: list[str] = []
        requested = False

        for document in documents:
            if not document.has_text:
                skipped += 1
                continue

            if requested and self.throttle:
                self._sleep(delay)
            requested = True

            if self._embed_and_store(document):
                succeeded += 1
            else:
                failed += 1
                failed_ids.append(document.id)

        result = BatchResult(
            succeeded=succeeded,
            failed=failed,
            skipped=skipped,
            total=total,
            failed_ids=failed_ids,
        )
        logger.info(
            "Regenerated embeddings for %s: %d succeeded, %d failed, %d skipped, %d total",
            owner_id,
            result.succeeded,
            result.failed,
            result.skipped,
            result.total,
        )
        return result

    def regenerate_document(self, doc_id: str) -> bool:
        """Retry a single document. Return True when an embedding was stored."""
        document = self.storage.get_document(doc_id)
        if document is None:
            raise ValueError(f"Document '{doc_id}' not found")
        if not document.has_text:
            logger.info("Document %s has no text; skipping", doc_id)
            return False
        return self._embed_and_store(document)

    def _embed_and_store(self, document: Document) -> bool:
        try:
            vector = self.client.embed(document.text)
        except EmbeddingError as exc:
            logger.warning("Embedding failed for %s: %s", document.id, exc)
            self.storage.update_embedding(document.id, None)
            return False
        self.storage.update_embedding(document.id, vector)
        return True
