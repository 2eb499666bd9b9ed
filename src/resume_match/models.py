from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Document:
    """A resume or job description with its (optional) embedding."""

    id: str
    text: str = ""
    embedding: list[float] | None = None
    owner_id: str = ""
    filename: str = ""

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


@dataclass(frozen=True)
class MatchResult:
    """A scored candidate produced by one ranking call."""

    document: Document
    score: float

    @property
    def document_id(self) -> str:
        return self.document.id

    def to_context(self) -> tuple[str, str, float, str]:
        """Return the ``(id, filename, score, text)`` tuple used as chat context."""
        return (self.document.id, self.document.filename, self.score, self.document.text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document.id,
            "filename": self.document.filename,
            "score": self.score,
        }


@dataclass(frozen=True)
class BatchResult:
    """Summary of a batch embedding run."""

    succeeded: int
    failed: int
    skipped: int
    total: int
    failed_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "total": self.total,
            "failed_ids": list(self.failed_ids),
        }
