"""Exceptions raised while producing or comparing embeddings."""

from __future__ import annotations


class EmbeddingError(Exception):
    """Base class for embedding failures that callers absorb per document."""


class EmptyInput(EmbeddingError):
    """Raised when the text to embed is empty or whitespace only."""

    def __init__(self, message: str = "Text is empty; nothing to embed.") -> None:
        super().__init__(message)


class RateLimitExceeded(EmbeddingError):
    """Raised when the endpoint keeps answering HTTP 429 after all retries."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Embedding endpoint rate limited after {attempts} attempts.")


class EmbeddingRequestFailed(EmbeddingError):
    """
    Raised for non-429 error responses, transport errors and malformed bodies.

    ``status_code`` is ``None`` when no HTTP status applies.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


class DimensionMismatch(EmbeddingError):
    """Raised when two vectors, or a vector and a model, disagree on dimension."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Dimension mismatch: expected {expected}, got {actual}.")
