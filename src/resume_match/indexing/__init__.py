"""Text preparation and embedding workflows."""

from .normalizer import MAX_EMBEDDING_CHARS, normalize
from .pipeline import EmbeddingPipeline, batch_delay

__all__ = [
    "MAX_EMBEDDING_CHARS",
    "normalize",
    "EmbeddingPipeline",
    "batch_delay",
]
