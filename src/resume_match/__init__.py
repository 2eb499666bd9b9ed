"""
resume_match - semantic resume-to-job matching.

Documents are embedded through a remote embedding endpoint, cached, and
ranked against a query with a hybrid score built from cosine similarity,
keyword overlap and section structure.

Example usage:
    >>> from resume_match import Document, EmbeddingClient, rank
    >>> client = EmbeddingClient()
    >>> query = Document(id="job", text=job_text, embedding=client.embed(job_text))
    >>> results = rank(query, corpus, top_k=10)
"""

from .cache import EmbeddingCache, make_cache_key
from .embeddings import EmbeddingClient
from .errors import (
    DimensionMismatch,
    EmbeddingError,
    EmbeddingRequestFailed,
    EmptyInput,
    RateLimitExceeded,
)
from .indexing import EmbeddingPipeline, normalize
from .models import BatchResult, Document, MatchResult
from .search import (
    build_match_context,
    find_similar_resumes,
    is_matching_request,
    match_job_description,
    rank,
    score,
)
from .vocabulary import DEFAULT_VOCABULARY, SectionVocabulary

__all__ = [
    # Embeddings
    "EmbeddingCache",
    "make_cache_key",
    "EmbeddingClient",
    # Errors
    "DimensionMismatch",
    "EmbeddingError",
    "EmbeddingRequestFailed",
    "EmptyInput",
    "RateLimitExceeded",
    # Workflows
    "EmbeddingPipeline",
    "normalize",
    # Models
    "BatchResult",
    "Document",
    "MatchResult",
    # Matching
    "build_match_context",
    "find_similar_resumes",
    "is_matching_request",
    "match_job_description",
    "rank",
    "score",
    # Configuration data
    "DEFAULT_VOCABULARY",
    "SectionVocabulary",
]
