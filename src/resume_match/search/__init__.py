"""Scoring and ranking of documents against a query."""

from .context import (
    DEFAULT_CONTEXT_CHARS,
    build_match_context,
    is_matching_request,
    should_search,
)
from .ranker import (
    JOB_TOP_K,
    PEER_TOP_K,
    find_similar_resumes,
    match_job_description,
    rank,
)
from .scorer import (
    ScoreBreakdown,
    cosine_similarity,
    keyword_overlap,
    score,
    score_breakdown,
    section_match,
)

__all__ = [
    "DEFAULT_CONTEXT_CHARS",
    "build_match_context",
    "is_matching_request",
    "should_search",
    "JOB_TOP_K",
    "PEER_TOP_K",
    "find_similar_resumes",
    "match_job_description",
    "rank",
    "ScoreBreakdown",
    "cosine_similarity",
    "keyword_overlap",
    "score",
    "score_breakdown",
    "section_match",
]
