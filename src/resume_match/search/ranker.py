"""
Ranking helpers for scoring a corpus against one query document.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import DimensionMismatch
from ..models import Document, MatchResult
from ..vocabulary import SectionVocabulary
from .scorer import check_dimension, score_breakdown

if TYPE_CHECKING:
    from ..embeddings import EmbeddingClient

logger = logging.getLogger(__name__)

PEER_TOP_K = 5
JOB_TOP_K = 10


def rank(
    query: Document,
    corpus: list[Document],
    top_k: int = PEER_TOP_K,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> list[MatchResult]:
    """Score *corpus* against *query*, sort descending and keep *top_k*."""
    if not corpus or not query.has_embedding:
        return []

    scored: list[MatchResult] = []
    for candidate in corpus:
        if candidate.id == query.id:
            continue
        if not candidate.has_embedding and not candidate.has_text:
            continue

        if candidate.has_embedding:
            try:
                check_dimension(query.embedding, candidate.embedding)
            except DimensionMismatch as exc:
                logger.warning("Document %s: %s Scoring as 0.", candidate.id, exc)

        breakdown = score_breakdown(
            query.embedding,
            candidate.embedding,
            query.text,
            candidate.text,
            vocabulary=vocabulary,
        )
        logger.debug(
            "Document %s: cosine=%.4f keyword=%.4f section=%.4f total=%.4f",
            candidate.id,
            breakdown.cosine,
            breakdown.keyword,
            breakdown.section,
            breakdown.total,
        )
        scored.append(MatchResult(document=candidate, score=breakdown.total))

    # sorted() is stable, so equal scores keep corpus order.
    ordered = sorted(scored, key=lambda result: -result.score)
    return ordered[: max(top_k, 0)]


def find_similar_resumes(
    resume: Document,
    corpus: list[Document],
    top_k: int = PEER_TOP_K,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> list[MatchResult]:
    """Peer-resume similarity for an already embedded resume."""
    return rank(resume, corpus, top_k, vocabulary=vocabulary)


def match_job_description(
    job_text: str,
    corpus: list[Document],
    client: EmbeddingClient,
    top_k: int = JOB_TOP_K,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> list[MatchResult]:
    """Embed a job description and rank *corpus* against it."""
    embedding = client.try_embed(job_text)
    if not embedding:
        return []
    query = Document(id="__job_description__", text=job_text, embedding=embedding)
    return rank(query, corpus, top_k, vocabulary=vocabulary)
