"""
Hybrid similarity between a query document and a candidate document.

The final score blends three signals with fixed weights:

    0.7 * normalized cosine similarity of the embeddings
  + 0.2 * lexical keyword overlap of the texts
  + 0.1 * agreement in section structure

Degenerate embeddings (missing, empty, different lengths, zero magnitude)
score 0 regardless of the text signals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..errors import DimensionMismatch
from ..vocabulary import DEFAULT_VOCABULARY, SectionVocabulary


COSINE_WEIGHT = 0.7
KEYWORD_WEIGHT = 0.2
SECTION_WEIGHT = 0.1
MIN_KEYWORD_LENGTH = 4

Vector = Sequence[float]


@dataclass(frozen=True)
class ScoreBreakdown:
    """Subscores behind a hybrid score."""

    cosine: float
    keyword: float
    section: float

    @property
    def total(self) -> float:
        combined = (
            COSINE_WEIGHT * self.cosine
            + KEYWORD_WEIGHT * self.keyword
            + SECTION_WEIGHT * self.section
        )
        return min(1.0, max(0.0, combined))


_ZERO = ScoreBreakdown(cosine=0.0, keyword=0.0, section=0.0)


def score(
    query_embedding: Vector | None,
    candidate_embedding: Vector | None,
    query_text: str,
    candidate_text: str,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> float:
    """Return the hybrid similarity in [0, 1]."""
    return score_breakdown(
        query_embedding,
        candidate_embedding,
        query_text,
        candidate_text,
        vocabulary=vocabulary,
    ).total


def score_breakdown(
    query_embedding: Vector | None,
    candidate_embedding: Vector | None,
    query_text: str,
    candidate_text: str,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> ScoreBreakdown:
    """Compute the three subscores; all zero when the embeddings are unusable."""
    if query_embedding is None or candidate_embedding is None:
        return _ZERO
    if len(query_embedding) == 0 or len(candidate_embedding) == 0:
        return _ZERO
    if len(query_embedding) != len(candidate_embedding):
        return _ZERO

    cosine = cosine_similarity(query_embedding, candidate_embedding)
    if cosine is None:
        return _ZERO

    vocab = vocabulary or DEFAULT_VOCABULARY
    return ScoreBreakdown(
        cosine=max(0.0, (cosine + 1.0) / 2.0),
        keyword=keyword_overlap(query_text, candidate_text),
        section=section_match(query_text, candidate_text, vocabulary=vocab),
    )


def cosine_similarity(a: Vector, b: Vector) -> float | None:
    """Cosine of the angle between *a* and *b*, or ``None`` for a zero vector."""
    check_dimension(a, b)
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return None
    return float(np.dot(va, vb)) / (norm_a * norm_b)


def check_dimension(a: Vector, b: Vector) -> None:
    if len(a) != len(b):
        raise DimensionMismatch(expected=len(a), actual=len(b))


def keyword_overlap(text_a: str, text_b: str) -> float:
    tokens_a = _keywords(text_a)
    tokens_b = _keywords(text_b)
    shared = tokens_a & tokens_b
    return len(shared) / max(len(tokens_a), len(tokens_b), 1)


def section_match(
    text_a: str,
    text_b: str,
    *,
    vocabulary: SectionVocabulary | None = None,
) -> float:
    vocab = vocabulary or DEFAULT_VOCABULARY
    count_a = count_section_terms(text_a, vocab)
    count_b = count_section_terms(text_b, vocab)
    return min(count_a, count_b) / max(count_a, count_b, 1)


def count_section_terms(text: str, vocabulary: SectionVocabulary) -> int:
    """Count case-insensitive substring occurrences of the section vocabulary."""
    lowered = (text or "").lower()
    return sum(lowered.count(term) for term in vocabulary.sections)


def _keywords(text: str) -> set[str]:
    return {
        token
        for token in (text or "").lower().split()
        if len(token) >= MIN_KEYWORD_LENGTH
    }
