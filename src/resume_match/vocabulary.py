"""
Keyword tables used to classify resume lines and compare document structure.

The lists are a blunt heuristic, so they live here as data: callers can pass
their own ``SectionVocabulary`` to the normalizer and the scorer.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class SectionVocabulary:
    """Keyword sets for the normalizer buckets and the section score."""

    education: tuple[str, ...]
    skills: tuple[str, ...]
    experience: tuple[str, ...]
    achievements: tuple[str, ...]
    sections: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SectionVocabulary:
        """Build a vocabulary from a mapping, filling gaps from the defaults."""
        values: dict[str, tuple[str, ...]] = {}
        for field in fields(cls):
            raw = data.get(field.name)
            if raw is None:
                values[field.name] = getattr(DEFAULT_VOCABULARY, field.name)
                continue
            if isinstance(raw, str) or not isinstance(raw, (list, tuple, set)):
                raise ValueError(
                    f"Vocabulary field {field.name!r} must be a list of keywords."
                )
            values[field.name] = tuple(str(item).lower() for item in raw if str(item).strip())
        return cls(**values)


DEFAULT_VOCABULARY = SectionVocabulary(
    education=(
        "education",
        "university",
        "college",
        "degree",
        "bachelor",
        "master",
        "phd",
        "diploma",
        "gpa",
        "graduated",
        "b.tech",
        "b.e.",
        "m.tech",
        "mba",
    ),
    skills=(
        "skills",
        "technologies",
        "languages",
        "frameworks",
        "tools",
        "proficient",
        "python",
        "java",
        "javascript",
        "typescript",
        "react",
        "sql",
        "aws",
        "docker",
        "kubernetes",
        "machine learning",
    ),
    experience=(
        "experience",
        "engineer",
        "developer",
        "intern",
        "manager",
        "analyst",
        "worked",
        "employment",
        "company",
        "responsible",
        "led",
        "built",
        "developed",
        "years",
    ),
    achievements=(
        "project",
        "achievement",
        "award",
        "certification",
        "certified",
        "published",
        "winner",
        "hackathon",
        "recognition",
        "honor",
    ),
    sections=(
        "education",
        "experience",
        "skills",
        "projects",
        "achievements",
        "work",
        "employment",
    ),
)
