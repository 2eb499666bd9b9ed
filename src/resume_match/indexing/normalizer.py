"""
Text normalization applied right before an embedding request.

Resumes are usually longer than the embedding input ceiling, so instead of
cutting the raw text we keep the most informative lines: contact details,
then education, skills, experience and achievements, each bucket capped.
"""

from __future__ import annotations

import re

from ..vocabulary import DEFAULT_VOCABULARY, SectionVocabulary


MAX_EMBEDDING_CHARS = 7500

DEFAULT_SECTION_LIMITS: dict[str, int] = {
    "education": 3,
    "skills": 5,
    "experience": 8,
    "achievements": 5,
}
COMPACT_SECTION_LIMITS: dict[str, int] = {
    "education": 2,
    "skills": 3,
    "experience": 5,
    "achievements": 3,
}

_SECTION_TITLES: tuple[tuple[str, str], ...] = (
    ("education", "EDUCATION"),
    ("skills", "SKILLS"),
    ("experience", "EXPERIENCE"),
    ("achievements", "PROJECTS & ACHIEVEMENTS"),
)

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"\+?\d[\d \t().-]{7,}\d")
MIN_PHONE_DIGITS = 10


def normalize(raw_text: str, *, vocabulary: SectionVocabulary | None = None) -> str:
    """
    Reduce *raw_text* to at most ``MAX_EMBEDDING_CHARS`` characters.

    Returns an empty string for empty input. When no line matches any
    keyword bucket the first ``MAX_EMBEDDING_CHARS`` characters of the raw
    text are returned unchanged.
    """
    if not raw_text or not raw_text.strip():
        return ""

    vocab = vocabulary or DEFAULT_VOCABULARY
    lines = [line.strip() for line in raw_text.splitlines() if line.strip()]
    contact = extract_contact_lines(raw_text)
    buckets = classify_lines(lines, vocab)

    if not any(buckets.values()):
        return raw_text[:MAX_EMBEDDING_CHARS]

    result = _render(contact, buckets, DEFAULT_SECTION_LIMITS)
    if len(result) > MAX_EMBEDDING_CHARS:
        result = _render(contact, buckets, COMPACT_SECTION_LIMITS)[:MAX_EMBEDDING_CHARS]
    return result


def extract_contact_lines(text: str) -> list[str]:
    """Return labeled lines for the first email and phone number found."""
    contact: list[str] = []
    email = _EMAIL_RE.search(text)
    if email:
        contact.append(f"Email: {email.group(0)}")
    phone = _find_phone(text)
    if phone:
        contact.append(f"Phone: {phone}")
    return contact


def _find_phone(text: str) -> str | None:
    # Date ranges such as "2018 - 2022" fit the pattern but carry too few digits.
    for match in _PHONE_RE.finditer(text):
        candidate = match.group(0).strip()
        if sum(char.isdigit() for char in candidate) >= MIN_PHONE_DIGITS:
            return candidate
    return None


def classify_lines(
    lines: list[str], vocabulary: SectionVocabulary
) -> dict[str, list[str]]:
    """Assign lines to keyword buckets; a line may land in several buckets."""
    buckets: dict[str, list[str]] = {name: [] for name, _ in _SECTION_TITLES}
    for line in lines:
        lowered = line.lower()
        for name in buckets:
            keywords: tuple[str, ...] = getattr(vocabulary, name)
            if any(keyword in lowered for keyword in keywords):
                buckets[name].append(line)
    return buckets


def _render(
    contact: list[str],
    buckets: dict[str, list[str]],
    limits: dict[str, int],
) -> str:
    parts: list[str] = []
    if contact:
        parts.append("\n".join(contact))
    for name, title in _SECTION_TITLES:
        selected = buckets[name][: limits[name]]
        if selected:
            parts.append(f"{title}:\n" + "\n".join(selected))
    return "\n\n".join(parts)
