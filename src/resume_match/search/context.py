"""
Helpers for handing ranking results to the chat assistant.
"""

from __future__ import annotations

import re

from ..models import MatchResult


_GREETING_RE = re.compile(
    r"^(hi|hello|hey|good morning|good afternoon|good evening|greetings|sup|what's up|whats up)$",
    re.IGNORECASE,
)
_ROLE_TERMS_RE = re.compile(r"\b(job|position|role|hiring|recruit)\b", re.IGNORECASE)
_JOB_REQUEST_RE = re.compile(
    r"\b(job description|position|role|candidate|hire|hiring|recruit|looking for|"
    r"seeking|need|require|want)\b",
    re.IGNORECASE,
)
_JOB_CONTEXT_RE = re.compile(
    r"\b(years of experience|skills|requirements|qualifications|responsibilities|"
    r"developer|engineer|manager|analyst|designer|consultant|senior|junior)\b",
    re.IGNORECASE,
)

_SHORT_MESSAGE_CHARS = 15
_MIN_CONTEXT_ONLY_CHARS = 30
DEFAULT_CONTEXT_CHARS = 1500


def should_search(message: str) -> bool:
    """True unless the message is a greeting or a short off-topic question."""
    text = message.strip()
    if not text or _GREETING_RE.match(text):
        return False
    if len(text) < _SHORT_MESSAGE_CHARS and not _ROLE_TERMS_RE.search(text):
        return False
    return True


def is_matching_request(message: str) -> bool:
    """Decide whether a chat message reads like a job description to match."""
    if not should_search(message):
        return False
    if _JOB_REQUEST_RE.search(message):
        return True
    return bool(_JOB_CONTEXT_RE.search(message)) and len(message) > _MIN_CONTEXT_ONLY_CHARS


def build_match_context(
    results: list[MatchResult], *, max_chars: int = DEFAULT_CONTEXT_CHARS
) -> str:
    """Render ranked resumes as a prompt block, one entry per result."""
    blocks: list[str] = []
    for index, result in enumerate(results, start=1):
        _, filename, score, text = result.to_context()
        content = text or "Content not available"
        if len(content) > max_chars:
            content = content[:max_chars] + "..."
        blocks.append(
            f"**Resume {index}: {filename or result.document_id}** "
            f"({_percent(score)}% match)\nContent: {content}\n"
        )
    return "\n".join(blocks)


def _percent(score: float) -> int:
    # Halves round up.
    return int(score * 100 + 0.5)
