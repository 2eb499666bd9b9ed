"""Tests for pre-embedding text normalization."""

from __future__ import annotations

from resume_match.indexing.normalizer import (
    MAX_EMBEDDING_CHARS,
    extract_contact_lines,
    normalize,
)
from resume_match.vocabulary import SectionVocabulary


SAMPLE_RESUME = """
Jane Doe
jane.doe@example.com | +1 (555) 123-4567

EDUCATION
B.Sc. Computer Science, State University, 2019

SKILLS
Python, SQL, Docker

EXPERIENCE
Software Engineer at Acme Corp, 2019-2023
Hackathon winner 2022
"""


def test_empty_input_returns_empty_string() -> None:
    assert normalize("") == ""
    assert normalize("   \n\t  \n") == ""


def test_structured_resume_is_bucketed_in_fixed_order() -> None:
    result = normalize(SAMPLE_RESUME)

    assert result == (
        "Email: jane.doe@example.com\n"
        "Phone: +1 (555) 123-4567\n"
        "\n"
        "EDUCATION:\n"
        "EDUCATION\n"
        "B.Sc. Computer Science, State University, 2019\n"
        "\n"
        "SKILLS:\n"
        "SKILLS\n"
        "Python, SQL, Docker\n"
        "\n"
        "EXPERIENCE:\n"
        "EXPERIENCE\n"
        "Software Engineer at Acme Corp, 2019-2023\n"
        "\n"
        "PROJECTS & ACHIEVEMENTS:\n"
        "Hackathon winner 2022"
    )


def test_contact_lines_use_first_match_only() -> None:
    text = "a@example.com b@example.com\n+44 20 7946 0958\n+1 555 000 1111"

    assert extract_contact_lines(text) == [
        "Email: a@example.com",
        "Phone: +44 20 7946 0958",
    ]


def test_unmatched_text_falls_back_to_raw_text() -> None:
    text = "Random notes\nNothing here"

    assert normalize(text) == text


def test_long_unmatched_text_is_truncated_prefix() -> None:
    text = "zzz qqq\n" * 2000

    result = normalize(text)

    assert len(result) == MAX_EMBEDDING_CHARS
    assert result == text[:MAX_EMBEDDING_CHARS]


def test_contact_info_alone_does_not_count_as_match() -> None:
    text = "zzz qqq reach me at zed@example.com\n" * 300

    assert normalize(text) == text[:MAX_EMBEDDING_CHARS]


def test_bucket_caps_apply() -> None:
    lines = [f"skills line {i}" for i in range(10)]

    result = normalize("\n".join(lines))

    assert "skills line 4" in result
    assert "skills line 5" not in result


def test_line_matching_several_buckets_is_repeated() -> None:
    result = normalize("Python developer")

    assert result == "SKILLS:\nPython developer\n\nEXPERIENCE:\nPython developer"


def test_oversized_output_is_rebuilt_with_compact_caps() -> None:
    lines = [f"python {i} " + "x" * 1990 for i in range(10)]

    result = normalize("\n".join(lines))

    assert len(result) <= MAX_EMBEDDING_CHARS
    assert result.count("python ") == 3


def test_still_oversized_output_is_hard_truncated() -> None:
    lines = [f"python {i} " + "x" * 4000 for i in range(4)]

    result = normalize("\n".join(lines))

    assert len(result) == MAX_EMBEDDING_CHARS
    assert result.startswith("SKILLS:\npython 0 ")


def test_custom_vocabulary_changes_buckets() -> None:
    vocabulary = SectionVocabulary.from_dict({"skills": ["cobol"]})

    assert normalize("COBOL mainframe", vocabulary=vocabulary) == "SKILLS:\nCOBOL mainframe"
    assert normalize("Python", vocabulary=vocabulary) == "Python"


def test_year_range_is_not_a_phone_number() -> None:
    result = normalize("EXPERIENCE\nSoftware Engineer, Acme, 2018 - 2022")

    assert "Phone:" not in result
    assert result.startswith("EXPERIENCE:\n")


def test_stacked_year_ranges_are_not_a_phone_number() -> None:
    text = "Acme 2018 - 2022\nGlobex 2014 - 2018\ncall 555-123-4567"

    assert extract_contact_lines(text) == ["Phone: 555-123-4567"]
