"""Lexical similarity between two clauses.

Pure text operations with zero domain dependencies beyond ``Clause``.

    similarity = 0.4 * title_jaccard + 0.2 * section_match + 0.4 * content_jaccard

Titles and content carry most of the weight because section labels drift
across amendments (renumbering) while wording of the same provision mostly
survives.
"""
from __future__ import annotations

from clausediff.models import Clause

TITLE_WEIGHT = 0.4
SECTION_WEIGHT = 0.2
CONTENT_WEIGHT = 0.4

MIN_WORD_LEN = 3
SCORE_DECIMALS = 6


def word_set(text: str) -> frozenset[str]:
    """Lowercased whitespace tokens of at least ``MIN_WORD_LEN`` characters."""
    return frozenset(
        w for w in text.lower().split() if len(w) >= MIN_WORD_LEN
    )


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    """``|a & b| / |a | b|``; 0.0 when both sets are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def text_similarity(a: str, b: str) -> float:
    return jaccard(word_set(a), word_set(b))


def section_match(a: Clause, b: Clause) -> float:
    """1.0 when both section labels agree, 0.0 otherwise.

    Two unnumbered clauses (both labels None) agree; a numbered and an
    unnumbered clause never do.
    """
    return 1.0 if a.section_number == b.section_number else 0.0


def similarity(a: Clause, b: Clause) -> float:
    """Score in [0, 1] that ``a`` and ``b`` are the same provision."""
    score = (
        TITLE_WEIGHT * text_similarity(a.title, b.title)
        + SECTION_WEIGHT * section_match(a, b)
        + CONTENT_WEIGHT * text_similarity(a.content, b.content)
    )
    # Rounded so 0.4 + 0.2 compares equal to the 0.6 match threshold.
    return round(max(0.0, min(1.0, score)), SCORE_DECIMALS)
