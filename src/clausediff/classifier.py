"""Clause classification — lexical category tags for loan agreement clauses.

Each category in the closed vocabulary has exactly one case-insensitive
pattern, tested against ``title + " " + content``:

    1. Interest Rate   — ``interest rate``, ``APR``, ``annual percentage``
    2. Payment Terms   — ``payment``, ``installment``, ``amortization``
    3. Principal       — ``principal amount``, ``loan amount``
    4. Collateral      — ``collateral``, ``security``, ``pledge``, ``lien``
    5. Default         — ``default``, ``breach``, ``failure to pay``
    6. Covenants       — ``covenant``, ``undertaking``
    7. Representations — ``represent``, ``warranty``
    8. Maturity        — ``maturity``, ``term of loan``, ``loan period``
    9. Prepayment      — ``prepayment``, ``early payment``
    10. Fees           — ``fee``, ``charge``, ``cost``, ``expense``
    11. Governing Law  — ``governing law``, ``jurisdiction``
    12. Amendment      — ``amendment``, ``modification``, ``change``, ``alter``

Patterns are unanchored substring tests (``fee`` also hits ``feet``); this
is lexical tagging, not language understanding.

No file I/O — pure functions only.
"""

from __future__ import annotations

import re

from clausediff.models import Clause

GENERAL_TAG = "General"

# ── Category Patterns ───────────────────────────────────────────────────
# Insertion order is the output order of classify().

CLAUSE_TYPE_PATTERNS: dict[str, re.Pattern[str]] = {
    "Interest Rate": re.compile(
        r"interest rate|apr|annual percentage|interest calculation",
        re.IGNORECASE,
    ),
    "Payment Terms": re.compile(
        r"payment|installment|amortization|due date",
        re.IGNORECASE,
    ),
    "Principal": re.compile(
        r"principal amount|loan amount|borrowed amount",
        re.IGNORECASE,
    ),
    "Collateral": re.compile(
        r"collateral|security|pledge|lien",
        re.IGNORECASE,
    ),
    "Default": re.compile(
        r"default|breach|event of default|failure to pay",
        re.IGNORECASE,
    ),
    "Covenants": re.compile(
        r"covenant|undertaking|affirmative covenant|negative covenant",
        re.IGNORECASE,
    ),
    "Representations": re.compile(
        r"represent|warranty|representation and warrant",
        re.IGNORECASE,
    ),
    "Maturity": re.compile(
        r"maturity|maturity date|term of loan|loan period",
        re.IGNORECASE,
    ),
    "Prepayment": re.compile(
        r"prepayment|early payment|voluntary prepayment",
        re.IGNORECASE,
    ),
    "Fees": re.compile(
        r"fee|charge|cost|expense",
        re.IGNORECASE,
    ),
    "Governing Law": re.compile(
        r"governing law|jurisdiction|applicable law",
        re.IGNORECASE,
    ),
    "Amendment": re.compile(
        r"amendment|modification|change|alter",
        re.IGNORECASE,
    ),
}

CLAUSE_TYPES: tuple[str, ...] = tuple(CLAUSE_TYPE_PATTERNS)

# ── Category groups used by the explanation layer ──────────────────────

ECONOMIC_TYPES: frozenset[str] = frozenset({
    "Interest Rate", "Payment Terms", "Principal", "Fees", "Maturity",
})
RISK_TYPES: frozenset[str] = frozenset({"Default", "Covenants", "Collateral"})


def classify_text(text: str) -> tuple[str, ...]:
    """Return every category whose pattern occurs in ``text``.

    Never empty: falls back to ``("General",)``.
    """
    tags = tuple(
        name for name, pattern in CLAUSE_TYPE_PATTERNS.items()
        if pattern.search(text)
    )
    return tags or (GENERAL_TAG,)


def classify(clause: Clause) -> tuple[str, ...]:
    """Tag a clause from its title and content."""
    return classify_text(f"{clause.title} {clause.content}")


def is_economic(tags: tuple[str, ...] | list[str]) -> bool:
    return any(t in ECONOMIC_TYPES for t in tags)


def is_risk_related(tags: tuple[str, ...] | list[str]) -> bool:
    return any(t in RISK_TYPES for t in tags)
