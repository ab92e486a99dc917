"""Core record types shared by every stage of the comparison pipeline.

All records are frozen, slotted dataclasses: they are created once by the
stage that owns them and never mutated afterwards.

Type hierarchy:
  Clause              — Titled span of source text (one provision)
  DocumentMetadata    — Optional title / page count from the text extractor
  ParsedDocument      — Source text plus its ordered clauses
  ClauseComparison    — One aligned (or unaligned) clause pair
  ChangeSummary       — Per-change-type counts over a comparison
  DocumentComparison  — Comparisons plus their summary
  ExplainedChange     — Comparison plus risk / beneficiary narrative
  RiskBreakdown       — High / Medium / Low tallies
  BeneficiaryBreakdown — Borrower / Lender / Neutral tallies
  ComparisonResults   — Everything returned to the caller

``as_dict()`` methods emit the external JSON shape (camelCase keys, absent
optional fields omitted).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

ChangeType: TypeAlias = Literal["added", "removed", "modified", "unchanged"]
RiskLevel: TypeAlias = Literal["Low", "Medium", "High"]
Beneficiary: TypeAlias = Literal["Borrower", "Lender", "Neutral"]

CHANGE_TYPES: tuple[str, ...] = ("added", "removed", "modified", "unchanged")
RISK_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")
BENEFICIARIES: tuple[str, ...] = ("Borrower", "Lender", "Neutral")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ClauseDiffError(Exception):
    """Base class for errors raised by clausediff."""


class DocumentInputError(ClauseDiffError, ValueError):
    """Raised when a document pair is missing or malformed."""


class ExplainerError(ClauseDiffError, RuntimeError):
    """Raised by an external explainer that could not produce a result."""


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Clause:
    """A contiguous span of document text believed to hold one provision."""

    id: str                     # "clause-0", "clause-1", ...
    title: str
    content: str                # Span text, trimmed
    start_index: int            # Char offset of the heading match
    end_index: int              # Start of the next clause, or len(text)
    section_number: str | None = None  # "4.2"

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }
        if self.section_number is not None:
            out["sectionNumber"] = self.section_number
        return out


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    title: str | None = None
    total_pages: int | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.title is not None:
            out["title"] = self.title
        if self.total_pages is not None:
            out["totalPages"] = self.total_pages
        return out


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    text: str
    clauses: tuple[Clause, ...]
    metadata: DocumentMetadata = DocumentMetadata()


# ---------------------------------------------------------------------------
# Alignment output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClauseComparison:
    """One entry of the alignment between two clause sequences.

    ``original_clause`` is None only for added clauses, ``amended_clause``
    only for removed ones. ``similarity`` is set iff both are present.
    """

    id: str
    change_type: ChangeType
    clause_types: tuple[str, ...]
    original_clause: Clause | None = None
    amended_clause: Clause | None = None
    similarity: float | None = None

    @property
    def title(self) -> str:
        """Title of the amended clause when present, else the original."""
        clause = self.amended_clause or self.original_clause
        return clause.title if clause is not None else ""

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "changeType": self.change_type,
            "clauseTypes": list(self.clause_types),
        }
        if self.original_clause is not None:
            out["originalClause"] = self.original_clause.as_dict()
        if self.amended_clause is not None:
            out["amendedClause"] = self.amended_clause.as_dict()
        if self.similarity is not None:
            out["similarity"] = self.similarity
        return out


@dataclass(frozen=True, slots=True)
class ChangeSummary:
    total_clauses: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def material_changes(self) -> int:
        return self.added + self.removed + self.modified

    def as_dict(self) -> dict[str, int]:
        return {
            "totalClauses": self.total_clauses,
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
        }


@dataclass(frozen=True, slots=True)
class DocumentComparison:
    changes: tuple[ClauseComparison, ...]
    summary: ChangeSummary


# ---------------------------------------------------------------------------
# Explanation output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExplainedChange:
    """A ClauseComparison extended with its risk narrative."""

    comparison: ClauseComparison
    explanation: str
    risk_level: RiskLevel
    beneficiary: Beneficiary
    impact_summary: str
    source: str = "rule_based"  # or the LLM backend name

    @property
    def change_type(self) -> ChangeType:
        return self.comparison.change_type

    @property
    def clause_types(self) -> tuple[str, ...]:
        return self.comparison.clause_types

    def as_dict(self) -> dict[str, Any]:
        out = self.comparison.as_dict()
        out["explanation"] = self.explanation
        out["riskLevel"] = self.risk_level
        out["beneficiary"] = self.beneficiary
        out["impactSummary"] = self.impact_summary
        out["source"] = self.source
        return out


@dataclass(frozen=True, slots=True)
class RiskBreakdown:
    high: int = 0
    medium: int = 0
    low: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"high": self.high, "medium": self.medium, "low": self.low}


@dataclass(frozen=True, slots=True)
class BeneficiaryBreakdown:
    borrower: int = 0
    lender: int = 0
    neutral: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "borrower": self.borrower,
            "lender": self.lender,
            "neutral": self.neutral,
        }


@dataclass(frozen=True, slots=True)
class ComparisonResults:
    changes: tuple[ExplainedChange, ...]
    summary: ChangeSummary
    executive_summary: str
    risk_breakdown: RiskBreakdown
    beneficiary_breakdown: BeneficiaryBreakdown

    def as_dict(self) -> dict[str, Any]:
        return {
            "changes": [c.as_dict() for c in self.changes],
            "summary": self.summary.as_dict(),
            "executiveSummary": self.executive_summary,
            "riskBreakdown": self.risk_breakdown.as_dict(),
            "beneficiaryBreakdown": self.beneficiary_breakdown.as_dict(),
        }
