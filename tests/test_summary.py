"""Tests for clausediff.summary — executive summary and breakdowns."""
from __future__ import annotations

from clausediff.aligner import compare_documents
from clausediff.explainers import explain_changes
from clausediff.models import (
    ChangeSummary,
    ClauseComparison,
    ComparisonResults,
    ExplainedChange,
)
from clausediff.segmenter import parse_document
from clausediff.summary import (
    beneficiary_breakdown,
    build_results,
    risk_breakdown,
    summarize,
)


def _explained(
    risk: str = "Medium",
    beneficiary: str = "Neutral",
    tags: tuple[str, ...] = ("General",),
    change_type: str = "modified",
) -> ExplainedChange:
    comparison = ClauseComparison(
        id="change-0",
        change_type=change_type,  # type: ignore[arg-type]
        clause_types=tags,
    )
    return ExplainedChange(
        comparison=comparison,
        explanation="x",
        risk_level=risk,  # type: ignore[arg-type]
        beneficiary=beneficiary,  # type: ignore[arg-type]
        impact_summary="y",
    )


COUNTS = ChangeSummary(total_clauses=5, added=1, removed=1, modified=2, unchanged=1)


class TestBreakdowns:
    def test_risk_breakdown(self) -> None:
        changes = [_explained("High"), _explained("High"), _explained("Low")]
        assert risk_breakdown(changes).as_dict() == {"high": 2, "medium": 0, "low": 1}

    def test_beneficiary_breakdown(self) -> None:
        changes = [_explained(beneficiary="Borrower"), _explained(beneficiary="Neutral")]
        assert beneficiary_breakdown(changes).as_dict() == {
            "borrower": 1, "lender": 0, "neutral": 1,
        }

    def test_empty(self) -> None:
        assert risk_breakdown([]).as_dict() == {"high": 0, "medium": 0, "low": 0}


class TestSummarize:
    def test_material_change_count(self) -> None:
        text = summarize([], COUNTS)
        assert text.startswith("This amendment introduces 4 material changes to the loan agreement.")

    def test_balanced_when_tied(self) -> None:
        text = summarize([_explained(beneficiary="Borrower"), _explained(beneficiary="Lender")], COUNTS)
        assert "The changes appear balanced between borrower and lender interests." in text

    def test_balanced_when_no_changes(self) -> None:
        text = summarize([], ChangeSummary())
        assert text == (
            "This amendment introduces 0 material changes to the loan agreement. "
            "The changes appear balanced between borrower and lender interests."
        )

    def test_favors_borrower(self) -> None:
        text = summarize([_explained(beneficiary="Borrower")], COUNTS)
        assert "The amendment appears to favor the borrower with more flexible terms." in text

    def test_favors_lender(self) -> None:
        changes = [_explained(beneficiary="Lender"), _explained(beneficiary="Lender"),
                   _explained(beneficiary="Borrower")]
        text = summarize(changes, COUNTS)
        assert "The amendment strengthens lender protections and tightens covenants." in text

    def test_high_risk_singular(self) -> None:
        text = summarize([_explained("High")], COUNTS)
        assert " 1 change is classified as high-risk and require careful review." in text

    def test_high_risk_plural(self) -> None:
        text = summarize([_explained("High"), _explained("High")], COUNTS)
        assert " 2 changes are classified as high-risk and require careful review." in text

    def test_no_high_risk_sentence(self) -> None:
        assert "high-risk" not in summarize([_explained("Low")], COUNTS)

    def test_economic_note(self) -> None:
        changes = [
            _explained(tags=("Interest Rate",)),
            _explained(tags=("Fees", "Default")),
            _explained(tags=("Governing Law",)),
        ]
        assert summarize(changes, COUNTS).endswith("Note: 2 changes affect economic terms.")
        assert summarize(changes[:1], COUNTS).endswith("Note: 1 change affects economic terms.")

    def test_maturity_not_counted_as_economic(self) -> None:
        assert "Note:" not in summarize([_explained(tags=("Maturity",))], COUNTS)

    def test_full_sentence(self) -> None:
        changes = [
            _explained("High", "Lender", ("Covenants",), "added"),
            _explained("High", "Neutral", ("Interest Rate",)),
            _explained("Medium", "Neutral", ("General",), "removed"),
        ]
        counts = ChangeSummary(total_clauses=4, added=1, removed=1, modified=1, unchanged=1)
        assert summarize(changes, counts) == (
            "This amendment introduces 3 material changes to the loan agreement. "
            "2 changes are classified as high-risk and require careful review. "
            "The amendment strengthens lender protections and tightens covenants. "
            "Note: 1 change affects economic terms."
        )

    def test_deterministic(self) -> None:
        changes = [_explained("High", "Borrower", ("Fees",))]
        assert summarize(changes, COUNTS) == summarize(changes, COUNTS)


class TestBuildResults:
    def test_build_results(self) -> None:
        original = parse_document("1. Collateral\nA lien on all assets.\n2. Notices\nBy mail.")
        amended = parse_document("2. Notices\nBy mail.\n5. Covenants\nThe Borrower shall maintain insurance.")
        comparison = compare_documents(original, amended)
        explained = explain_changes(comparison.changes)
        results = build_results(comparison, explained)

        assert isinstance(results, ComparisonResults)
        assert results.summary == comparison.summary
        assert len(results.changes) == comparison.summary.material_changes
        assert results.risk_breakdown.high == 2
        assert results.beneficiary_breakdown.borrower == 1
        assert results.beneficiary_breakdown.lender == 1
        assert "balanced" in results.executive_summary

        payload = results.as_dict()
        assert set(payload) == {
            "changes", "summary", "executiveSummary", "riskBreakdown", "beneficiaryBreakdown",
        }
        assert payload["changes"][0]["changeType"] == "removed"
        assert "similarity" not in payload["changes"][0]
        assert "amendedClause" not in payload["changes"][0]
