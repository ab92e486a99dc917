"""Executive summary and risk / beneficiary tallies over explained changes."""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from clausediff.models import (
    BeneficiaryBreakdown,
    ChangeSummary,
    ComparisonResults,
    DocumentComparison,
    ExplainedChange,
    RiskBreakdown,
)

# Tags counted as "economic terms" in the executive summary. Narrower than
# classifier.ECONOMIC_TYPES: Maturity is not counted here.
SUMMARY_ECONOMIC_TYPES: frozenset[str] = frozenset({
    "Interest Rate", "Payment Terms", "Principal", "Fees",
})


def _plural(n: int, one: str, many: str) -> str:
    return one if n == 1 else many


def risk_breakdown(changes: Sequence[ExplainedChange]) -> RiskBreakdown:
    counts = Counter(c.risk_level for c in changes)
    return RiskBreakdown(
        high=counts["High"], medium=counts["Medium"], low=counts["Low"],
    )


def beneficiary_breakdown(changes: Sequence[ExplainedChange]) -> BeneficiaryBreakdown:
    counts = Counter(c.beneficiary for c in changes)
    return BeneficiaryBreakdown(
        borrower=counts["Borrower"],
        lender=counts["Lender"],
        neutral=counts["Neutral"],
    )


def summarize(changes: Sequence[ExplainedChange], counts: ChangeSummary) -> str:
    """One-paragraph executive summary. Same input, same string."""
    risks = risk_breakdown(changes)
    parties = beneficiary_breakdown(changes)

    parts = [
        f"This amendment introduces {counts.material_changes} material "
        "changes to the loan agreement."
    ]
    if risks.high > 0:
        parts.append(
            f"{risks.high} {_plural(risks.high, 'change is', 'changes are')} "
            "classified as high-risk and require careful review."
        )

    if parties.borrower > parties.lender:
        parts.append("The amendment appears to favor the borrower with more flexible terms.")
    elif parties.lender > parties.borrower:
        parts.append("The amendment strengthens lender protections and tightens covenants.")
    else:
        parts.append("The changes appear balanced between borrower and lender interests.")

    economic = sum(
        1 for c in changes
        if any(t in SUMMARY_ECONOMIC_TYPES for t in c.clause_types)
    )
    if economic > 0:
        parts.append(
            f"Note: {economic} {_plural(economic, 'change affects', 'changes affect')} "
            "economic terms."
        )
    return " ".join(parts)


def build_results(
    comparison: DocumentComparison,
    explained: Sequence[ExplainedChange],
) -> ComparisonResults:
    """Assemble the caller-facing result; every tally derives from ``explained``."""
    changes = tuple(explained)
    return ComparisonResults(
        changes=changes,
        summary=comparison.summary,
        executive_summary=summarize(changes, comparison.summary),
        risk_breakdown=risk_breakdown(changes),
        beneficiary_breakdown=beneficiary_breakdown(changes),
    )
