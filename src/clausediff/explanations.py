"""Rule-based change explanations and LLM prompt/response handling.

``explain_fallback`` derives risk level, beneficiary, explanation and impact
sentence purely from the change type, the similarity score and the clause
category tags. It is the answer whenever no external explainer is
configured or the external one fails.

Policy:
    added     risk High if risk-related tag else Medium; Lender if risk-related
    removed   risk High if risk-related tag else Medium; Borrower if risk-related
    modified  risk by similarity (<0.70 High, <0.85 Medium, else Low); Neutral

    Overrides (after the table): Interest Rate tag -> High + borrowing-cost
    impact; otherwise Default tag -> High + default-trigger impact.

``merge_explanation`` applies an LLM payload field by field on top of the
rule-based result, so a partially valid reply still contributes what it
got right.
"""
from __future__ import annotations

from typing import Any

from clausediff.classifier import is_economic, is_risk_related
from clausediff.models import (
    BENEFICIARIES,
    RISK_LEVELS,
    Beneficiary,
    ClauseComparison,
    ExplainedChange,
    RiskLevel,
)

HIGH_RISK_SIMILARITY = 0.7
MEDIUM_RISK_SIMILARITY = 0.85

# Truncation applied to clause content in LLM prompts.
SINGLE_SIDE_PROMPT_CHARS = 500
PER_SIDE_PROMPT_CHARS = 300

SYSTEM_PROMPT = (
    "You are a financial analyst explaining loan agreement changes to "
    "banking professionals. Be concise, clear, and focus on economic and "
    "risk implications. Respond in JSON format."
)

# impact sentences: (economic, non-economic)
_IMPACT: dict[str, tuple[str, str]] = {
    "added": (
        "This may affect the economic terms of the loan.",
        "This adds new obligations or terms to the agreement.",
    ),
    "removed": (
        "This changes the economic structure of the loan.",
        "This removes obligations or terms from the agreement.",
    ),
    "modified": (
        "This modifies the economic terms of the loan.",
        "This alters existing obligations or terms.",
    ),
    "unchanged": (
        "No substantive change.",
        "No substantive change.",
    ),
}

INTEREST_RATE_IMPACT = "Direct impact on borrowing costs."
DEFAULT_IMPACT = "Affects default triggers and remedies."


def _clause_title(change: ClauseComparison, side: str) -> str:
    clause = change.amended_clause if side == "amended" else change.original_clause
    return clause.title if clause is not None else ""


def _risk_from_similarity(score: float | None) -> RiskLevel:
    sim = HIGH_RISK_SIMILARITY if score is None else score
    if sim < HIGH_RISK_SIMILARITY:
        return "High"
    if sim < MEDIUM_RISK_SIMILARITY:
        return "Medium"
    return "Low"


def explain_fallback(change: ClauseComparison) -> ExplainedChange:
    """Deterministic explanation for one comparison. Total: never raises."""
    tags = change.clause_types
    economic = is_economic(tags)
    risky = is_risk_related(tags)

    risk: RiskLevel
    beneficiary: Beneficiary
    if change.change_type == "added":
        explanation = (
            f'A new clause "{_clause_title(change, "amended")}" has been '
            "added to the agreement."
        )
        risk = "High" if risky else "Medium"
        beneficiary = "Lender" if risky else "Neutral"
    elif change.change_type == "removed":
        explanation = (
            f'The clause "{_clause_title(change, "original")}" has been '
            "removed from the agreement."
        )
        risk = "High" if risky else "Medium"
        beneficiary = "Borrower" if risky else "Neutral"
    elif change.change_type == "modified":
        explanation = (
            f'The clause "{_clause_title(change, "amended")}" has been '
            "modified with changes to its terms."
        )
        risk = _risk_from_similarity(change.similarity)
        beneficiary = "Neutral"
    else:
        explanation = f'The clause "{change.title}" is unchanged.'
        risk = "Low"
        beneficiary = "Neutral"

    economic_impact, other_impact = _IMPACT[change.change_type]
    impact = economic_impact if economic else other_impact

    if "Interest Rate" in tags:
        risk = "High"
        impact = INTEREST_RATE_IMPACT
    elif "Default" in tags:
        risk = "High"
        impact = DEFAULT_IMPACT

    return ExplainedChange(
        comparison=change,
        explanation=explanation,
        risk_level=risk,
        beneficiary=beneficiary,
        impact_summary=impact,
    )


# ---------------------------------------------------------------------------
# LLM prompt / response
# ---------------------------------------------------------------------------


def _clause_block(label: str, change: ClauseComparison, side: str, limit: int) -> str:
    clause = change.amended_clause if side == "amended" else change.original_clause
    if clause is None:
        return ""
    return f"{label}:\n{clause.title}\n{clause.content[:limit]}\n\n"


def build_explanation_prompt(change: ClauseComparison) -> str:
    """User prompt describing one change for an external explainer."""
    prompt = "Analyze this loan agreement change:\n\n"
    prompt += f"Change Type: {change.change_type}\n"
    prompt += f"Clause Categories: {', '.join(change.clause_types)}\n\n"

    if change.change_type == "added":
        prompt += _clause_block("NEW CLAUSE", change, "amended", SINGLE_SIDE_PROMPT_CHARS)
    elif change.change_type == "removed":
        prompt += _clause_block("REMOVED CLAUSE", change, "original", SINGLE_SIDE_PROMPT_CHARS)
    elif change.change_type == "modified":
        prompt += _clause_block("ORIGINAL", change, "original", PER_SIDE_PROMPT_CHARS)
        prompt += _clause_block("AMENDED", change, "amended", PER_SIDE_PROMPT_CHARS)

    prompt += "Provide a JSON response with:\n"
    prompt += "- explanation: 2-3 sentences explaining the change in plain English\n"
    prompt += "- impactSummary: One sentence on commercial impact\n"
    prompt += '- riskLevel: "Low", "Medium", or "High"\n'
    prompt += '- beneficiary: "Borrower", "Lender", or "Neutral"\n'
    return prompt


def _text_field(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _enum_field(payload: dict[str, Any], key: str, allowed: tuple[str, ...]) -> str | None:
    value = _text_field(payload, key)
    if value is None:
        return None
    by_lower = {a.lower(): a for a in allowed}
    return by_lower.get(value.lower())


def merge_explanation(
    change: ClauseComparison,
    payload: Any,
    *,
    source: str,
) -> ExplainedChange:
    """Overlay a (possibly partial or malformed) LLM payload on the fallback.

    Each of ``explanation``, ``impactSummary``, ``riskLevel`` and
    ``beneficiary`` is taken from ``payload`` only when present and valid;
    anything else keeps the rule-based value. A non-dict payload yields the
    plain fallback.
    """
    fallback = explain_fallback(change)
    if not isinstance(payload, dict):
        return fallback

    explanation = _text_field(payload, "explanation")
    impact = _text_field(payload, "impactSummary")
    risk = _enum_field(payload, "riskLevel", RISK_LEVELS)
    beneficiary = _enum_field(payload, "beneficiary", BENEFICIARIES)

    if explanation is None and impact is None and risk is None and beneficiary is None:
        return fallback

    return ExplainedChange(
        comparison=change,
        explanation=explanation or fallback.explanation,
        risk_level=risk or fallback.risk_level,  # type: ignore[arg-type]
        beneficiary=beneficiary or fallback.beneficiary,  # type: ignore[arg-type]
        impact_summary=impact or fallback.impact_summary,
        source=source,
    )
