"""Clause aligner — greedy cross-document clause matching.

For each original clause, in document order, the best-scoring amended clause
not yet claimed by an earlier original clause is taken:

    score > 0.95          -> unchanged
    0.6 < score <= 0.95   -> modified
    score <= 0.6 / none   -> removed

Amended clauses never claimed are then emitted as added, in amended order.
The matching is greedy and order-dependent, not a globally optimal
assignment: an early original clause may claim the amended clause a later
one would have matched better.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from typing import TypeAlias

from clausediff.classifier import classify
from clausediff.models import (
    ChangeSummary,
    ChangeType,
    Clause,
    ClauseComparison,
    DocumentComparison,
    ParsedDocument,
)
from clausediff.similarity import similarity

MATCH_THRESHOLD = 0.6
UNCHANGED_THRESHOLD = 0.95

Scorer: TypeAlias = Callable[[Clause, Clause], float]


def _best_candidate(
    clause: Clause,
    amended: Sequence[Clause],
    claimed: set[int],
    scorer: Scorer,
) -> tuple[int, float] | None:
    """Index and score of the best unclaimed amended clause (first wins ties)."""
    best: tuple[int, float] | None = None
    for j, candidate in enumerate(amended):
        if j in claimed:
            continue
        score = scorer(clause, candidate)
        if best is None or score > best[1]:
            best = (j, score)
    return best


def align(
    original: Sequence[Clause],
    amended: Sequence[Clause],
    *,
    scorer: Scorer = similarity,
) -> list[ClauseComparison]:
    """Align two clause sequences and classify every clause.

    Output order: one entry per original clause (removed / modified /
    unchanged) in original order, then the added clauses in amended order.
    Ids are ``change-<n>`` over that order.

    Every original clause appears exactly once as ``original_clause`` and
    every amended clause exactly once as ``amended_clause``.
    """
    changes: list[ClauseComparison] = []
    claimed: set[int] = set()

    for orig in original:
        best = _best_candidate(orig, amended, claimed, scorer)
        change_id = f"change-{len(changes)}"
        if best is not None and best[1] > MATCH_THRESHOLD:
            j, score = best
            claimed.add(j)
            change_type: ChangeType = (
                "unchanged" if score > UNCHANGED_THRESHOLD else "modified"
            )
            changes.append(ClauseComparison(
                id=change_id,
                change_type=change_type,
                clause_types=classify(amended[j]),
                original_clause=orig,
                amended_clause=amended[j],
                similarity=score,
            ))
        else:
            changes.append(ClauseComparison(
                id=change_id,
                change_type="removed",
                clause_types=classify(orig),
                original_clause=orig,
            ))

    for j, added in enumerate(amended):
        if j in claimed:
            continue
        changes.append(ClauseComparison(
            id=f"change-{len(changes)}",
            change_type="added",
            clause_types=classify(added),
            amended_clause=added,
        ))

    return changes


def summarize_changes(changes: Sequence[ClauseComparison]) -> ChangeSummary:
    """Count comparisons per change type in a single pass."""
    counts = Counter(c.change_type for c in changes)
    return ChangeSummary(
        total_clauses=len(changes),
        added=counts["added"],
        removed=counts["removed"],
        modified=counts["modified"],
        unchanged=counts["unchanged"],
    )


def compare_documents(
    original: ParsedDocument, amended: ParsedDocument,
) -> DocumentComparison:
    changes = align(original.clauses, amended.clauses)
    return DocumentComparison(
        changes=tuple(changes),
        summary=summarize_changes(changes),
    )
