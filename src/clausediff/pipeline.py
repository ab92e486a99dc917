"""End-to-end comparison: two document texts in, ComparisonResults out.

    raw text -> segment -> align (classify + score) -> explain -> summarize

Input validation happens before any segmentation or alignment work, so a
bad document pair fails fast with ``DocumentInputError``.
"""
from __future__ import annotations

import logging

from clausediff.aligner import compare_documents
from clausediff.explainers import Explainer, explain_changes
from clausediff.models import (
    ComparisonResults,
    DocumentInputError,
    DocumentMetadata,
    ParsedDocument,
)
from clausediff.segmenter import CONTENT_TYPES, parse_document
from clausediff.summary import build_results

log = logging.getLogger(__name__)


def _check_input(label: str, text: object, content_type: str) -> None:
    if text is None:
        raise DocumentInputError(f"Both original and amended documents are required ({label} missing)")
    if not isinstance(text, str):
        raise DocumentInputError(
            f"{label} document text must be a string, got {type(text).__name__}"
        )
    if content_type not in CONTENT_TYPES:
        raise DocumentInputError(
            f"{label} document has unsupported content type {content_type!r}"
        )


def compare_parsed(
    original: ParsedDocument,
    amended: ParsedDocument,
    *,
    explainer: Explainer | None = None,
    batch_size: int = 5,
    timeout: float = 8.0,
) -> ComparisonResults:
    comparison = compare_documents(original, amended)
    s = comparison.summary
    log.info(
        "Aligned %d original / %d amended clauses: %d added, %d removed, "
        "%d modified, %d unchanged",
        len(original.clauses), len(amended.clauses),
        s.added, s.removed, s.modified, s.unchanged,
    )
    explained = explain_changes(
        comparison.changes, explainer, batch_size=batch_size, timeout=timeout,
    )
    return build_results(comparison, explained)


def compare_texts(
    original_text: str,
    amended_text: str,
    *,
    original_content_type: str = "text",
    amended_content_type: str = "text",
    original_metadata: DocumentMetadata | None = None,
    amended_metadata: DocumentMetadata | None = None,
    explainer: Explainer | None = None,
    batch_size: int = 5,
    timeout: float = 8.0,
) -> ComparisonResults:
    """Compare an original document against its amended version.

    Args:
        original_text: Decoded text of the original agreement.
        amended_text: Decoded text of the amended agreement.
        original_content_type: ``"text"`` or ``"pdf"`` (text pre-extracted).
        amended_content_type: Same, for the amended document.
        original_metadata: Extractor metadata for the original, if any.
        amended_metadata: Extractor metadata for the amended, if any.
        explainer: External explainer; None means rule-based only.
        batch_size: Concurrent explainer calls.
        timeout: Seconds each explainer batch may take.

    Raises:
        DocumentInputError: a document is missing, not text, or has an
            unknown content type.
    """
    _check_input("original", original_text, original_content_type)
    _check_input("amended", amended_text, amended_content_type)

    original = parse_document(original_text, original_content_type, original_metadata)
    amended = parse_document(amended_text, amended_content_type, amended_metadata)
    return compare_parsed(
        original, amended,
        explainer=explainer, batch_size=batch_size, timeout=timeout,
    )
