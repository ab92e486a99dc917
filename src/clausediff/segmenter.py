"""Clause segmenter for plain-text loan agreements.

Splits raw document text into an ordered sequence of ``Clause`` records:
- Heading detection ("Section 4.2 Interest", "Article 7: Default", "9. Fees")
- Title extraction (rest of the heading line)
- Character span boundaries (global offsets in the source text)

Single pass:
    1. Find every heading match with one case-insensitive regex.
    2. Each match opens a clause that runs to the next match (or EOF).
    3. No match at all -> one "Full Document" clause over the whole text.

The segmenter is order-based, not number-based: clauses are emitted in
document order and duplicated or decreasing labels are kept as-is.
"""
from __future__ import annotations

import re

from clausediff.models import (
    Clause,
    DocumentInputError,
    DocumentMetadata,
    ParsedDocument,
)

FULL_DOCUMENT_TITLE = "Full Document"
CONTENT_TYPES: frozenset[str] = frozenset({"text", "pdf"})


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Heading: optional keyword, dotted numeric label, separator, title to EOL.
#   "Section 4.2 Interest Rate", "ARTICLE 7: Events of Default", "9. Fees"
# The leading (?:^|\n) is not MULTILINE: ^ only anchors the first heading at
# offset 0, later ones must follow a newline (which the match then starts on).
_HEADING_RE = re.compile(
    r"(?:^|\n)(?:Section|Article|Clause)?\s*"
    r"(\d+(?:\.\d+)*)"
    r"[.:\s]+"
    r"([^\n]+)",
    re.IGNORECASE,
)


def _make_clause(
    text: str, idx: int, match: re.Match[str], end: int,
) -> Clause:
    start = match.start()
    return Clause(
        id=f"clause-{idx}",
        title=match.group(2).strip(),
        content=text[start:end].strip(),
        start_index=start,
        end_index=end,
        section_number=match.group(1),
    )


def segment(text: str) -> list[Clause]:
    """Split document text into clauses in document order.

    Clause ``i`` spans from its own heading match to the start of clause
    ``i + 1`` (or the end of the text), so spans are contiguous and cover
    everything from the first heading on. Text before the first heading is
    dropped.

    Args:
        text: Decoded document text.

    Returns:
        At least one Clause. If no heading is found, a single clause titled
        ``"Full Document"`` holding the whole trimmed text.
    """
    matches = list(_HEADING_RE.finditer(text))
    if not matches:
        return [
            Clause(
                id="clause-0",
                title=FULL_DOCUMENT_TITLE,
                content=text.strip(),
                start_index=0,
                end_index=len(text),
            )
        ]

    clauses: list[Clause] = []
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        clauses.append(_make_clause(text, i, m, end))
    return clauses


def parse_document(
    text: str,
    content_type: str = "text",
    metadata: DocumentMetadata | None = None,
) -> ParsedDocument:
    """Build a ParsedDocument from already-decoded text.

    PDF text is expected to have been extracted by the caller; ``metadata``
    carries whatever title / page count the extractor reported.

    Raises:
        DocumentInputError: ``text`` is not a string or ``content_type`` is
            not one of ``"text"`` / ``"pdf"``.
    """
    if not isinstance(text, str):
        raise DocumentInputError(
            f"Document text must be a string, got {type(text).__name__}"
        )
    if content_type not in CONTENT_TYPES:
        raise DocumentInputError(
            f"Unsupported content type {content_type!r} "
            f"(expected one of {sorted(CONTENT_TYPES)})"
        )
    return ParsedDocument(
        text=text,
        clauses=tuple(segment(text)),
        metadata=metadata or DocumentMetadata(),
    )
