"""I/O utilities: JSON output and text document loading.

JSON goes through orjson; results are converted with ``as_dict()`` first so
the written shape is the external camelCase contract.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from clausediff.models import ComparisonResults, DocumentInputError

_PDF_SUFFIXES = frozenset({".pdf"})


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    """Serialize to JSON bytes (sorted keys, 2-space indent when pretty)."""
    if isinstance(obj, ComparisonResults):
        obj = obj.as_dict()
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def load_document_text(path: Path) -> str:
    """Read a plain-text document as UTF-8.

    Raises:
        DocumentInputError: the file is a PDF (its text must be extracted
            upstream) or is not valid UTF-8.
        OSError: the file cannot be read.
    """
    if path.suffix.lower() in _PDF_SUFFIXES:
        raise DocumentInputError(
            f"{path}: PDF input needs pre-extracted text; pass a .txt file"
        )
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentInputError(f"{path}: not valid UTF-8 text ({exc})") from exc
