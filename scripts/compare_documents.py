#!/usr/bin/env python3
"""Compare an original loan agreement against its amended version.

Segments both documents into clauses, aligns them, explains every change
(rule-based by default, optionally via an LLM backend with rule-based
fallback) and prints the JSON result to stdout.

Usage:
    python3 scripts/compare_documents.py \
      --original data/agreement_v1.txt --amended data/agreement_v2.txt

    # Explain changes with a local Ollama model, write to a file
    python3 scripts/compare_documents.py \
      --original v1.txt --amended v2.txt --explainer ollama --output diff.json

Exit status is 1 when either document is missing or unreadable.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from clausediff.config import EXPLAINER_BACKENDS, Settings
from clausediff.explainers import build_explainer
from clausediff.io_utils import dumps_json, load_document_text, save_json
from clausediff.models import DocumentInputError
from clausediff.pipeline import compare_texts

log = logging.getLogger("compare_documents")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Clause-by-clause diff of two versions of a loan agreement."
    )
    parser.add_argument("--original", required=True, type=Path, help="Original document (.txt)")
    parser.add_argument("--amended", required=True, type=Path, help="Amended document (.txt)")
    parser.add_argument(
        "--explainer",
        choices=EXPLAINER_BACKENDS,
        default=None,
        help="Explanation backend (default: $CLAUSEDIFF_EXPLAINER or 'rule').",
    )
    parser.add_argument("--model", default=None, help="LLM model id for the chosen backend.")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds per explainer batch.")
    parser.add_argument("--batch-size", type=int, default=None, help="Concurrent explainer calls.")
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Optional JSON output path (default: stdout only).",
    )
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON.")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env().with_overrides(
        explainer=args.explainer,
        llm_timeout=args.timeout,
        batch_size=args.batch_size,
    )
    if args.model is not None:
        if settings.explainer == "anthropic":
            settings = settings.with_overrides(anthropic_model=args.model)
        elif settings.explainer == "ollama":
            settings = settings.with_overrides(ollama_model=args.model)
    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)

    try:
        settings = _settings_from_args(args)
    except ValueError as exc:
        log.error("Invalid configuration: %s", exc)
        return 1

    try:
        original_text = load_document_text(args.original)
        amended_text = load_document_text(args.amended)
    except (DocumentInputError, OSError) as exc:
        log.error("Cannot read documents: %s", exc)
        return 1

    explainer = build_explainer(settings)
    log.info("Comparing %s -> %s (explainer: %s)", args.original, args.amended, explainer.name)
    try:
        results = compare_texts(
            original_text,
            amended_text,
            explainer=explainer,
            batch_size=settings.batch_size,
            timeout=settings.llm_timeout,
        )
    except DocumentInputError as exc:
        log.error("Invalid documents: %s", exc)
        return 1

    pretty = not args.compact
    sys.stdout.buffer.write(dumps_json(results, pretty=pretty))
    sys.stdout.buffer.write(b"\n")
    if args.output is not None:
        save_json(results.as_dict(), args.output, pretty=pretty)
        log.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
