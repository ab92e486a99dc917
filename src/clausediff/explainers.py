"""Explainer backends for clause changes.

Provides the external-explainer interface (rule-based, Anthropic, local
Ollama) and the batch runner that applies it to a comparison.

Design:
- ``Explainer`` is the abstract interface; ``explain()`` may raise
  ``ExplainerError`` (or anything else) on failure
- ``RuleBasedExplainer`` is the default; it makes no network calls and never fails
- ``explain_changes`` runs LLM calls in bounded concurrent batches; a failure
  or timeout on one change degrades that change to the rule-based result
  and never aborts the batch
"""
from __future__ import annotations

import logging
import threading
import time
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

import orjson

from clausediff.config import Settings
from clausediff.explanations import (
    SYSTEM_PROMPT,
    build_explanation_prompt,
    explain_fallback,
    merge_explanation,
)
from clausediff.models import ClauseComparison, ExplainedChange, ExplainerError

log = logging.getLogger(__name__)


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse the JSON object in an LLM reply.

    Accepts a bare object, an object wrapped in a markdown code fence, or
    an object surrounded by prose (first ``{`` to last ``}``).

    Raises:
        ExplainerError: no JSON object could be decoded.
    """
    text = raw.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
        text = text.strip()
    candidates = [text]
    lo, hi = text.find("{"), text.rfind("}")
    if 0 <= lo < hi:
        candidates.append(text[lo:hi + 1])
    for candidate in candidates:
        try:
            parsed = orjson.loads(candidate)
        except orjson.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ExplainerError(f"explainer returned non-JSON output: {raw[:120]!r}")


# ---------------------------------------------------------------------------
# Explainer interface
# ---------------------------------------------------------------------------

class Explainer(ABC):
    """Abstract interface for turning a ClauseComparison into prose."""

    name: str = "explainer"

    @abstractmethod
    def explain(self, change: ClauseComparison) -> ExplainedChange:
        """Explain one change.

        Raises
        ------
        ExplainerError
            The backend could not produce a usable answer.
        """


class RuleBasedExplainer(Explainer):
    """Deterministic explainer with no external dependency."""

    name = "rule_based"

    def explain(self, change: ClauseComparison) -> ExplainedChange:
        return explain_fallback(change)


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------

class AnthropicExplainer(Explainer):
    """Explainer backed by the Anthropic Messages API.

    Parameters
    ----------
    model:
        Model identifier.
    api_key:
        API key; empty means the SDK reads ``ANTHROPIC_API_KEY`` itself.
    max_tokens:
        Maximum tokens in the reply.
    timeout:
        Per-request timeout in seconds, passed to the SDK client.
    """

    name = "anthropic"

    def __init__(
        self,
        *,
        model: str = "claude-3-5-haiku-latest",
        api_key: str = "",
        max_tokens: int = 400,
        timeout: float = 8.0,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client: Any = None
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        with self._lock:
            if self._client is None:
                try:
                    import anthropic  # type: ignore[import-not-found]
                except ImportError as exc:
                    raise ExplainerError(f"anthropic SDK unavailable: {exc}") from exc
                self._client = anthropic.Anthropic(
                    api_key=self._api_key or None,
                    timeout=self._timeout,
                    max_retries=0,
                )
            return self._client

    def explain(self, change: ClauseComparison) -> ExplainedChange:
        client = self._get_client()
        try:
            response = client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=0.3,
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": build_explanation_prompt(change)},
                ],
            )
        except Exception as exc:
            raise ExplainerError(f"anthropic request failed: {exc}") from exc

        text_parts: list[str] = []
        for block in getattr(response, "content", []):
            txt = getattr(block, "text", "")
            if isinstance(txt, str):
                text_parts.append(txt)
        payload = parse_json_object("\n".join(text_parts))
        return merge_explanation(change, payload, source=self.name)


# ---------------------------------------------------------------------------
# Ollama (local model, no API key)
# ---------------------------------------------------------------------------

class OllamaExplainer(Explainer):
    """Explainer backed by a local Ollama server's ``/api/chat`` endpoint."""

    name = "ollama"

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        timeout: float = 8.0,
    ) -> None:
        self._url = base_url.rstrip("/") + "/api/chat"
        self._model = model
        self._timeout = timeout

    def explain(self, change: ClauseComparison) -> ExplainedChange:
        body = orjson.dumps({
            "model": self._model,
            "stream": False,
            "format": "json",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_explanation_prompt(change)},
            ],
        })
        req = urllib.request.Request(
            self._url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise ExplainerError(f"ollama request failed: {exc}") from exc

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise ExplainerError("ollama returned a non-JSON envelope") from exc
        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise ExplainerError("ollama reply has no message content")
        return merge_explanation(change, parse_json_object(content), source=self.name)


def build_explainer(settings: Settings) -> Explainer:
    """Instantiate the explainer named by ``settings.explainer``."""
    if settings.explainer == "anthropic":
        return AnthropicExplainer(
            model=settings.anthropic_model,
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout,
        )
    if settings.explainer == "ollama":
        return OllamaExplainer(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout=settings.llm_timeout,
        )
    return RuleBasedExplainer()


# ---------------------------------------------------------------------------
# Batch runner
# ---------------------------------------------------------------------------

def _result_or_fallback(
    change: ClauseComparison,
    future: Future[ExplainedChange],
    deadline: float,
    backend: str,
) -> ExplainedChange:
    try:
        return future.result(timeout=max(0.0, deadline - time.monotonic()))
    except FuturesTimeoutError:
        log.warning("%s explainer timed out on %s, using rule-based fallback",
                    backend, change.id)
    except Exception as exc:
        log.warning("%s explainer failed on %s (%s), using rule-based fallback",
                    backend, change.id, exc)
    return explain_fallback(change)


def explain_changes(
    changes: Sequence[ClauseComparison],
    explainer: Explainer | None = None,
    *,
    batch_size: int = 5,
    timeout: float = 8.0,
) -> list[ExplainedChange]:
    """Explain every non-unchanged comparison, preserving input order.

    Calls run concurrently ``batch_size`` at a time; each batch waits at
    most ``timeout`` seconds. Any change whose call fails or times out gets
    the rule-based explanation instead.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    relevant = [c for c in changes if c.change_type != "unchanged"]
    if explainer is None or isinstance(explainer, RuleBasedExplainer):
        return [explain_fallback(c) for c in relevant]

    log.debug("Explaining %d changes with %s (batch size %d)",
              len(relevant), explainer.name, batch_size)
    explained: list[ExplainedChange] = []
    for start in range(0, len(relevant), batch_size):
        batch = relevant[start:start + batch_size]
        pool = ThreadPoolExecutor(max_workers=len(batch))
        try:
            futures = [pool.submit(explainer.explain, c) for c in batch]
            deadline = time.monotonic() + timeout
            for change, future in zip(batch, futures, strict=True):
                explained.append(
                    _result_or_fallback(change, future, deadline, explainer.name)
                )
        finally:
            # Hung calls are abandoned rather than joined.
            pool.shutdown(wait=False, cancel_futures=True)
    return explained
