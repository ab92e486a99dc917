"""Runtime settings read from the environment.

    CLAUSEDIFF_EXPLAINER        rule | anthropic | ollama   (default: rule)
    ANTHROPIC_API_KEY           passed to the Anthropic SDK
    CLAUSEDIFF_ANTHROPIC_MODEL  (default: claude-3-5-haiku-latest)
    OLLAMA_BASE_URL             (default: http://localhost:11434)
    OLLAMA_MODEL                (default: llama3.1)
    CLAUSEDIFF_LLM_TIMEOUT      seconds per explainer call (default: 8.0)
    CLAUSEDIFF_BATCH_SIZE       concurrent explainer calls (default: 5)
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

EXPLAINER_BACKENDS: tuple[str, ...] = ("rule", "anthropic", "ollama")


@dataclass(frozen=True, slots=True)
class Settings:
    explainer: str = "rule"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    llm_timeout: float = 8.0
    batch_size: int = 5

    def __post_init__(self) -> None:
        if self.explainer not in EXPLAINER_BACKENDS:
            raise ValueError(
                f"Unknown explainer {self.explainer!r} "
                f"(expected one of {', '.join(EXPLAINER_BACKENDS)})"
            )
        if self.llm_timeout <= 0:
            raise ValueError(f"llm_timeout must be positive, got {self.llm_timeout}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            explainer=env.get("CLAUSEDIFF_EXPLAINER", defaults.explainer).strip().lower(),
            anthropic_api_key=env.get("ANTHROPIC_API_KEY", ""),
            anthropic_model=env.get("CLAUSEDIFF_ANTHROPIC_MODEL", defaults.anthropic_model),
            ollama_base_url=env.get("OLLAMA_BASE_URL", defaults.ollama_base_url),
            ollama_model=env.get("OLLAMA_MODEL", defaults.ollama_model),
            llm_timeout=float(env.get("CLAUSEDIFF_LLM_TIMEOUT", defaults.llm_timeout)),
            batch_size=int(env.get("CLAUSEDIFF_BATCH_SIZE", defaults.batch_size)),
        )

    def with_overrides(self, **overrides: Any) -> Settings:
        """Copy with every non-None override applied (CLI flags)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
