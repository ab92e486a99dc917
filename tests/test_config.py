"""Tests for clausediff.config."""
from __future__ import annotations

import pytest

from clausediff.config import EXPLAINER_BACKENDS, Settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings.from_env({})
        assert s == Settings()
        assert s.explainer == "rule"
        assert s.llm_timeout == 8.0
        assert s.batch_size == 5
        assert s.ollama_base_url == "http://localhost:11434"

    def test_from_env(self) -> None:
        s = Settings.from_env({
            "CLAUSEDIFF_EXPLAINER": " Ollama ",
            "OLLAMA_BASE_URL": "http://gpu-box:11434",
            "OLLAMA_MODEL": "mistral",
            "CLAUSEDIFF_LLM_TIMEOUT": "2.5",
            "CLAUSEDIFF_BATCH_SIZE": "3",
            "ANTHROPIC_API_KEY": "sk-test",
        })
        assert s.explainer == "ollama"
        assert s.ollama_base_url == "http://gpu-box:11434"
        assert s.ollama_model == "mistral"
        assert s.llm_timeout == 2.5
        assert s.batch_size == 3
        assert s.anthropic_api_key == "sk-test"

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLAUSEDIFF_EXPLAINER", "anthropic")
        monkeypatch.setenv("CLAUSEDIFF_ANTHROPIC_MODEL", "claude-test")
        s = Settings.from_env()
        assert s.explainer == "anthropic"
        assert s.anthropic_model == "claude-test"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown explainer"):
            Settings.from_env({"CLAUSEDIFF_EXPLAINER": "gpt"})

    @pytest.mark.parametrize(
        "env",
        [
            {"CLAUSEDIFF_LLM_TIMEOUT": "soon"},
            {"CLAUSEDIFF_LLM_TIMEOUT": "0"},
            {"CLAUSEDIFF_BATCH_SIZE": "0"},
            {"CLAUSEDIFF_BATCH_SIZE": "many"},
        ],
    )
    def test_invalid_numbers(self, env: dict[str, str]) -> None:
        with pytest.raises(ValueError):
            Settings.from_env(env)

    def test_with_overrides_skips_none(self) -> None:
        s = Settings().with_overrides(explainer="ollama", batch_size=None, llm_timeout=1.0)
        assert s.explainer == "ollama"
        assert s.batch_size == 5
        assert s.llm_timeout == 1.0

    def test_overrides_validated(self) -> None:
        with pytest.raises(ValueError):
            Settings().with_overrides(batch_size=-1)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Settings().explainer = "ollama"  # type: ignore[misc]

    def test_backends(self) -> None:
        assert EXPLAINER_BACKENDS == ("rule", "anthropic", "ollama")
