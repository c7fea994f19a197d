"""
llm.py
------
Text-generation clients used by the narrative adapter.

Every client exposes ``generate(system_prompt, user_prompt) -> str`` and may
raise on any provider problem; the narrative adapter owns timeouts and the
fallback.  Provider identity and credentials come from config / environment.
"""

from __future__ import annotations

from typing import Protocol

from google import genai
from google.genai import types as genai_types

from racetrip import config


class TextGenerator(Protocol):
    model_id: str

    def generate(self, system_prompt: str, user_prompt: str) -> str: ...


# ── Stub client (no API calls) ───────────────────────────────────────────────
class StubTextGenerator:
    """No-op client used when USE_STUB_LLM=true or no API key is configured.
    Returns a fixed non-JSON string, so callers fall back to their templates.
    """

    model_id = "stub"

    def generate(self, system_prompt: str, user_prompt: str) -> str:  # noqa: ARG002
        return "[stub response]"


# ── Gemini client ────────────────────────────────────────────────────────────
class GeminiTextGenerator:
    def __init__(self, model: str | None = None, api_key: str | None = None):
        self._model = model or config.LLM_MODEL_NAME
        self._client = genai.Client(
            api_key=api_key or config.GEMINI_API_KEY,
            http_options=genai_types.HttpOptions(
                timeout=int(config.LLM_HTTP_TIMEOUT_SECONDS * 1000),  # milliseconds
            ),
        )

    @property
    def model_id(self) -> str:
        return f"{config.LLM_PROVIDER}:{self._model}"

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        response = self._client.models.generate_content(
            model=self._model,
            contents=user_prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=0.7,
            ),
        )
        if not response or not response.text:
            raise RuntimeError("Empty Gemini response")
        return response.text.strip()


def get_text_generator() -> TextGenerator:
    """Return the configured client; stub unless a real provider is enabled."""
    if config.USE_STUB_LLM or not config.GEMINI_API_KEY:
        return StubTextGenerator()
    if config.LLM_PROVIDER != "google":
        raise ValueError(f"Unknown LLM_PROVIDER: {config.LLM_PROVIDER!r}. Use 'google'.")
    return GeminiTextGenerator()
