from __future__ import annotations

from typing import Any, Optional

from quizsolver.providers import register
from quizsolver.providers.base import MAX_TOKENS, SYSTEM_PROMPT, TEMPERATURE, ProviderSpec, dig

MODEL = "gemini-2.0-flash"


def _build_payload(question: str) -> dict:
    return {
        "contents": [{"parts": [{"text": f"{SYSTEM_PROMPT}\n\nUser: {question}"}]}],
        "generationConfig": {
            "maxOutputTokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        },
    }


def _extract_text(data: Any) -> Optional[str]:
    return dig(data, "candidates", 0, "content", "parts", 0, "text")


GEMINI = register(
    ProviderSpec(
        key="gemini",
        name="Gemini",
        endpoint=f"https://generativelanguage.googleapis.com/v1beta/models/{MODEL}:generateContent",
        build_payload=_build_payload,
        extract_text=_extract_text,
        auth="query",
    )
)
