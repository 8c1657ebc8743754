from __future__ import annotations

from typing import Any, Optional

from quizsolver.providers import register
from quizsolver.providers.base import MAX_TOKENS, TEMPERATURE, ProviderSpec

MODEL = "microsoft/DialoGPT-large"


def _build_payload(question: str) -> dict:
    return {
        "inputs": question,
        "parameters": {
            "max_length": MAX_TOKENS,
            "temperature": TEMPERATURE,
            "do_sample": True,
        },
    }


def _extract_text(data: Any) -> Optional[str]:
    # The inference API answers with either a list of generations or a single object.
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None
    return data.get("generated_text") or data.get("text")


HUGGINGFACE = register(
    ProviderSpec(
        key="huggingface",
        name="HuggingFace",
        endpoint=f"https://api-inference.huggingface.co/models/{MODEL}",
        build_payload=_build_payload,
        extract_text=_extract_text,
    )
)
