from __future__ import annotations

from typing import Any, Optional

from quizsolver.providers import register
from quizsolver.providers.base import ProviderSpec

DEFAULT_ENDPOINT = "https://apifreellm.com/api/chat"

# Response shapes seen from this endpoint, tried in order.
_TEXT_KEYS = ("message", "response", "output")


def _build_payload(question: str) -> dict:
    return {"message": question}


def _extract_text(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    for key in _TEXT_KEYS:
        value = data.get(key)
        if value:
            return value if isinstance(value, str) else None
    return None


FREELLM = register(
    ProviderSpec(
        key="freellm",
        name="FreeLLM",
        endpoint=DEFAULT_ENDPOINT,
        build_payload=_build_payload,
        extract_text=_extract_text,
        auth="none",
        requires_key=False,
        split_lines=False,
    )
)
