from __future__ import annotations

from quizsolver.providers import register
from quizsolver.providers.base import ProviderSpec, chat_payload, extract_chat_content

GROQ = register(
    ProviderSpec(
        key="groq",
        name="Groq",
        endpoint="https://api.groq.com/openai/v1/chat/completions",
        build_payload=chat_payload("llama-3.1-8b-instant"),
        extract_text=extract_chat_content,
    )
)
