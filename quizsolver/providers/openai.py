from __future__ import annotations

from quizsolver.providers import register
from quizsolver.providers.base import ProviderSpec, chat_payload, extract_chat_content

OPENAI = register(
    ProviderSpec(
        key="openai",
        name="OpenAI",
        endpoint="https://api.openai.com/v1/chat/completions",
        build_payload=chat_payload("gpt-4o-mini"),
        extract_text=extract_chat_content,
    )
)
