from __future__ import annotations

from quizsolver.providers import register
from quizsolver.providers.base import ProviderSpec, chat_payload, extract_chat_content

OPENROUTER = register(
    ProviderSpec(
        key="openrouter",
        name="OpenRouter",
        endpoint="https://openrouter.ai/api/v1/chat/completions",
        build_payload=chat_payload("meta-llama/llama-3.2-3b-instruct:free"),
        extract_text=extract_chat_content,
        # OpenRouter attributes traffic using these two headers.
        headers={
            "HTTP-Referer": "https://quizai-extension.com",
            "X-Title": "QuizAI Extension",
        },
    )
)
