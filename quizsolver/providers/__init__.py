from __future__ import annotations

from typing import Dict

from quizsolver.providers.base import (
    HTTPProvider,
    Provider,
    ProviderError,
    ProviderShapeError,
    ProviderSpec,
    ProviderStatusError,
    ProviderTimeout,
    ProviderUnavailable,
    RawResult,
)

_REGISTRY: Dict[str, ProviderSpec] = {}


def register(spec: ProviderSpec) -> ProviderSpec:
    if not spec.key:
        raise ValueError("Provider spec must define a non-empty key")
    _REGISTRY[spec.key] = spec
    return spec


def get_spec(key: str) -> ProviderSpec:
    try:
        return _REGISTRY[key]
    except KeyError as exc:
        raise KeyError(f"Unknown provider: {key}") from exc


def create_provider(key: str, credential: str | None = None, endpoint: str | None = None) -> HTTPProvider:
    return HTTPProvider(get_spec(key), credential=credential, endpoint=endpoint)


def list_providers() -> list[str]:
    return sorted(_REGISTRY.keys())


__all__ = [
    "HTTPProvider",
    "Provider",
    "ProviderError",
    "ProviderShapeError",
    "ProviderSpec",
    "ProviderStatusError",
    "ProviderTimeout",
    "ProviderUnavailable",
    "RawResult",
    "register",
    "get_spec",
    "create_provider",
    "list_providers",
]

# Provider registrations
from quizsolver.providers.freellm import FREELLM  # noqa: F401,E402
from quizsolver.providers.groq import GROQ  # noqa: F401,E402
from quizsolver.providers.openrouter import OPENROUTER  # noqa: F401,E402
from quizsolver.providers.gemini import GEMINI  # noqa: F401,E402
from quizsolver.providers.huggingface import HUGGINGFACE  # noqa: F401,E402
from quizsolver.providers.openai import OPENAI  # noqa: F401,E402
