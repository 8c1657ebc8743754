from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping

from dotenv import load_dotenv

from quizsolver.providers import list_providers

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for 3.10
    import tomli as tomllib


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000

DEFAULT_ORDER: tuple[str, ...] = (
    "freellm",
    "groq",
    "openrouter",
    "gemini",
    "huggingface",
    "openai",
)

PROVIDER_ENV: Dict[str, str] = {
    "groq": "GROQ_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "huggingface": "HUGGINGFACE_API_KEY",
    "openai": "OPENAI_API_KEY",
}

ENDPOINT_ENV: Dict[str, str] = {
    "freellm": "FREE_LLM_API_URL",
}

DEFAULT_CONFIG_PATH = Path("config.toml")


@dataclass(frozen=True)
class Settings:
    credentials: Dict[str, str]
    endpoints: Dict[str, str]
    order: tuple[str, ...]
    timeout_ms: int = DEFAULT_TIMEOUT_MS


def load_settings(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ

    path = config_path or DEFAULT_CONFIG_PATH
    data: dict = {}
    if path.exists():
        try:
            data = tomllib.loads(path.read_text())
        except tomllib.TOMLDecodeError as exc:
            logger.warning("Ignoring unreadable %s: %s", path, exc)

    credentials: Dict[str, str] = {}
    for provider, env_var in PROVIDER_ENV.items():
        value = _lookup(environ, env_var)
        if value:
            credentials[provider] = value

    endpoints: Dict[str, str] = {}
    for provider, env_var in ENDPOINT_ENV.items():
        value = _lookup(environ, env_var)
        if value:
            endpoints[provider] = value
    configured_endpoints = data.get("endpoints", {})
    if isinstance(configured_endpoints, dict):
        for key, value in configured_endpoints.items():
            if value:
                endpoints[str(key)] = str(value)

    order = DEFAULT_ORDER
    providers_section = data.get("providers", {})
    configured_order = providers_section.get("order") if isinstance(providers_section, dict) else None
    if isinstance(configured_order, list) and configured_order:
        order = tuple(str(name).strip().lower() for name in configured_order if str(name).strip())
    known = set(list_providers())
    kept: list[str] = []
    for name in order:
        if name not in known:
            logger.warning("Ignoring unknown provider in config: %s", name)
            continue
        kept.append(name)
    order = tuple(kept)

    timeout_ms = DEFAULT_TIMEOUT_MS
    try:
        timeout_ms = int(data.get("timeout_ms", DEFAULT_TIMEOUT_MS))
    except (TypeError, ValueError):
        pass

    return Settings(
        credentials=credentials,
        endpoints=endpoints,
        order=order,
        timeout_ms=max(1, timeout_ms),
    )


def credential_for(provider: str, settings: Settings) -> str | None:
    return settings.credentials.get(provider)


def _lookup(environ: Mapping[str, str], key: str) -> str:
    # Keys written for the bundled browser build carry a VITE_ prefix.
    return (environ.get(key) or environ.get(f"VITE_{key}") or "").strip()
