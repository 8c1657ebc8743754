from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

import httpx


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful AI assistant. Provide clear, concise answers."
MAX_TOKENS = 500
TEMPERATURE = 0.7


class ProviderError(Exception):
    """Base class for every provider failure; raised directly for transport errors."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderUnavailable(ProviderError):
    """Required credential is not configured; no request was made."""


class ProviderStatusError(ProviderError):
    def __init__(self, provider: str, status_code: int, body: str = "") -> None:
        super().__init__(provider, f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class ProviderShapeError(ProviderError):
    """2xx response without the expected text field."""


class ProviderTimeout(ProviderError):
    pass


@dataclass(frozen=True)
class RawResult:
    text: str
    elapsed_ms: int


@dataclass(frozen=True)
class ProviderSpec:
    key: str
    name: str
    endpoint: str
    build_payload: Callable[[str], dict]
    extract_text: Callable[[Any], Optional[str]]
    auth: str = "bearer"
    headers: Mapping[str, str] = field(default_factory=dict)
    requires_key: bool = True
    split_lines: bool = True


class Provider(ABC):
    key: str
    name: str
    split_lines: bool = True

    @property
    @abstractmethod
    def available(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def invoke(self, question: str, timeout: float | None = None) -> RawResult:
        """Send one request for the question and return the provider's raw text."""
        raise NotImplementedError


class HTTPProvider(Provider):
    """Provider driven entirely by its ProviderSpec record."""

    def __init__(
        self,
        spec: ProviderSpec,
        credential: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        self.spec = spec
        self.key = spec.key
        self.name = spec.name
        self.split_lines = spec.split_lines
        self.credential = credential or None
        self.endpoint = endpoint or spec.endpoint

    @property
    def available(self) -> bool:
        return bool(self.credential) or not self.spec.requires_key

    def _request_parts(self, question: str) -> tuple[dict, dict, dict]:
        headers = {"Content-Type": "application/json", **self.spec.headers}
        params: dict = {}
        if self.spec.auth == "bearer" and self.credential:
            headers["Authorization"] = f"Bearer {self.credential}"
        elif self.spec.auth == "query" and self.credential:
            params["key"] = self.credential
        return headers, params, self.spec.build_payload(question)

    async def invoke(self, question: str, timeout: float | None = None) -> RawResult:
        if not self.available:
            raise ProviderUnavailable(self.name, "credential not configured")

        start = time.perf_counter()
        headers, params, payload = self._request_parts(question)

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(self.endpoint, headers=headers, params=params, json=payload)
                response.raise_for_status()
                try:
                    data = response.json()
                except ValueError as exc:
                    raise ProviderShapeError(self.name, f"invalid JSON: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise ProviderTimeout(self.name, str(exc) or "request timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderStatusError(self.name, exc.response.status_code, exc.response.text) from exc
        except httpx.RequestError as exc:
            raise ProviderError(self.name, str(exc) or exc.__class__.__name__) from exc

        text = self.spec.extract_text(data)
        if not isinstance(text, str) or not text.strip():
            raise ProviderShapeError(self.name, "no content in response")

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("%s returned %d characters in %dms", self.name, len(text), elapsed_ms)
        return RawResult(text=text, elapsed_ms=elapsed_ms)


def chat_payload(model: str) -> Callable[[str], dict]:
    """Request body builder for OpenAI-compatible chat completion endpoints."""

    def build(question: str) -> dict:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": question},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

    return build


def dig(data: Any, *path: str | int) -> Any:
    """Follow a path of dict keys and list indexes, returning None on any miss."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict):
            return None
        try:
            current = current[step]
        except (KeyError, IndexError):
            return None
    return current


def extract_chat_content(data: Any) -> Optional[str]:
    return dig(data, "choices", 0, "message", "content")
