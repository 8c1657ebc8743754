from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

from quizsolver.config import DEFAULT_TIMEOUT_MS, Settings, credential_for, load_settings
from quizsolver.guard import with_timeout
from quizsolver.normalizer import AIResponse, SolveResponse, failure_response, normalize, to_solve_response
from quizsolver.providers import Provider, ProviderError, ProviderTimeout, create_provider, get_spec, list_providers


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderAttempt:
    provider: str
    error: str | None = None
    timed_out: bool = False
    skipped: bool = False
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.skipped


@dataclass(frozen=True)
class Resolution:
    response: AIResponse
    attempts: list[ProviderAttempt]


class FallbackResolver:
    """Tries providers one at a time, in order, until one produces text."""

    def __init__(self, providers: Iterable[Provider], timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self.providers = list(providers)
        self.timeout_ms = timeout_ms

    async def resolve(self, question: str) -> AIResponse:
        resolution = await self.resolve_detailed(question)
        return resolution.response

    async def resolve_detailed(self, question: str) -> Resolution:
        attempts: list[ProviderAttempt] = []
        for provider in self.providers:
            if not provider.available:
                logger.info("Skipping %s: credential not configured", provider.name)
                attempts.append(ProviderAttempt(provider=provider.name, error="credential missing", skipped=True))
                continue

            logger.info("Trying %s", provider.name)
            start = time.perf_counter()
            try:
                raw = await with_timeout(
                    provider.invoke(question, timeout=self.timeout_ms / 1000),
                    provider.name,
                    self.timeout_ms,
                )
            except ProviderError as exc:
                attempts.append(_failed_attempt(provider, exc, start))
                logger.warning("%s failed: %s", provider.name, exc)
                continue
            except Exception as exc:
                attempts.append(_failed_attempt(provider, exc, start))
                logger.warning("%s failed unexpectedly: %r", provider.name, exc)
                continue

            if not raw.text or not raw.text.strip():
                attempts.append(_failed_attempt(provider, ValueError("empty response"), start))
                logger.warning("%s returned an empty response", provider.name)
                continue

            attempts.append(ProviderAttempt(provider=provider.name, elapsed_ms=raw.elapsed_ms))
            response = normalize(raw.text, provider.name, raw.elapsed_ms, split_lines=provider.split_lines)
            logger.info("%s responded successfully in %dms", provider.name, response.time_taken)
            return Resolution(response=response, attempts=attempts)

        logger.error("All providers failed (%d tried)", len(attempts))
        return Resolution(response=failure_response("none"), attempts=attempts)


_default_resolver: FallbackResolver | None = None


def build_resolver(settings: Settings) -> FallbackResolver:
    providers = []
    for key in _known(settings.order):
        providers.append(
            create_provider(
                key,
                credential=credential_for(key, settings),
                endpoint=settings.endpoints.get(key),
            )
        )
    return FallbackResolver(providers, timeout_ms=settings.timeout_ms)


def configure(settings: Settings) -> FallbackResolver:
    """Build the process-wide resolver used when no settings are passed."""
    global _default_resolver
    _default_resolver = build_resolver(settings)
    return _default_resolver


def default_resolver() -> FallbackResolver:
    if _default_resolver is None:
        return configure(load_settings())
    return _default_resolver


async def resolve(question: str, settings: Settings | None = None) -> AIResponse:
    resolver = build_resolver(settings) if settings is not None else default_resolver()
    return await resolver.resolve(question)


async def solve_question(question: str, settings: Settings | None = None) -> SolveResponse:
    """Older three-field result shape kept for existing callers."""
    return to_solve_response(await resolve(question, settings))


def provider_status(settings: Settings) -> dict[str, dict[str, bool]]:
    status: dict[str, dict[str, bool]] = {}
    for key in _known(settings.order):
        spec = get_spec(key)
        status[spec.name] = {
            "available": bool(credential_for(key, settings)) or not spec.requires_key,
            "requires_key": spec.requires_key,
        }
    return status


def _known(order: Iterable[str]) -> list[str]:
    known = set(list_providers())
    kept = []
    for key in order:
        if key not in known:
            logger.warning("Ignoring unknown provider: %s", key)
            continue
        kept.append(key)
    return kept


def _failed_attempt(provider: Provider, exc: BaseException, start: float) -> ProviderAttempt:
    return ProviderAttempt(
        provider=provider.name,
        error=str(exc) or exc.__class__.__name__,
        timed_out=isinstance(exc, ProviderTimeout),
        elapsed_ms=int((time.perf_counter() - start) * 1000),
    )
