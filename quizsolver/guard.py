from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from quizsolver.config import DEFAULT_TIMEOUT_MS
from quizsolver.providers.base import ProviderTimeout

T = TypeVar("T")


async def with_timeout(call: Awaitable[T], provider: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> T:
    """Await a provider call, raising ProviderTimeout once the deadline passes.

    The pending call is cancelled when the deadline fires, which also tears down
    its in-flight HTTP request.
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as exc:
        raise ProviderTimeout(provider, f"no response within {timeout_ms}ms") from exc
