# FILE: vocapp/llm/backend.py
"""
Model backend seam.

The orchestrator only needs two calls: stream the tokens of a chat answer,
and get one complete text. Anything with those two coroutines can stand in
for a real provider (tests pass a scripted fake).
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import AsyncIterator, Dict, List, Optional, Protocol

from vocapp import config
from vocapp.llm.streaming import stream_provider

logger = logging.getLogger(__name__)


class ModelBackendError(RuntimeError):
    """Backend unreachable, returned an error, or timed out."""


class ModelBackend(Protocol):
    def stream_chat(self, messages: List[Dict], system_prompt: str) -> AsyncIterator[str]:
        ...

    async def complete(self, messages: List[Dict], system_prompt: str) -> str:
        ...


class ProviderBackend:
    """ModelBackend over the streaming providers, with an overall deadline per call."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        self.provider = (provider or config.PROVIDER).lower()
        self.model = model
        self.timeout_s = timeout_s if timeout_s is not None else config.MODEL_TIMEOUT_S

    async def stream_chat(self, messages: List[Dict], system_prompt: str) -> AsyncIterator[str]:
        gen = stream_provider(
            self.provider, messages, system_prompt=system_prompt, model=self.model, timeout_s=self.timeout_s
        )
        deadline = time.monotonic() + self.timeout_s
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ModelBackendError(f"{self.provider} timed out after {self.timeout_s:g}s")
                try:
                    event = await asyncio.wait_for(gen.__anext__(), timeout=remaining)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError:
                    raise ModelBackendError(f"{self.provider} timed out after {self.timeout_s:g}s")

                etype = event.get("type")
                if etype == "token":
                    yield event.get("text") or ""
                elif etype == "error":
                    raise ModelBackendError(event.get("message") or f"{self.provider} error")
                elif etype == "metadata":
                    logger.debug(f"[backend] {event.get('provider')} model={event.get('model')}")
        finally:
            await gen.aclose()

    async def complete(self, messages: List[Dict], system_prompt: str) -> str:
        parts: List[str] = []
        async for delta in self.stream_chat(messages, system_prompt):
            parts.append(delta)
        return "".join(parts).strip()


_backend: Optional[ModelBackend] = None


def get_backend() -> ModelBackend:
    global _backend
    if _backend is None:
        _backend = ProviderBackend()
        logger.info(f"[backend] provider={_backend.provider}")
    return _backend


def set_backend(backend: Optional[ModelBackend]) -> None:
    """Replace the process-wide backend (None resets to the configured provider)."""
    global _backend
    _backend = backend
