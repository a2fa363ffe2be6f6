# FILE: vocapp/llm/streaming.py
"""
Streaming interface for the supported model providers.

CANONICAL EVENT SCHEMA (every generator yields dicts):

{"type": "metadata", "provider": "...", "model": "..."}
    - once, before any token
{"type": "token", "text": "<chunk>"}
{"type": "error", "message": "..."}
{"type": "done", "provider": "...", "model": "..."}

Providers:
- ollama    : POST {OLLAMA_HOST}/api/chat, NDJSON stream, via httpx
- openai    : AsyncOpenAI chat completions stream
- anthropic : AsyncAnthropic messages stream
"""
from __future__ import annotations

import json
import logging
import os
from typing import AsyncGenerator, Dict, List, Optional

import anthropic
import httpx
from openai import AsyncOpenAI

from vocapp import config

logger = logging.getLogger(__name__)

TEMPERATURE = 0.2
ANTHROPIC_MAX_TOKENS = 1024


def get_default_model(provider: str) -> str:
    return config.DEFAULT_MODELS.get(provider, config.OLLAMA_MODEL)


def get_available_providers() -> Dict[str, bool]:
    """Which providers have what they need to run."""
    return {
        "ollama": bool(config.OLLAMA_HOST),
        "openai": bool(os.getenv("OPENAI_API_KEY")),
        "anthropic": bool(os.getenv("ANTHROPIC_API_KEY")),
    }


# ============ STREAMING GENERATORS ============

async def stream_ollama(
    messages: List[Dict],
    system_prompt: str = "",
    model: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> AsyncGenerator[Dict, None]:
    use_model = model or get_default_model("ollama")
    payload = {
        "model": use_model,
        "messages": [{"role": "system", "content": system_prompt}, *messages],
        "stream": True,
        "options": {"temperature": TEMPERATURE},
    }
    yield {"type": "metadata", "provider": "ollama", "model": use_model}

    timeout = httpx.Timeout(timeout_s or config.MODEL_TIMEOUT_S)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            async with client.stream("POST", f"{config.OLLAMA_HOST}/api/chat", json=payload) as resp:
                if resp.status_code >= 400:
                    body = (await resp.aread()).decode("utf-8", errors="replace")
                    yield {"type": "error", "message": f"Ollama error {resp.status_code}: {body[:300]}"}
                    return
                async for line in resp.aiter_lines():
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        item = json.loads(line)
                    except json.JSONDecodeError:
                        logger.debug(f"[ollama] skipping malformed chunk: {line[:80]!r}")
                        continue
                    delta = str((item.get("message") or {}).get("content") or "")
                    if delta:
                        yield {"type": "token", "text": delta}
                    if item.get("done"):
                        break
        yield {"type": "done", "provider": "ollama", "model": use_model}
    except httpx.HTTPError as e:
        yield {"type": "error", "message": f"Ollama unreachable: {e}"}


async def stream_openai(
    messages: List[Dict],
    system_prompt: str = "",
    model: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> AsyncGenerator[Dict, None]:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        yield {"type": "error", "message": "OPENAI_API_KEY not set"}
        return

    use_model = model or get_default_model("openai")
    client = AsyncOpenAI(api_key=api_key, timeout=timeout_s or config.MODEL_TIMEOUT_S)
    full_messages = [{"role": "system", "content": system_prompt}, *messages]

    yield {"type": "metadata", "provider": "openai", "model": use_model}
    try:
        stream = await client.chat.completions.create(
            model=use_model,
            messages=full_messages,
            stream=True,
            temperature=TEMPERATURE,
        )
        async for chunk in stream:
            if chunk.choices and chunk.choices[0].delta and chunk.choices[0].delta.content:
                yield {"type": "token", "text": chunk.choices[0].delta.content}
        yield {"type": "done", "provider": "openai", "model": use_model}
    except Exception as e:
        yield {"type": "error", "message": str(e)}


async def stream_anthropic(
    messages: List[Dict],
    system_prompt: str = "",
    model: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> AsyncGenerator[Dict, None]:
    api_key = os.getenv("ANTHROPIC_API_KEY")
    if not api_key:
        yield {"type": "error", "message": "ANTHROPIC_API_KEY not set"}
        return

    use_model = model or get_default_model("anthropic")
    client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout_s or config.MODEL_TIMEOUT_S)
    # Anthropic takes the system prompt separately and only user/assistant turns.
    convo = [m for m in messages if m.get("role") in ("user", "assistant")]
    while convo and convo[0]["role"] != "user":
        convo.pop(0)

    yield {"type": "metadata", "provider": "anthropic", "model": use_model}
    try:
        async with client.messages.stream(
            model=use_model,
            max_tokens=ANTHROPIC_MAX_TOKENS,
            system=system_prompt,
            messages=convo,
        ) as stream:
            async for text in stream.text_stream:
                yield {"type": "token", "text": text}
        yield {"type": "done", "provider": "anthropic", "model": use_model}
    except Exception as e:
        yield {"type": "error", "message": str(e)}


_GENERATORS = {
    "ollama": stream_ollama,
    "openai": stream_openai,
    "anthropic": stream_anthropic,
}


async def stream_provider(
    provider: str,
    messages: List[Dict],
    system_prompt: str = "",
    model: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> AsyncGenerator[Dict, None]:
    """Dispatch to the provider's generator."""
    gen = _GENERATORS.get((provider or "").lower())
    if gen is None:
        yield {"type": "error", "message": f"Unknown provider: {provider}"}
        return
    async for event in gen(messages, system_prompt=system_prompt, model=model, timeout_s=timeout_s):
        yield event
