# FILE: main.py
"""
vocapp Backend - FastAPI Application
Version: 0.4.0

Grounded voice/text filesystem agent.

Features:
- Rule-based intent classification with fuzzy, speech-tolerant target resolution
- Deterministic listings and inspections before any model answer
- Two-phase propose/approve/reject for mutating commands
- Streaming turns over SSE (Ollama, OpenAI or Anthropic backend)

v0.4.0 Changes:
- Access scope readable/updatable at runtime (/api/access)
- Read-only policy selectable (denylist / allowlist)
"""
import asyncio
import logging
from typing import Callable, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load .env FIRST before any other imports that might need env vars
load_dotenv()

from vocapp import __version__, config
from vocapp.chat.router import router as chat_router
from vocapp.execution.pending import get_pending_store
from vocapp.execution.router import router as execution_router
from vocapp.llm.streaming import get_available_providers
from vocapp.security.access import get_access_store
from vocapp.session.memory import get_session_store

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s',
)
logger = logging.getLogger("vocapp")

app = FastAPI(
    title="vocapp",
    version=__version__,
    description="Conversational filesystem agent with grounded command execution",
)

# ====== CORS ======

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        f"http://localhost:{config.PORT}",
        f"http://127.0.0.1:{config.PORT}",
        "file://",  # For Electron file:// protocol
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ====== BACKGROUND SWEEPS ======

_sweep_tasks: List[asyncio.Task] = []


async def _periodic(name: str, interval_s: float, fn: Callable[[], int]) -> None:
    while True:
        await asyncio.sleep(interval_s)
        try:
            removed = fn()
        except Exception:
            logger.exception(f"[{name}] sweep failed")
            continue
        if removed:
            logger.debug(f"[{name}] removed {removed}")


# ====== STARTUP ======

@app.on_event("startup")
async def on_startup():
    access = get_access_store().get()
    logger.info(f"[startup] vocapp {__version__} on port {config.PORT}")
    logger.info(f"[startup] Provider: {config.PROVIDER} ({config.DEFAULT_MODELS.get(config.PROVIDER, '?')})")
    available = [name for name, ok in get_available_providers().items() if ok]
    logger.info(f"[startup] Configured providers: {', '.join(available) or 'none'}")
    logger.info(f"[startup] Working directory: {config.EXEC_WORKDIR}")
    logger.info(f"[startup] Access mode: {access.mode.value}")
    logger.info(f"[startup] Strict grounded filesystem: {'ON' if config.STRICT_GROUNDED_FS else 'OFF'}")
    logger.info(f"[startup] Auto-execute read-only: {'ON' if config.AUTO_EXEC_READONLY else 'OFF'}")
    logger.info(f"[startup] Auto-summarize reads: {'ON' if config.AUTO_SUMMARIZE_READS else 'OFF'}")
    logger.info(f"[startup] Read-only policy: {config.READONLY_POLICY}")

    _sweep_tasks.append(asyncio.create_task(
        _periodic("pending", config.PENDING_SWEEP_S, get_pending_store().sweep)
    ))
    _sweep_tasks.append(asyncio.create_task(
        _periodic("session", config.SESSION_SWEEP_S, get_session_store().gc)
    ))


@app.on_event("shutdown")
async def on_shutdown():
    for task in _sweep_tasks:
        task.cancel()
    await asyncio.gather(*_sweep_tasks, return_exceptions=True)
    _sweep_tasks.clear()


# ====== ROUTERS ======

app.include_router(chat_router)
app.include_router(execution_router)


@app.get("/api/health")
async def health():
    access = get_access_store().get()
    return {
        "status": "ok",
        "version": __version__,
        "provider": config.PROVIDER,
        "providers": get_available_providers(),
        "workdir": config.EXEC_WORKDIR,
        "access_mode": access.mode.value,
        "sessions": len(get_session_store()),
        "pending_commands": len(get_pending_store()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=config.PORT)
