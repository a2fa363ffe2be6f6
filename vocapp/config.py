# FILE: vocapp/config.py
"""
Runtime configuration.

All tunables are read once from the environment (load_dotenv() runs first in
main.py). Boolean flags are enabled unless set to the literal "false".
"""

import os
import secrets
from pathlib import Path
from typing import List


def _flag(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() != "false"


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name) or default)
    except ValueError:
        return default


def _default_workdir() -> str:
    home = Path.home()
    for candidate in (home / "Documentos", home / "Documents"):
        if candidate.is_dir():
            return str(candidate)
    return str(home)


def _split_paths(raw: str) -> List[str]:
    return [p.strip() for p in (raw or "").split(os.pathsep) if p.strip()]


# ============================================================================
# SERVER
# ============================================================================

PORT: int = int(os.getenv("PORT") or "3187")
LOG_LEVEL: str = (os.getenv("VOCAPP_LOG_LEVEL") or "INFO").upper()

# Random per process unless pinned; clients read it from the launcher.
API_TOKEN: str = os.getenv("VOCAPP_API_TOKEN") or secrets.token_urlsafe(24)

# ============================================================================
# EXECUTION
# ============================================================================

EXEC_WORKDIR: str = os.getenv("VOCAPP_WORKDIR") or _default_workdir()
EXEC_TIMEOUT_S: float = _float_env("VOCAPP_EXEC_TIMEOUT_S", 120.0)

# "denylist" (fail-open, mutating verbs need approval) or "allowlist"
# (only known read-only programs auto-execute).
READONLY_POLICY: str = (os.getenv("VOCAPP_READONLY_POLICY") or "denylist").lower()

STRICT_GROUNDED_FS: bool = _flag("VOCAPP_STRICT_GROUNDED_FS")
AUTO_EXEC_READONLY: bool = _flag("VOCAPP_AUTO_EXEC_READONLY")
AUTO_SUMMARIZE_READS: bool = _flag("VOCAPP_AUTO_SUMMARIZE_READS")

# ============================================================================
# ACCESS SCOPE
# ============================================================================

ACCESS_MODE: str = (os.getenv("VOCAPP_ACCESS_MODE") or "workdir").lower()
ALLOWED_PATHS: List[str] = _split_paths(os.getenv("VOCAPP_ALLOWED_PATHS", ""))

# ============================================================================
# PENDING COMMANDS / SESSIONS
# ============================================================================

PENDING_TTL_S: float = _float_env("VOCAPP_PENDING_TTL_S", 300.0)
PENDING_SWEEP_S: float = _float_env("VOCAPP_PENDING_SWEEP_S", 60.0)
SESSION_SWEEP_S: float = _float_env("VOCAPP_SESSION_SWEEP_S", 60.0)
MAX_SESSIONS: int = 200
SESSIONS_KEPT: int = 120

# ============================================================================
# MODEL BACKEND
# ============================================================================

PROVIDER: str = (os.getenv("VOCAPP_PROVIDER") or "ollama").lower()
MODEL_TIMEOUT_S: float = _float_env("VOCAPP_MODEL_TIMEOUT_S", 90.0)

OLLAMA_HOST: str = os.getenv("OLLAMA_HOST", "http://127.0.0.1:11434")
OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "gpt-oss:20b")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001")

DEFAULT_MODELS = {
    "ollama": OLLAMA_MODEL,
    "openai": OPENAI_MODEL,
    "anthropic": ANTHROPIC_MODEL,
}
