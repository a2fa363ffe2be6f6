# FILE: vocapp/chat/__init__.py
"""Turn orchestrator and the SSE chat endpoint."""

from vocapp.chat.stream import TurnStream
from vocapp.chat.orchestrator import TurnOrchestrator, TurnSettings, get_orchestrator

__all__ = [
    "TurnStream",
    "TurnOrchestrator",
    "TurnSettings",
    "get_orchestrator",
]
