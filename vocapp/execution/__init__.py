# FILE: vocapp/execution/__init__.py
"""Command execution: executor, pending-command store, result schemas."""

from vocapp.execution.schemas import (
    ExecutionResult,
    PendingCommand,
    CommandProposal,
)
from vocapp.execution.executor import execute_command
from vocapp.execution.pending import PendingCommandStore, get_pending_store

__all__ = [
    "ExecutionResult",
    "PendingCommand",
    "CommandProposal",
    "execute_command",
    "PendingCommandStore",
    "get_pending_store",
]
