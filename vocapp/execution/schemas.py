# FILE: vocapp/execution/schemas.py
"""
Pydantic models for command execution and the two-phase approval protocol.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExecutionResult(BaseModel):
    """Outcome of a vetted command or an internal filesystem inspection.

    Failures are data, not exceptions: ``ok`` is False and ``error`` says why.
    """
    command: str
    cwd: str
    stdout: str = ""
    stderr: str = ""
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def refused(cls, command: str, cwd: str, error: str, stderr: str = "") -> "ExecutionResult":
        return cls(command=command, cwd=cwd, stdout="", stderr=stderr, ok=False, error=error)

    def stdout_lines(self) -> List[str]:
        return [line.strip() for line in self.stdout.split("\n") if line.strip()]


class PendingCommand(BaseModel):
    """A mutating command waiting for human approval."""
    command: str
    message: str = ""
    created_at: float


class CommandProposal(BaseModel):
    """What the client sees for a staged command."""
    type: str = "command"
    token: str
    command: str
    message: str


class TokenRequest(BaseModel):
    token: Optional[str] = None


class RejectResponse(BaseModel):
    ok: bool = True
    removed: bool = False


class AccessConfigPayload(BaseModel):
    """Wire shape for GET/POST /api/access."""
    model_config = ConfigDict(populate_by_name=True)

    mode: str
    allowed_paths: List[str] = Field(default_factory=list, alias="allowedPaths")
