# FILE: vocapp/execution/executor.py
"""
Command executor.

Runs one vetted program with literal arguments (no shell) inside the
current access scope, under a timeout. Every failure comes back as an
ExecutionResult with ok=False; nothing here raises to the caller.

Pipeline:
  shell operators -> tokenize -> blocklist (raw + joined tokens)
  -> "~" expansion -> path sandbox -> spawn under timeout
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

from vocapp import config
from vocapp.execution.schemas import ExecutionResult
from vocapp.security.access import AccessScope, expand_home, get_access_store
from vocapp.security.command_policy import has_shell_operators, is_blocked, tokenize

logger = logging.getLogger(__name__)

SHELL_OPERATOR_ERROR = "shell_operator_not_supported: use simple commands such as ls, ps, cp."
SHELL_OPERATOR_STDERR = "Shell operators not supported. Use simple commands only."


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


async def execute_command(
    command: str,
    scope: Optional[AccessScope] = None,
    timeout_s: Optional[float] = None,
) -> ExecutionResult:
    scope = scope or get_access_store().get()
    cwd = scope.effective_root()
    timeout = timeout_s if timeout_s is not None else config.EXEC_TIMEOUT_S
    command = command or ""

    if has_shell_operators(command):
        logger.warning(f"[executor] refused shell operators: {command!r}")
        return ExecutionResult.refused(command, cwd, SHELL_OPERATOR_ERROR, stderr=SHELL_OPERATOR_STDERR)

    tokens = tokenize(command)
    if not tokens:
        return ExecutionResult.refused(command, cwd, "Empty or malformed command")

    if is_blocked(command) or is_blocked(" ".join(tokens)):
        logger.warning(f"[executor] blocked command: {command!r}")
        return ExecutionResult.refused(command, cwd, f"Blocked for safety: {command}")

    tokens = [expand_home(t) for t in tokens]
    path_error = scope.check_paths(tokens)
    if path_error:
        logger.warning(f"[executor] {path_error} in {command!r}")
        return ExecutionResult.refused(command, cwd, path_error)

    if not os.path.isdir(cwd):
        return ExecutionResult.refused(command, cwd, f"Working directory not found: {cwd}")

    program, args = tokens[0], tokens[1:]
    logger.info(f"[executor] running {command!r} in {cwd} (mode={scope.mode.value})")

    try:
        proc = await asyncio.create_subprocess_exec(
            program,
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.warning(f"[executor] command not found: {program}")
        return ExecutionResult.refused(command, cwd, f"Command not found: {program}")
    except OSError as e:
        logger.warning(f"[executor] spawn failed for {program}: {e}")
        return ExecutionResult.refused(command, cwd, str(e))

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning(f"[executor] timed out after {timeout}s: {command!r}")
        return ExecutionResult.refused(command, cwd, f"Command timed out after {timeout:g}s")

    result = ExecutionResult(
        command=command,
        cwd=cwd,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        ok=proc.returncode == 0,
    )
    if proc.returncode != 0:
        result.error = f"Command exited with status {proc.returncode}"
    return result
