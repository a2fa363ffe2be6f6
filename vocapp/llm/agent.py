# FILE: vocapp/llm/agent.py
"""
Model calls used by the turn orchestrator.

ask_model        - stream the agent answer, forwarding tokens, then decode it
summarize_execution - evidence-only summary with a contradiction guard

Backend failures are recovered where possible: partial text is still
decoded. ModelBackendError only escapes ask_model when no text arrived.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from vocapp.execution.schemas import ExecutionResult
from vocapp.fs.grounding import build_deterministic_inspection_summary
from vocapp.llm.answers import ModelAnswer, as_reply, decode_answer
from vocapp.llm.backend import ModelBackend, ModelBackendError
from vocapp.llm.prompts import (
    SUMMARY_RULES,
    build_summary_messages,
    build_system_prompt,
    build_user_message,
)
from vocapp.session.memory import SessionMemory

logger = logging.getLogger(__name__)

OnToken = Callable[[str], Awaitable[None]]

CONTRADICTION_MARKERS = (
    "doesn't exist",
    "does not exist",
    "no evidence",
    "not found",
    "no existe",
    "no hay evidencia",
)


async def ask_model(
    backend: ModelBackend,
    history: List[Dict[str, str]],
    user_text: str,
    memory: SessionMemory,
    workdir: str,
    available_dirs: Sequence[str] = (),
    resolved_target: Optional[str] = None,
    on_token: Optional[OnToken] = None,
) -> ModelAnswer:
    system_prompt = build_system_prompt(memory, workdir, available_dirs)
    messages = [*history, build_user_message(user_text, resolved_target, memory)]

    parts: List[str] = []
    try:
        async for delta in backend.stream_chat(messages, system_prompt):
            if not delta:
                continue
            parts.append(delta)
            if on_token is not None:
                await on_token(delta)
    except ModelBackendError as e:
        if not "".join(parts).strip():
            logger.warning(f"[agent] backend failed with no output: {e}")
            raise
        logger.warning(f"[agent] backend failed mid-stream, decoding partial text: {e}")

    return as_reply(decode_answer("".join(parts)))


def contradicts_evidence(summary: str, target: str) -> bool:
    """Claims the target is missing without even naming it."""
    low = summary.lower()
    return any(m in low for m in CONTRADICTION_MARKERS) and target.lower() not in low


async def summarize_execution(
    backend: ModelBackend,
    user_text: str,
    execution: ExecutionResult,
    target: Optional[str] = None,
) -> str:
    """
    Summary of ``execution`` grounded in its output.

    With a known target, a summary that contradicts the evidence, or an
    empty/failed one, is replaced by the deterministic first-level count.
    """
    try:
        summary = await backend.complete(build_summary_messages(user_text, execution, target), SUMMARY_RULES)
    except ModelBackendError as e:
        logger.warning(f"[summary] backend failed: {e}")
        summary = ""
    summary = (summary or "").strip()

    if not target:
        return summary

    if summary and not contradicts_evidence(summary, target):
        return summary

    deterministic = build_deterministic_inspection_summary(target, execution.stdout)
    if deterministic:
        if summary:
            logger.info(f"[summary] model summary contradicted evidence for {target}, using deterministic summary")
        return deterministic
    return summary
