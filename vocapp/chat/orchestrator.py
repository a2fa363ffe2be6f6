# FILE: vocapp/chat/orchestrator.py
"""
Turn orchestrator.

One user turn = one asyncio task. The turn classifies the last user
message, resolves its target, then runs short-circuiting stages in a fixed
precedence (first stage that handles the turn wins):

    suggestion selection > ordinal selection > target declaration
    > correction > summary > listing > model delegation

Model delegation branches on the decoded answer:
- not understood          -> disambiguation suggestions
- grounding guard         -> filesystem-relevant turn, no recent execution
                             evidence, model gave no command: inspect first
                             (auto) or propose an inspection command
- command                 -> empty: error reply / blocked: refusal /
                             read-only + auto-exec: run now / else: stage for approval
- reply                   -> passed through

Partial output (model tokens, early execution results, summary chunks)
goes through the TurnStream side channel; the final stage emits exactly
one final event.

v1.2 (2026-09): Per-session lock, queue side channel, disconnect-safe summaries.
v1.1 (2026-08): Suggestion selection split from ordinal selection.
v1.0 (2026-07): Initial pipeline.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from vocapp import config
from vocapp.chat.stream import TurnStream
from vocapp.execution.executor import execute_command
from vocapp.execution.pending import PendingCommandStore, get_pending_store
from vocapp.execution.schemas import ExecutionResult
from vocapp.fs.grounding import build_grounding_command, build_listing_summary, build_voice_summary
from vocapp.fs.inspector import (
    LISTING_NOT_FOUND_PREFIX,
    list_root_directories,
    run_internal_inspection,
    run_internal_listing,
    target_exists,
)
from vocapp.llm.agent import ask_model, summarize_execution
from vocapp.llm.answers import CommandAnswer, ReplyAnswer, is_not_understood
from vocapp.llm.backend import ModelBackend, ModelBackendError, get_backend
from vocapp.resolver.candidates import extract_candidate
from vocapp.resolver.matching import resolve_from_context, resolve_in_workdir, suggest_targets
from vocapp.resolver.ordinals import ordinal_index, suggestion_index
from vocapp.security.access import AccessConfigStore, AccessScope, get_access_store
from vocapp.security.command_policy import ReadOnlyPolicy, get_readonly_policy, has_shell_operators, is_blocked
from vocapp.session.history import compact_history, has_recent_execution_evidence, last_user_message
from vocapp.session.memory import PendingIntent, SessionMemory, SessionStore, get_session_store
from vocapp.translation.classifiers import classify_turn
from vocapp.translation.schemas import TurnIntents

logger = logging.getLogger(__name__)

SUMMARY_CHUNK_CHARS = 120


@dataclass
class TurnSettings:
    strict_grounded_fs: bool = config.STRICT_GROUNDED_FS
    auto_exec_readonly: bool = config.AUTO_EXEC_READONLY
    auto_summarize_reads: bool = config.AUTO_SUMMARIZE_READS


@dataclass
class TurnContext:
    text: str
    history: List[Dict[str, str]]
    memory: SessionMemory
    intents: TurnIntents
    scope: AccessScope
    root: str
    stream: TurnStream
    has_evidence: bool = False
    extracted: Optional[str] = None
    resolved: Optional[str] = None
    branch: str = ""


def chunk_text(text: str, size: int = SUMMARY_CHUNK_CHARS) -> List[str]:
    return [text[i:i + size] for i in range(0, len(text), size)]


def _hint(prefix: str, suggestions: List[str], fallback: str) -> str:
    if suggestions:
        return f"{prefix} Did you mean: {', '.join(suggestions)}?"
    return f"{prefix} {fallback}"


class TurnOrchestrator:
    def __init__(
        self,
        sessions: Optional[SessionStore] = None,
        pending: Optional[PendingCommandStore] = None,
        backend: Optional[ModelBackend] = None,
        access: Optional[AccessConfigStore] = None,
        readonly_policy: Optional[ReadOnlyPolicy] = None,
        settings: Optional[TurnSettings] = None,
    ):
        self.sessions = sessions or get_session_store()
        self.pending = pending or get_pending_store()
        self._backend = backend
        self.access = access or get_access_store()
        self.readonly_policy = readonly_policy or get_readonly_policy()
        self.settings = settings or TurnSettings()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def backend(self) -> ModelBackend:
        return self._backend or get_backend()

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def start(self, session_id: Optional[str], history: List[Dict[str, Any]]) -> TurnStream:
        """Launch the turn as a task and return its event stream."""
        stream = TurnStream()
        task = asyncio.create_task(self.run_turn(session_id, history, stream))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return stream

    async def run_turn(self, session_id: Optional[str], history: List[Dict[str, Any]], stream: TurnStream) -> None:
        memory = self.sessions.get(session_id)
        async with memory.lock:
            try:
                await self._handle(memory, history, stream)
            except ModelBackendError as e:
                logger.warning(f"[turn] model backend failed: {e}")
                stream.fail(f"Model backend unavailable: {e}")
            except Exception as e:
                logger.exception("[turn] unexpected error")
                stream.fail(str(e) or "Unexpected error in /api/chat")
            finally:
                if not stream.finished:
                    stream.fail("Turn ended without a result")

    # =========================================================================
    # PIPELINE
    # =========================================================================

    async def _handle(self, memory: SessionMemory, raw_history: List[Dict[str, Any]], stream: TurnStream) -> None:
        history = compact_history(raw_history)
        text = last_user_message(history)
        scope = self.access.get()
        ctx = TurnContext(
            text=text,
            history=history,
            memory=memory,
            intents=classify_turn(text),
            scope=scope,
            root=scope.effective_root(),
            stream=stream,
            has_evidence=has_recent_execution_evidence(history),
            extracted=extract_candidate(text),
        )

        if ctx.intents.targets_filesystem:
            ctx.resolved = await asyncio.to_thread(resolve_from_context, text, ctx.extracted, memory, ctx.root)
            if not ctx.resolved and ctx.intents.anaphora and memory.has_target:
                ctx.resolved = memory.last_target

        logger.debug(f"[turn] intents={ctx.intents.labels()} extracted={ctx.extracted!r} resolved={ctx.resolved!r}")

        stages = (
            self._suggestion_stage,
            self._ordinal_stage,
            self._declaration_stage,
            self._correction_stage,
            self._summary_stage,
            self._listing_stage,
            self._model_stage,
        )
        for stage in stages:
            if await stage(ctx):
                logger.info(f"[turn] branch={ctx.branch}")
                return

    def _finish(self, ctx: TurnContext, payload: Dict[str, Any], branch: str) -> bool:
        ctx.branch = branch
        ctx.stream.finish(payload)
        return True

    def _reply(self, ctx: TurnContext, message: str, branch: str) -> bool:
        return self._finish(ctx, {"type": "reply", "message": message}, branch)

    async def _inspect(self, target: str, root: str) -> ExecutionResult:
        return await asyncio.to_thread(run_internal_inspection, target, root, True)

    async def _deferred_summary(
        self,
        ctx: TurnContext,
        message: str,
        execution: ExecutionResult,
        branch: str,
        target: Optional[str] = None,
    ) -> bool:
        """
        Emit the execution result right away, then summarize it. The summary
        is dropped if the client disconnected in the meantime.
        """
        ctx.branch = branch
        quick = message or f"Command {'executed' if execution.ok else 'failed'}: {execution.command or 'no command'}"
        ctx.stream.emit({
            "type": "executed",
            "payload": {"type": "executed", "message": quick, **execution.model_dump()},
        })

        summary = ""
        if self.settings.auto_summarize_reads:
            summary = await summarize_execution(self.backend, ctx.text, execution, target=target)

        if ctx.stream.closed:
            logger.info("[summary] skipped, client disconnected")
            return True

        for piece in chunk_text(summary):
            ctx.stream.emit({"type": "token", "text": piece})
        ctx.stream.emit({"type": "summary_complete"})

        ctx.stream.finish({
            "type": "executed",
            "auto_approved": True,
            "message": quick,
            **execution.model_dump(),
            "summary": summary,
            "voice_summary": build_voice_summary(summary, ctx.intents.long_summary),
        })
        return True

    # =========================================================================
    # STAGES
    # =========================================================================

    async def _suggestion_stage(self, ctx: TurnContext) -> bool:
        memory = ctx.memory
        index = suggestion_index(ctx.text, len(memory.last_suggestions))
        if index is None:
            return False

        target = memory.last_suggestions[index]
        wanted_summary = memory.pending_intent == PendingIntent.AWAITING_SUMMARY_TARGET
        memory.set_target(target, action="select")

        if wanted_summary:
            execution = await self._inspect(target, ctx.root)
            memory.last_action = "summary"
            return await self._deferred_summary(
                ctx,
                f"Selected {target} (option {index + 1}) and summarized it.",
                execution,
                "suggestion_target_summary",
                target=target,
            )
        return self._reply(ctx, f"Got it, I'll use {target} (option {index + 1}).", "suggestion_target_reply")

    async def _ordinal_stage(self, ctx: TurnContext) -> bool:
        memory = ctx.memory
        intents = ctx.intents
        index = ordinal_index(ctx.text, len(memory.last_listing))
        if index is None:
            return False
        if not (
            intents.summary
            or intents.correction
            or intents.anaphora
            or intents.bare_ordinal
            or intents.list_reference
        ):
            return False

        target = memory.last_listing[index]
        memory.set_target(target, action="select")
        if intents.summary:
            execution = await self._inspect(target, ctx.root)
            memory.last_action = "summary"
            return await self._deferred_summary(
                ctx, f"Inspected {target} to summarize it.", execution, "ordinal_target_summary", target=target
            )
        return self._reply(
            ctx,
            f"Got it, {target} is the target folder. Tell me if you want a summary or a listing of its contents.",
            "ordinal_target_reply",
        )

    async def _declaration_stage(self, ctx: TurnContext) -> bool:
        if not ctx.intents.declaration:
            return False
        memory = ctx.memory
        if ctx.resolved:
            memory.set_target(ctx.resolved, action="declare")
            return self._reply(
                ctx, f"Got it, {ctx.resolved} is the target folder for the next steps.", "declaration_resolved"
            )

        suggestions = await asyncio.to_thread(suggest_targets, ctx.text, memory, ctx.root)
        memory.offer_suggestions(suggestions, PendingIntent.AWAITING_TARGET)
        return self._reply(
            ctx,
            _hint("I couldn't identify that name with certainty.", suggestions, "Tell me the exact folder name."),
            "declaration_suggestions",
        )

    async def _correction_stage(self, ctx: TurnContext) -> bool:
        if not (ctx.intents.correction and ctx.resolved):
            return False
        ctx.memory.set_target(ctx.resolved, action="correct")
        return self._reply(ctx, f"Understood, you mean {ctx.resolved}.", "correction_resolved")

    async def _summary_stage(self, ctx: TurnContext) -> bool:
        if not ctx.intents.summary:
            return False
        memory = ctx.memory
        target = ctx.resolved or (memory.last_target if memory.has_target else None)
        if not target:
            suggestions = await asyncio.to_thread(suggest_targets, ctx.text, memory, ctx.root)
            memory.offer_suggestions(suggestions, PendingIntent.AWAITING_SUMMARY_TARGET)
            return self._reply(
                ctx,
                _hint("I couldn't identify the exact folder.", suggestions, "Tell me the exact name or spell it."),
                "summary_suggestions",
            )

        execution = await self._inspect(target, ctx.root)
        if execution.ok and target_exists(target, ctx.root):
            memory.set_target(target, action="summary")
        memory.pending_intent = PendingIntent.NONE
        memory.last_command = execution.command
        return await self._deferred_summary(
            ctx, "Inspected the target folder to summarize it.", execution, "summary_execution", target=target
        )

    async def _listing_stage(self, ctx: TurnContext) -> bool:
        kind = ctx.intents.listing
        if kind is None:
            return False
        memory = ctx.memory
        if ctx.extracted and not ctx.resolved:
            suggestions = await asyncio.to_thread(suggest_targets, ctx.text, memory, ctx.root)
            memory.offer_suggestions(suggestions, PendingIntent.AWAITING_TARGET)
            return self._reply(
                ctx,
                _hint(f"I couldn't find a folder named {ctx.extracted}.", suggestions, "Tell me the exact folder name."),
                "listing_suggestions",
            )

        fallback = memory.last_target if (ctx.intents.anaphora and memory.has_target) else "."
        target = ctx.resolved or fallback
        include_hidden = ctx.intents.hidden

        execution = await asyncio.to_thread(run_internal_listing, target, kind, include_hidden, ctx.root)
        summary = build_listing_summary(kind, include_hidden, target, execution.stdout, execution.stderr)
        lines = execution.stdout_lines()
        found = execution.ok and not (lines and lines[0].startswith(LISTING_NOT_FOUND_PREFIX))
        if found:
            memory.remember_listing(target, lines)
            memory.last_command = execution.command
        memory.pending_intent = PendingIntent.NONE

        return self._finish(
            ctx,
            {
                "type": "executed",
                "auto_approved": True,
                "message": "Direct filesystem listing.",
                **execution.model_dump(),
                "summary": summary,
                "voice_summary": build_voice_summary(summary, ctx.intents.long_summary),
            },
            "listing_execution",
        )

    async def _model_stage(self, ctx: TurnContext) -> bool:
        memory = ctx.memory

        async def on_token(delta: str) -> None:
            ctx.stream.emit({"type": "token", "text": delta})

        # The current request is re-sent by ask_model with its resolved target.
        prior = ctx.history
        if prior and prior[-1].get("role") == "user":
            prior = prior[:-1]

        available_dirs = await asyncio.to_thread(list_root_directories, ctx.root)
        answer = await ask_model(
            self.backend,
            prior,
            ctx.text,
            memory,
            workdir=ctx.root,
            available_dirs=available_dirs,
            resolved_target=ctx.resolved,
            on_token=on_token,
        )

        if is_not_understood(answer):
            suggestions = await asyncio.to_thread(suggest_targets, ctx.text, memory, ctx.root)
            memory.offer_suggestions(suggestions, PendingIntent.NONE)
            return self._reply(
                ctx,
                _hint(
                    "I didn't quite understand.",
                    suggestions,
                    "Please repeat that or tell me the exact folder name.",
                ),
                "model_not_understood",
            )

        if (
            self.settings.strict_grounded_fs
            and ctx.intents.filesystem
            and not ctx.has_evidence
            and not isinstance(answer, CommandAnswer)
        ):
            return await self._grounding_guard(ctx)

        if isinstance(answer, CommandAnswer):
            return await self._command_answer(ctx, answer)

        message = answer.message if isinstance(answer, ReplyAnswer) else str(answer)
        return self._reply(ctx, message, "model_reply")

    async def _grounding_guard(self, ctx: TurnContext) -> bool:
        target = ctx.resolved or "."
        if self.settings.auto_exec_readonly:
            execution = await self._inspect(target, ctx.root)
            return await self._deferred_summary(
                ctx,
                "To answer accurately I inspected the filesystem first. Here is what I found.",
                execution,
                "grounded_fs_auto_execution",
                target=target,
            )

        if ctx.resolved:
            grounding_target = ctx.resolved
        else:
            grounding_target = await asyncio.to_thread(resolve_in_workdir, ctx.extracted, ctx.text, ctx.root)
        command = build_grounding_command(grounding_target)
        proposal = self.pending.propose(
            command,
            "To answer accurately I need to inspect the filesystem first. I propose this inspection command.",
        )
        return self._finish(ctx, proposal.model_dump(), "grounded_fs_command")

    async def _command_answer(self, ctx: TurnContext, answer: CommandAnswer) -> bool:
        memory = ctx.memory
        command = answer.command.strip()
        if not command:
            return self._reply(ctx, "No command was received to run.", "empty_command")
        if is_blocked(command):
            logger.warning(f"[turn] model proposed blocked command: {command!r}")
            return self._reply(ctx, f"I blocked that command for safety: {command}", "blocked_command")
        if has_shell_operators(command):
            logger.warning(f"[turn] model proposed shell operators: {command!r}")
            return self._reply(
                ctx,
                f"That command chains or redirects output, which is not supported: {command}",
                "shell_operator_command",
            )

        if self.settings.auto_exec_readonly and self.readonly_policy.is_read_only(command):
            execution = await execute_command(command, scope=ctx.scope)
            memory.last_command = command
            memory.last_action = "command"
            if execution.ok:
                resolved = await asyncio.to_thread(resolve_in_workdir, ctx.extracted, ctx.text, ctx.root)
                if resolved:
                    memory.set_target(resolved, action="command")
                else:
                    memory.last_suggestions = []
            return await self._deferred_summary(ctx, answer.message, execution, "readonly_command_execution")

        proposal = self.pending.propose(command, answer.message)
        return self._finish(ctx, proposal.model_dump(), "command_requires_approval")


_orchestrator: Optional[TurnOrchestrator] = None


def get_orchestrator() -> TurnOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = TurnOrchestrator()
    return _orchestrator
