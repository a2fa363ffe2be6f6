# FILE: tests/test_llm.py
"""Tests for the model backend seam, prompts and grounded summaries."""

from typing import List
from unittest.mock import patch

import pytest

from vocapp.execution.schemas import ExecutionResult
from vocapp.llm.agent import ask_model, contradicts_evidence, summarize_execution
from vocapp.llm.answers import CommandAnswer, ReplyAnswer
from vocapp.llm.backend import ModelBackendError, ProviderBackend
from vocapp.llm.prompts import build_summary_messages, build_system_prompt, build_user_message, trim_for_prompt
from vocapp.llm.streaming import stream_provider
from vocapp.session.memory import SessionMemory

INSPECTION = (
    "INSPECTION: FutbolDB\nREADME.md\nsrc/\n---DETAIL (max 200)---\n"
    "FutbolDB/README.md\nFutbolDB/src\n"
)


class ScriptedBackend:
    """Streams fixed chunks and returns a fixed summary."""

    def __init__(self, chunks=(), summary="", fail_after=None, summary_error=False):
        self.chunks = list(chunks)
        self.summary = summary
        self.fail_after = fail_after
        self.summary_error = summary_error
        self.messages: List = []

    async def stream_chat(self, messages, system_prompt):
        self.messages = messages
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise ModelBackendError("connection reset")
            yield chunk
        if self.fail_after is not None and self.fail_after >= len(self.chunks):
            raise ModelBackendError("connection reset")

    async def complete(self, messages, system_prompt):
        if self.summary_error:
            raise ModelBackendError("offline")
        return self.summary


def _events(*events):
    async def fake_stream_provider(provider, messages, system_prompt="", model=None, timeout_s=None):
        for event in events:
            yield event
    return fake_stream_provider


class TestProviderBackend:
    """Canonical stream events mapped to text or ModelBackendError."""

    @pytest.mark.asyncio
    async def test_tokens_joined(self):
        fake = _events(
            {"type": "metadata", "provider": "ollama", "model": "m"},
            {"type": "token", "text": "Hel"},
            {"type": "token", "text": "lo "},
            {"type": "done", "provider": "ollama", "model": "m"},
        )
        with patch("vocapp.llm.backend.stream_provider", fake):
            backend = ProviderBackend(provider="ollama", timeout_s=5)
            assert await backend.complete([], "sys") == "Hello"

    @pytest.mark.asyncio
    async def test_error_event_raises(self):
        fake = _events({"type": "token", "text": "x"}, {"type": "error", "message": "boom"})
        with patch("vocapp.llm.backend.stream_provider", fake):
            backend = ProviderBackend(provider="ollama", timeout_s=5)
            with pytest.raises(ModelBackendError, match="boom"):
                await backend.complete([], "sys")

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        events = [e async for e in stream_provider("nope", [])]
        assert events == [{"type": "error", "message": "Unknown provider: nope"}]

    @pytest.mark.asyncio
    async def test_unknown_provider_through_backend(self):
        backend = ProviderBackend(provider="nope", timeout_s=5)
        with pytest.raises(ModelBackendError, match="Unknown provider"):
            await backend.complete([], "sys")


class TestPrompts:
    def test_system_prompt_carries_context(self):
        memory = SessionMemory()
        memory.set_target("FutbolDB", action="declare")
        prompt = build_system_prompt(memory, "/home/u/Documents", ["FutbolDB", "Unity"], platform="linux")
        assert "- Working directory: /home/u/Documents" in prompt
        assert "- Available folders: FutbolDB, Unity" in prompt
        assert "- Last target: FutbolDB" in prompt
        assert "Memory:\nLast target: FutbolDB" in prompt

    def test_user_message(self):
        memory = SessionMemory(last_target="Unity")
        msg = build_user_message("open it", "FutbolDB", memory)
        assert msg == {
            "role": "user",
            "content": "Request: open it\nResolved target: FutbolDB\nLast target: Unity",
        }

    def test_summary_messages(self):
        execution = ExecutionResult(command="internal:inspect FutbolDB", cwd="/w", stdout=INSPECTION)
        [msg] = build_summary_messages("resume FutbolDB", execution, target="FutbolDB")
        assert "Confirmed target: FutbolDB" in msg["content"]
        assert "STDOUT:\nINSPECTION: FutbolDB" in msg["content"]

    def test_trim(self):
        assert trim_for_prompt("abc", max_len=5) == "abc"
        assert trim_for_prompt("abcdefgh", max_len=5) == "abcde\n...[truncated 3 characters]"


class TestAskModel:
    """Streaming the agent answer."""

    @pytest.mark.asyncio
    async def test_tokens_forwarded_and_decoded(self):
        backend = ScriptedBackend(chunks=['{"type": "command", ', '"message": "m", "command": "ls"}'])
        seen = []

        async def on_token(delta):
            seen.append(delta)

        answer = await ask_model(backend, [], "list", SessionMemory(), workdir="/w", on_token=on_token)
        assert answer == CommandAnswer(message="m", command="ls")
        assert seen == backend.chunks
        assert backend.messages[-1]["content"] == "Request: list"

    @pytest.mark.asyncio
    async def test_partial_output_survives_failure(self):
        backend = ScriptedBackend(chunks=["Partial answer"], fail_after=1)
        answer = await ask_model(backend, [], "hi", SessionMemory(), workdir="/w")
        assert answer == ReplyAnswer(message="Partial answer")

    @pytest.mark.asyncio
    async def test_failure_without_output_raises(self):
        backend = ScriptedBackend(chunks=[], fail_after=0)
        with pytest.raises(ModelBackendError):
            await ask_model(backend, [], "hi", SessionMemory(), workdir="/w")


class TestSummarizeExecution:
    """Model summaries are replaced when they contradict the evidence."""

    def test_contradiction(self):
        assert contradicts_evidence("That folder does not exist.", "FutbolDB") is True
        assert contradicts_evidence("FutbolDB does not exist elsewhere.", "FutbolDB") is False
        assert contradicts_evidence("It has a README.", "FutbolDB") is False

    @pytest.mark.asyncio
    async def test_honest_summary_kept(self):
        execution = ExecutionResult(command="internal:inspect FutbolDB", cwd="/w", stdout=INSPECTION)
        backend = ScriptedBackend(summary="  A football database with a README.  ")
        summary = await summarize_execution(backend, "resume", execution, target="FutbolDB")
        assert summary == "A football database with a README."

    @pytest.mark.asyncio
    async def test_contradicting_summary_replaced(self):
        execution = ExecutionResult(command="internal:inspect FutbolDB", cwd="/w", stdout=INSPECTION)
        backend = ScriptedBackend(summary="There is no evidence of that folder.")
        summary = await summarize_execution(backend, "resume", execution, target="FutbolDB")
        assert summary == "The folder FutbolDB contains 1 folder and 1 file at the top level: README.md, src."

    @pytest.mark.asyncio
    async def test_backend_failure_falls_back(self):
        execution = ExecutionResult(command="internal:inspect FutbolDB", cwd="/w", stdout=INSPECTION)
        backend = ScriptedBackend(summary_error=True)
        summary = await summarize_execution(backend, "resume", execution, target="FutbolDB")
        assert summary.startswith("The folder FutbolDB contains")

    @pytest.mark.asyncio
    async def test_no_target_returns_model_text(self):
        execution = ExecutionResult(command="ls", cwd="/w", stdout="a\nb\n")
        backend = ScriptedBackend(summary="Two entries.")
        assert await summarize_execution(backend, "list", execution) == "Two entries."


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
