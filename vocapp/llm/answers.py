# FILE: vocapp/llm/answers.py
"""
Decoder for the agent's structured answer.

Models wrap the JSON in prose or code fences, and sometimes return the
object JSON-encoded inside a string. decode_answer peels one such string
layer and returns a tagged result:

    ReplyAnswer(message)
    CommandAnswer(message, command)     command may be "" (caller rejects it)
    UnparseableAnswer(raw)              raw text, possibly ""
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from vocapp.translation.normalize import fold

DEFAULT_COMMAND_MESSAGE = "Run the proposed command."
NOT_UNDERSTOOD = "I didn't quite understand."
NOT_UNDERSTOOD_MARKERS = (
    "no te entendi bien",
    "no pude interpretar",
    "i didn't quite understand",
    "i did not understand",
    "could not interpret",
)
MAX_UNWRAP = 1

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.I)
_FENCE_CLOSE = re.compile(r"\s*```$")


@dataclass(frozen=True)
class ReplyAnswer:
    message: str


@dataclass(frozen=True)
class CommandAnswer:
    message: str
    command: str


@dataclass(frozen=True)
class UnparseableAnswer:
    raw: str


ModelAnswer = Union[ReplyAnswer, CommandAnswer, UnparseableAnswer]


def parse_model_json(raw: Optional[str]) -> Any:
    """Best-effort JSON value from ``raw``; None when nothing parses."""
    if not raw:
        return None
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", raw.strip())).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError:
        return None


def _from_object(obj: dict) -> Optional[ModelAnswer]:
    kind = str(obj.get("type") or "").lower()
    message = obj.get("message")
    message = str(message) if message is not None else ""
    command = obj.get("command")
    command = command.strip() if isinstance(command, str) else ""

    if kind == "command":
        return CommandAnswer(message=message or DEFAULT_COMMAND_MESSAGE, command=command)
    if kind == "reply" and message:
        return ReplyAnswer(message=message)
    if message and command:
        return CommandAnswer(message=message, command=command)
    if message:
        return ReplyAnswer(message=message)
    if command:
        return CommandAnswer(message=DEFAULT_COMMAND_MESSAGE, command=command)
    return None


def decode_answer(raw: Optional[str]) -> ModelAnswer:
    text = (raw or "").strip()
    if not text:
        return UnparseableAnswer(raw="")

    parsed = parse_model_json(text)
    depth = 0
    while isinstance(parsed, str) and depth < MAX_UNWRAP:
        parsed = parse_model_json(parsed)
        depth += 1

    if isinstance(parsed, dict):
        answer = _from_object(parsed)
        if answer is not None:
            return answer
    return UnparseableAnswer(raw=text)


def as_reply(answer: ModelAnswer) -> ModelAnswer:
    """Unparseable text becomes a plain reply; no text at all becomes NOT_UNDERSTOOD."""
    if isinstance(answer, UnparseableAnswer):
        return ReplyAnswer(message=answer.raw or NOT_UNDERSTOOD)
    return answer


def is_not_understood(answer: ModelAnswer) -> bool:
    if isinstance(answer, UnparseableAnswer):
        return not answer.raw
    if isinstance(answer, ReplyAnswer):
        folded = fold(answer.message)
        return any(marker in folded for marker in NOT_UNDERSTOOD_MARKERS)
    return False
