# FILE: tests/test_answers.py
"""Tests for decoding the agent's structured answer."""

import json

import pytest

from vocapp.llm.answers import (
    NOT_UNDERSTOOD,
    CommandAnswer,
    ReplyAnswer,
    UnparseableAnswer,
    as_reply,
    decode_answer,
    is_not_understood,
    parse_model_json,
)

COMMAND = {"type": "command", "message": "Listing.", "command": "ls -la"}


class TestDecodeAnswer:
    """Tagged results from messy model output."""

    def test_plain_reply(self):
        assert decode_answer('{"type": "reply", "message": "Hi there"}') == ReplyAnswer(message="Hi there")

    def test_command(self):
        assert decode_answer(json.dumps(COMMAND)) == CommandAnswer(message="Listing.", command="ls -la")

    def test_code_fence(self):
        raw = "```json\n" + json.dumps(COMMAND) + "\n```"
        assert decode_answer(raw) == CommandAnswer(message="Listing.", command="ls -la")

    def test_object_inside_prose(self):
        raw = "Sure! " + json.dumps(COMMAND) + " Let me know."
        assert decode_answer(raw) == CommandAnswer(message="Listing.", command="ls -la")

    def test_one_string_layer_unwrapped(self):
        raw = json.dumps(json.dumps(COMMAND))
        assert decode_answer(raw) == CommandAnswer(message="Listing.", command="ls -la")

    def test_two_string_layers_not_unwrapped(self):
        raw = json.dumps(json.dumps(json.dumps(COMMAND)))
        assert isinstance(decode_answer(raw), UnparseableAnswer)

    def test_command_type_without_command(self):
        answer = decode_answer('{"type": "command", "message": "Do it"}')
        assert answer == CommandAnswer(message="Do it", command="")

    def test_untyped_object(self):
        assert decode_answer('{"message": "m", "command": "pwd"}') == CommandAnswer(message="m", command="pwd")
        assert decode_answer('{"message": "just text"}') == ReplyAnswer(message="just text")

    def test_prose_only(self):
        assert decode_answer("The folder has two files.") == UnparseableAnswer(raw="The folder has two files.")

    def test_empty(self):
        assert decode_answer("") == UnparseableAnswer(raw="")
        assert decode_answer(None) == UnparseableAnswer(raw="")

    def test_parse_model_json_failure(self):
        assert parse_model_json("{not json}") is None
        assert parse_model_json("") is None


class TestReplyFallbacks:
    def test_prose_becomes_reply(self):
        assert as_reply(UnparseableAnswer(raw="hello")) == ReplyAnswer(message="hello")

    def test_nothing_becomes_not_understood(self):
        answer = as_reply(UnparseableAnswer(raw=""))
        assert answer == ReplyAnswer(message=NOT_UNDERSTOOD)
        assert is_not_understood(answer) is True

    def test_not_understood_markers(self):
        assert is_not_understood(ReplyAnswer(message="No te entendí bien, repite")) is True
        assert is_not_understood(ReplyAnswer(message="Done.")) is False
        assert is_not_understood(CommandAnswer(message="x", command="ls")) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
