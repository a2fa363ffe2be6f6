# FILE: vocapp/llm/__init__.py
"""Model backend, prompts, answer decoding and summarization."""

from vocapp.llm.backend import (
    ModelBackend,
    ModelBackendError,
    ProviderBackend,
    get_backend,
    set_backend,
)
from vocapp.llm.answers import (
    ReplyAnswer,
    CommandAnswer,
    UnparseableAnswer,
    ModelAnswer,
    decode_answer,
    parse_model_json,
    is_not_understood,
)
from vocapp.llm.agent import ask_model, summarize_execution, contradicts_evidence

__all__ = [
    "ModelBackend",
    "ModelBackendError",
    "ProviderBackend",
    "get_backend",
    "set_backend",
    "ReplyAnswer",
    "CommandAnswer",
    "UnparseableAnswer",
    "ModelAnswer",
    "decode_answer",
    "parse_model_json",
    "is_not_understood",
    "ask_model",
    "summarize_execution",
    "contradicts_evidence",
]
