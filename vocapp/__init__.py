# FILE: vocapp/__init__.py
"""
vocapp - grounded voice/text filesystem agent.

Subpackages:
- translation: text normalization + intent classifiers (no LLM)
- resolver: fuzzy target resolution against the real filesystem
- session: per-conversation memory and history helpers
- fs: sandboxed listing/inspection + deterministic summaries
- security: command safety classifier + access scope sandbox
- execution: command executor, pending-command store, approve/reject API
- llm: model providers, prompts, structured answer decoding
- chat: turn orchestrator + SSE chat endpoint
"""

__version__ = "0.4.0"
