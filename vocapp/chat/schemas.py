# FILE: vocapp/chat/schemas.py
"""
Pydantic models for POST /api/chat.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: str
    content: str = ""


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    history: List[ChatMessage] = Field(default_factory=list)

    def history_dicts(self) -> List[dict]:
        return [m.model_dump() for m in self.history]
