# FILE: vocapp/chat/router.py
"""
Chat endpoint. Uses Server-Sent Events (SSE).

Each event line is "data: <json>\\n\\n". Event types:
    token            partial text (model tokens or summary chunks)
    executed         early execution result, before its summary
    summary_complete summary fully streamed
    final            the turn outcome; payload.type is reply | executed | command
    error            the turn failed after the stream started
"""
from __future__ import annotations

import json
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from vocapp.auth import AuthResult, require_token
from vocapp.chat.orchestrator import get_orchestrator
from vocapp.chat.schemas import ChatRequest
from vocapp.chat.stream import TurnStream
from vocapp.session.history import last_user_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


async def generate_sse_stream(stream: TurnStream) -> AsyncIterator[str]:
    try:
        async for event in stream.events():
            yield "data: " + json.dumps(event) + "\n\n"
    finally:
        # Reached on normal completion and when the client disconnects.
        if not stream.finished:
            logger.info("[chat] client disconnected mid-turn")
        stream.close()


@router.post("/chat")
async def chat(req: ChatRequest, auth: AuthResult = Depends(require_token)):
    history = req.history_dicts()
    if not last_user_message(history):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="history has no user message")

    stream = get_orchestrator().start(req.session_id, history)
    return StreamingResponse(
        generate_sse_stream(stream),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
