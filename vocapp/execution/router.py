# FILE: vocapp/execution/router.py
"""
Execution and access-scope endpoints.

POST /api/execute  {token}  -> ExecutionResult (400 on invalid/expired token)
POST /api/reject   {token}  -> {ok: true, removed}
GET  /api/access            -> {mode, allowedPaths}
POST /api/access   {mode, allowedPaths} -> {mode, allowedPaths} (400 on bad config)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from vocapp.auth import AuthResult, require_token
from vocapp.execution.pending import get_pending_store
from vocapp.execution.schemas import AccessConfigPayload, ExecutionResult, RejectResponse, TokenRequest
from vocapp.security.access import AccessConfigError, get_access_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["execution"])


@router.post("/execute", response_model=ExecutionResult)
async def approve_command(req: TokenRequest, auth: AuthResult = Depends(require_token)):
    """Approve a pending command and run it."""
    result = await get_pending_store().approve(req.token)
    if result is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token.")
    return result


@router.post("/reject", response_model=RejectResponse)
async def reject_command(req: TokenRequest, auth: AuthResult = Depends(require_token)):
    """Discard a pending command. Always acknowledged."""
    removed = get_pending_store().reject(req.token)
    return RejectResponse(removed=removed)


@router.get("/access")
async def get_access(auth: AuthResult = Depends(require_token)):
    return get_access_store().get().to_payload()


@router.post("/access")
async def update_access(req: AccessConfigPayload, auth: AuthResult = Depends(require_token)):
    try:
        scope = get_access_store().update(req.mode, req.allowed_paths)
    except AccessConfigError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return scope.to_payload()
