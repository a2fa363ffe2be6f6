# FILE: vocapp/auth.py
"""
API token authentication for the /api routes.

Accepts either "Authorization: Bearer <token>" or "X-API-Token: <token>".
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vocapp import config

security = HTTPBearer(auto_error=False)


@dataclass
class AuthResult:
    """Result of authentication check."""
    authenticated: bool
    via: Optional[str] = None


def _matches(candidate: Optional[str]) -> bool:
    return bool(candidate) and secrets.compare_digest(candidate, config.API_TOKEN)


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_api_token: Optional[str] = Header(default=None, alias="X-API-Token"),
) -> AuthResult:
    """
    Dependency that requires the process API token.

    Raises:
        HTTPException 401: missing or wrong token
    """
    if credentials and _matches(credentials.credentials):
        return AuthResult(authenticated=True, via="bearer")
    if _matches(x_api_token):
        return AuthResult(authenticated=True, via="header")

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API token",
        headers={"WWW-Authenticate": "Bearer"},
    )
