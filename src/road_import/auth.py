"""JWT verification: FastAPI dependencies for Supabase Auth.

- ``get_current_user``: requires a valid JWT, returns the token claims.
- ``require_admin``: additionally requires the configured admin e-mail.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request

from road_import.config import settings

log = logging.getLogger(__name__)


def _extract_token(request: Request) -> Optional[str]:
    """Pull Bearer token from the Authorization header."""
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return None


def _decode_token(token: str) -> dict:
    """Decode and verify a Supabase JWT using HS256."""
    return jwt.decode(
        token,
        settings.supabase_jwt_secret,
        algorithms=["HS256"],
        audience="authenticated",
    )


async def get_current_user(request: Request) -> Dict[str, Any]:
    """FastAPI dependency — requires a valid JWT. Returns its claims."""
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token: no sub claim")
    return payload


def is_admin(email: Optional[str]) -> bool:
    if not email or not settings.admin_email:
        return False
    return email == settings.admin_email


async def require_admin(claims: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """FastAPI dependency — only the configured admin account passes."""
    if not is_admin(claims.get("email")):
        log.warning("Non-admin user %s attempted an admin call", claims.get("sub"))
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return claims
