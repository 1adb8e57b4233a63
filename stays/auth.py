"""Authentication dependencies for the HTTP API.

Sessions are issued upstream; by the time a request reaches this service the
gateway has resolved the user and forwards it in two headers:

  X-User-Id    the authenticated user's id
  X-User-Role  guest | host | admin (defaults to guest)

Admin-only endpoints (payment status) additionally require a bearer token.

Admin token behavior matrix:
  STAYS_ADMIN_API_KEY set + valid token   -> allow
  STAYS_ADMIN_API_KEY set + wrong/missing -> 401 Unauthorized
  STAYS_ADMIN_API_KEY empty + DEBUG=true  -> allow (local dev convenience)
  STAYS_ADMIN_API_KEY empty + DEBUG=false -> 403 Forbidden (locked in production)
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stays.config import settings
from stays.models import Actor, Role

log = logging.getLogger("stays.auth")

_bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> None:
    """FastAPI dependency: protect admin endpoints with a bearer token."""
    key = settings.admin_api_key

    if not key:
        # No key configured
        if settings.debug:
            return  # Local dev: allow without auth
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key not configured. Set STAYS_ADMIN_API_KEY in .env.",
        )

    if credentials is None or not secrets.compare_digest(credentials.credentials, key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin token.",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def optional_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor | None:
    """The forwarded user, or None for an anonymous guest checkout."""
    if not x_user_id:
        return None
    try:
        role = Role(x_user_role or Role.GUEST.value)
    except ValueError:
        log.warning("Rejected unknown role %r for user %s", x_user_role, x_user_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role {x_user_role!r}.",
        ) from None
    return Actor(user_id=x_user_id, role=role)


async def require_actor(actor: Actor | None = Depends(optional_actor)) -> Actor:
    """FastAPI dependency: the request must come from a signed-in user."""
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required.",
        )
    return actor
