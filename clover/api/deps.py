"""
clover.api.deps — FastAPI dependency injection
===============================================

The store, session manager and notice buffer are built once by the app
lifespan and parked on ``app.state``; these helpers hand them to routes.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from clover.config import CloverConfig
from clover.domain.entities import User
from clover.errors import CloverError
from clover.services.auth_service import AuthResult, AuthService
from clover.services.notices import NoticeBuffer
from clover.services.store import Database


def get_config(request: Request) -> CloverConfig:
    return request.app.state.config


def get_store(request: Request) -> Database:
    return request.app.state.store


def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


def get_notices(request: Request) -> NoticeBuffer:
    return request.app.state.notices


def require_user(auth: AuthService = Depends(get_auth)) -> User:
    """Current session user.  Raises 401 if nobody is logged in."""
    user = auth.current_user
    if user is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    return user


def unwrap(result: AuthResult) -> User | None:
    """Return the user of a successful result or raise for a failed one.

    Domain errors are re-raised for the app's exception handlers; invalid
    input becomes a 422 carrying the notice text.
    """
    if result:
        return result.user
    error = result.error
    detail = result.notice.description if result.notice else "Request failed"
    if isinstance(error, CloverError):
        raise error
    if isinstance(error, ValueError):
        raise HTTPException(422, detail)
    raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
