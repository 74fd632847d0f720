"""
clover.api.auth — Registration, login & profile
================================================

Thin HTTP wrapper over :class:`~clover.services.auth_service.AuthService`.
The process holds a single session, so these routes act on that session
rather than issuing per-client tokens.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from clover.api.deps import get_auth, unwrap
from clover.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class RegisterBody(BaseModel):
    name: str
    email: str
    password: str


class LoginBody(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    location: str | None = None
    bio: str | None = None
    favorite_activities: list[str] | None = None


def _state_payload(auth: AuthService) -> dict:
    state = auth.get_state()
    return {"is_authenticated": state.is_authenticated, "user": state.user}


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/register", status_code=201)
def register(body: RegisterBody, auth: AuthService = Depends(get_auth)):
    user = unwrap(auth.register(body.name, body.email, body.password))
    return {"user": user}


@router.post("/login")
def login(body: LoginBody, auth: AuthService = Depends(get_auth)):
    user = unwrap(auth.login(body.email, body.password))
    return {"user": user}


@router.post("/logout")
def logout(auth: AuthService = Depends(get_auth)):
    auth.logout()
    return _state_payload(auth)


@router.get("/me")
def me(auth: AuthService = Depends(get_auth)):
    auth.refresh()
    return _state_payload(auth)


@router.patch("/profile")
def update_profile(body: ProfileUpdate, auth: AuthService = Depends(get_auth)):
    fields = body.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(400, "No fields to update")
    user = unwrap(auth.update_profile(**fields))
    return {"user": user}
