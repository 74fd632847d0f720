"""
clover.api.routes.posts — Community forum
==========================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from clover.api.deps import get_store, require_user
from clover.constants import DEFAULT_POST_CATEGORY
from clover.domain.entities import CommentCreate, PostCreate, User
from clover.errors import NotFound
from clover.services.store import Database

router = APIRouter(prefix="/posts", tags=["posts"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class PostBody(BaseModel):
    title: str
    content: str
    category: str = DEFAULT_POST_CATEGORY
    tags: list[str] = Field(default_factory=list)


class PostUpdate(BaseModel):
    title: str | None = None
    content: str | None = None
    category: str | None = None
    tags: list[str] | None = None


class CommentBody(BaseModel):
    content: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.get("")
def list_posts(store: Database = Depends(get_store)):
    """Posts, newest first."""
    posts = sorted(store.list_posts(), key=lambda p: p.created_at, reverse=True)
    return {"posts": posts}


@router.get("/{post_id}")
def get_post(post_id: str, store: Database = Depends(get_store)):
    post = store.get_post_by_id(post_id)
    if post is None:
        raise NotFound("post", post_id)
    return post


@router.post("", status_code=201)
def create_post(
    body: PostBody,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
):
    return store.create_post(PostCreate(author_id=user.id, **body.model_dump()))


@router.patch("/{post_id}")
def update_post(
    post_id: str,
    body: PostUpdate,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
):
    post = store.get_post_by_id(post_id)
    if post is None:
        raise NotFound("post", post_id)
    if post.author_id != user.id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Only the author can edit this post")
    fields = body.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(400, "No fields to update")
    return store.update_post(post_id, **fields)


@router.post("/{post_id}/comments", status_code=201)
def add_comment(
    post_id: str,
    body: CommentBody,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
):
    post = store.add_comment(post_id, CommentCreate(content=body.content, author_id=user.id))
    if post is None:
        raise NotFound("post", post_id)
    return post
