"""
clover.domain.entities — Entity Snapshots & Input Models
=========================================================

Everything the store hands back is a frozen pydantic snapshot built from
the ORM rows at read time.  Snapshots are copies: changing one never
changes stored state.  Mutations go through the store's update and
compound operations only.

The ``*Create`` models describe the caller-supplied fields of a new entity
(no id, no server-assigned defaults) and reject empty required text.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clover.database.models import ActivityStatus, LeaderboardPeriod

__all__ = [
    "Achievement",
    "AchievementCreate",
    "Activity",
    "ActivityCreate",
    "Comment",
    "CommentCreate",
    "Leaderboard",
    "LeaderboardCreate",
    "LeaderboardEntry",
    "Post",
    "PostCreate",
    "Team",
    "TeamCreate",
    "User",
    "UserCreate",
]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class Snapshot(BaseModel):
    """Base for read-only entity copies."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------
class Achievement(Snapshot):
    id: str
    title: str
    description: str = ""
    icon: str
    date_earned: dt.datetime
    category: str


class User(Snapshot):
    id: str
    name: str
    email: str
    avatar: str | None = None
    location: str | None = None
    bio: str | None = None
    joined_date: dt.datetime
    favorite_activities: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)
    events_attended: list[str] = Field(default_factory=list)
    events_hosted: list[str] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)


class Activity(Snapshot):
    id: str
    title: str
    description: str = ""
    category: str
    location: str
    date: dt.date
    time: str
    duration: float
    host_id: str
    participants: list[str] = Field(default_factory=list)
    max_participants: int | None = None
    image: str | None = None
    status: ActivityStatus = ActivityStatus.UPCOMING

    @property
    def is_full(self) -> bool:
        return (
            self.max_participants is not None
            and len(self.participants) >= self.max_participants
        )

    @property
    def spots_left(self) -> int | None:
        """Open places, or ``None`` when the activity has no cap."""
        if self.max_participants is None:
            return None
        return max(self.max_participants - len(self.participants), 0)


class Team(Snapshot):
    id: str
    name: str
    description: str = ""
    sport: str
    captain_id: str
    members: list[str] = Field(default_factory=list)
    location: str
    founded_date: dt.date
    logo: str | None = None
    upcoming_events: list[str] = Field(default_factory=list)


class Comment(Snapshot):
    id: str
    content: str
    author_id: str
    created_at: dt.datetime
    updated_at: dt.datetime | None = None
    likes: list[str] = Field(default_factory=list)


class Post(Snapshot):
    id: str
    title: str
    content: str
    author_id: str
    created_at: dt.datetime
    updated_at: dt.datetime | None = None
    category: str
    tags: list[str] = Field(default_factory=list)
    likes: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


class LeaderboardEntry(Snapshot):
    user_id: str
    score: float
    rank: int = Field(ge=1)


class Leaderboard(Snapshot):
    id: str
    title: str
    sport: str
    period: LeaderboardPeriod
    entries: list[LeaderboardEntry] = Field(default_factory=list)

    @property
    def ranked_entries(self) -> list[LeaderboardEntry]:
        """Entries in display order (ascending rank, stable for ties)."""
        return sorted(self.entries, key=lambda e: e.rank)


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------
class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=254)
    avatar: str | None = None
    location: str | None = None
    bio: str | None = None
    favorite_activities: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        value = value.strip()
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain:
            raise ValueError("email must look like name@domain")
        return value


class ActivityCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: str = Field(min_length=1, max_length=50)
    location: str = Field(min_length=1, max_length=200)
    date: dt.date
    time: str = Field(min_length=1, max_length=20)
    duration: float = Field(default=1.0, gt=0)
    host_id: str
    participants: list[str] = Field(default_factory=list)
    max_participants: int | None = Field(default=None, ge=1)
    image: str | None = None
    status: ActivityStatus = ActivityStatus.UPCOMING


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    sport: str = Field(min_length=1, max_length=50)
    captain_id: str
    members: list[str] = Field(default_factory=list)
    location: str = Field(min_length=1, max_length=200)
    founded_date: dt.date = Field(default_factory=lambda: _utcnow().date())
    logo: str | None = None
    upcoming_events: list[str] = Field(default_factory=list)


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    author_id: str
    category: str = "General"
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    author_id: str

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("comment text is required")
        return value


class AchievementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    icon: str = Field(min_length=1, max_length=50)
    category: str = "General"
    date_earned: dt.datetime = Field(default_factory=_utcnow)


class LeaderboardCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    sport: str = Field(min_length=1, max_length=50)
    period: LeaderboardPeriod
    entries: list[LeaderboardEntry] = Field(default_factory=list)
