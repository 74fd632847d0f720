"""
clover.database.models — SQLAlchemy 2.0 Data Models
=====================================================

In-memory schema backing :class:`~clover.services.store.Database`.

Tables:
- users                 — Community members (email unique, case-insensitive)
- activities            — Hosted sessions (matches, classes, meetups)
- activity_participants — Who joined which activity, in join order
- teams                 — Community teams
- team_members          — Who belongs to which team, in join order
- posts                 — Discussion threads
- comments              — Replies on a post, in arrival order
- achievements          — Achievement catalogue
- user_achievements     — Achievements earned, copied by value
- leaderboards          — Per-sport rankings for a period
- leaderboard_entries   — (user, score, rank) rows of a leaderboard

Every table carries an autoincrement ``pk`` that fixes insertion order and a
public string ``id`` handed to callers.  Membership lists are rows in the
association tables, so ``User.teams`` / ``User.events_attended`` /
``User.events_hosted`` are read from the same rows as ``Team.members`` /
``Activity.participants`` / ``Activity.host_id`` and cannot drift apart.
"""

from __future__ import annotations

import datetime as dt
import enum
import uuid

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_id() -> str:
    """Return a fresh opaque entity id."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Clover ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ActivityStatus(enum.StrEnum):
    """Lifecycle of a hosted activity."""
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LeaderboardPeriod(enum.StrEnum):
    """Time window a leaderboard ranks over."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ALL_TIME = "allTime"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    # Lower-cased, stripped copy of ``email`` used for lookups and uniqueness
    email_key: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), default=None)
    location: Mapped[str | None] = mapped_column(String(200), default=None)
    bio: Mapped[str | None] = mapped_column(Text, default=None)
    joined_date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    favorite_activities: Mapped[list] = mapped_column(JSON, default=list)
    # Never copied onto a snapshot
    password_hash: Mapped[str | None] = mapped_column(String(255), default=None)

    # Relationships
    hosted_activities: Mapped[list[Activity]] = relationship(
        back_populates="host", order_by="Activity.pk"
    )
    participations: Mapped[list[ActivityParticipant]] = relationship(
        back_populates="user", order_by="ActivityParticipant.pk"
    )
    memberships: Mapped[list[TeamMember]] = relationship(
        back_populates="user", order_by="TeamMember.pk"
    )
    achievements: Mapped[list[UserAchievement]] = relationship(
        back_populates="user", order_by="UserAchievement.pk", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------
class Activity(Base):
    __tablename__ = "activities"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(20), nullable=False)  # "10:00 AM"
    duration: Mapped[float] = mapped_column(Float, default=1.0)  # hours
    host_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    max_participants: Mapped[int | None] = mapped_column(Integer, default=None)
    image: Mapped[str | None] = mapped_column(String(500), default=None)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ActivityStatus.UPCOMING.value
    )

    host: Mapped[User] = relationship(back_populates="hosted_activities")
    participant_rows: Mapped[list[ActivityParticipant]] = relationship(
        back_populates="activity", order_by="ActivityParticipant.pk",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_activities_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Activity id={self.id} title={self.title!r} status={self.status}>"


class ActivityParticipant(Base):
    __tablename__ = "activity_participants"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("activities.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    activity: Mapped[Activity] = relationship(back_populates="participant_rows")
    user: Mapped[User] = relationship(back_populates="participations")

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_participants_activity_user"),
    )

    def __repr__(self) -> str:
        return f"<ActivityParticipant activity={self.activity_id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------
class Team(Base):
    __tablename__ = "teams"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    sport: Mapped[str] = mapped_column(String(50), nullable=False)
    captain_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    founded_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    logo: Mapped[str | None] = mapped_column(String(500), default=None)
    upcoming_events: Mapped[list] = mapped_column(JSON, default=list)

    member_rows: Mapped[list[TeamMember]] = relationship(
        back_populates="team", order_by="TeamMember.pk", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_teams_sport", "sport"),
    )

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r} sport={self.sport!r}>"


class TeamMember(Base):
    __tablename__ = "team_members"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[str] = mapped_column(String(36), ForeignKey("teams.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    team: Mapped[Team] = relationship(back_populates="member_rows")
    user: Mapped[User] = relationship(back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
    )

    def __repr__(self) -> str:
        return f"<TeamMember team={self.team_id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# Posts & comments
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="General")
    tags: Mapped[list] = mapped_column(JSON, default=list)
    likes: Mapped[list] = mapped_column(JSON, default=list)

    comments: Mapped[list[Comment]] = relationship(
        back_populates="post", order_by="Comment.pk", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id} title={self.title!r}>"


class Comment(Base):
    __tablename__ = "comments"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    post_id: Mapped[str] = mapped_column(String(36), ForeignKey("posts.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    likes: Mapped[list] = mapped_column(JSON, default=list)

    post: Mapped[Post] = relationship(back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment id={self.id} post={self.post_id}>"


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------
class Achievement(Base):
    __tablename__ = "achievements"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    icon: Mapped[str] = mapped_column(String(50), nullable=False)
    date_earned: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Achievement id={self.id} title={self.title!r}>"


class UserAchievement(Base):
    """An earned achievement.

    The catalogue fields are copied at award time, so later edits to the
    :class:`Achievement` row do not rewrite what a user already holds.
    """
    __tablename__ = "user_achievements"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    achievement_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    icon: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    date_earned: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="achievements")

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_ach"),
    )

    def __repr__(self) -> str:
        return f"<UserAchievement user={self.user_id} achievement={self.achievement_id}>"


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------
class Leaderboard(Base):
    __tablename__ = "leaderboards"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    sport: Mapped[str] = mapped_column(String(50), nullable=False)
    period: Mapped[str] = mapped_column(String(10), nullable=False)

    entries: Mapped[list[LeaderboardEntry]] = relationship(
        back_populates="leaderboard", order_by="LeaderboardEntry.pk",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Leaderboard id={self.id} sport={self.sport!r} period={self.period}>"


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard_entries"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    leaderboard_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("leaderboards.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)

    leaderboard: Mapped[Leaderboard] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return f"<LeaderboardEntry board={self.leaderboard_id} user={self.user_id} rank={self.rank}>"
