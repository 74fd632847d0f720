"""
clover.services.store — The Community Data Store
=================================================

:class:`Database` is the sole authority over Clover's entity collections
(users, activities, teams, posts, achievements, leaderboards).

Every operation follows the same pattern:
  1. Take the store lock
  2. Open a session on the in-memory engine
  3. Read / validate / apply the change
  4. Commit (or roll back if anything raised)
  5. Return a frozen snapshot built from the committed rows

Relationship back-references are never written directly.  A user's
``teams`` / ``events_attended`` / ``events_hosted`` are read from the
membership rows that ``join_team`` / ``join_activity`` / ``create_*`` add,
and the generic ``update_*`` operations refuse to touch those lists.

Misses are ordinary results (``None``); only genuinely exceptional
conditions raise (:class:`~clover.errors.CapacityExceeded`,
:class:`~clover.errors.EmailAlreadyInUse`).
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import Engine, or_, select
from sqlalchemy.orm import Session

from clover.database import models
from clover.database.engine import create_memory_engine, get_session, init_db
from clover.domain.entities import (
    Achievement,
    AchievementCreate,
    Activity,
    ActivityCreate,
    Comment,
    CommentCreate,
    Leaderboard,
    LeaderboardCreate,
    LeaderboardEntry,
    Post,
    PostCreate,
    Team,
    TeamCreate,
    User,
    UserCreate,
)
from clover.errors import CapacityExceeded, EmailAlreadyInUse

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)
Row = TypeVar("Row", bound=models.Base)

# ---------------------------------------------------------------------------
# Fields each ``update_*`` operation may change.  Everything else (ids,
# creation stamps, membership lists, comments) is owned by the store.
# ---------------------------------------------------------------------------
USER_EDITABLE: frozenset[str] = frozenset({
    "name", "email", "avatar", "location", "bio", "favorite_activities",
})
ACTIVITY_EDITABLE: frozenset[str] = frozenset({
    "title", "description", "category", "location", "date", "time",
    "duration", "host_id", "max_participants", "image", "status",
})
TEAM_EDITABLE: frozenset[str] = frozenset({
    "name", "description", "sport", "captain_id", "location",
    "founded_date", "logo", "upcoming_events",
})
POST_EDITABLE: frozenset[str] = frozenset({
    "title", "content", "category", "tags", "likes",
})
ACHIEVEMENT_EDITABLE: frozenset[str] = frozenset({
    "title", "description", "icon", "date_earned", "category",
})
LEADERBOARD_EDITABLE: frozenset[str] = frozenset({
    "title", "sport", "period", "entries",
})


def normalize_email(email: str) -> str:
    """Lookup key for *email*: stripped and lower-cased."""
    return email.strip().lower()


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def _as_utc(value: dt.datetime | None) -> dt.datetime | None:
    """SQLite drops tzinfo on the way back; every stored stamp is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=dt.UTC)


def _unique(ids: Iterable[str]) -> list[str]:
    """De-duplicate *ids*, keeping first-seen order."""
    return list(dict.fromkeys(ids))


# ---------------------------------------------------------------------------
# Row → snapshot converters (must run inside an open session)
# ---------------------------------------------------------------------------
def _to_user(row: models.User) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        avatar=row.avatar,
        location=row.location,
        bio=row.bio,
        joined_date=_as_utc(row.joined_date),
        favorite_activities=list(row.favorite_activities or []),
        teams=[m.team_id for m in row.memberships],
        events_attended=[p.activity_id for p in row.participations],
        events_hosted=[a.id for a in row.hosted_activities],
        achievements=[
            Achievement(
                id=ua.achievement_id,
                title=ua.title,
                description=ua.description,
                icon=ua.icon,
                date_earned=_as_utc(ua.date_earned),
                category=ua.category,
            )
            for ua in row.achievements
        ],
    )


def _to_activity(row: models.Activity) -> Activity:
    return Activity(
        id=row.id,
        title=row.title,
        description=row.description,
        category=row.category,
        location=row.location,
        date=row.date,
        time=row.time,
        duration=row.duration,
        host_id=row.host_id,
        participants=[p.user_id for p in row.participant_rows],
        max_participants=row.max_participants,
        image=row.image,
        status=row.status,
    )


def _to_team(row: models.Team) -> Team:
    return Team(
        id=row.id,
        name=row.name,
        description=row.description,
        sport=row.sport,
        captain_id=row.captain_id,
        members=[m.user_id for m in row.member_rows],
        location=row.location,
        founded_date=row.founded_date,
        logo=row.logo,
        upcoming_events=list(row.upcoming_events or []),
    )


def _to_comment(row: models.Comment) -> Comment:
    return Comment(
        id=row.id,
        content=row.content,
        author_id=row.author_id,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
        likes=list(row.likes or []),
    )


def _to_post(row: models.Post) -> Post:
    return Post(
        id=row.id,
        title=row.title,
        content=row.content,
        author_id=row.author_id,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
        category=row.category,
        tags=list(row.tags or []),
        likes=list(row.likes or []),
        comments=[_to_comment(c) for c in row.comments],
    )


def _to_achievement(row: models.Achievement) -> Achievement:
    return Achievement(
        id=row.id,
        title=row.title,
        description=row.description,
        icon=row.icon,
        date_earned=_as_utc(row.date_earned),
        category=row.category,
    )


def _to_leaderboard(row: models.Leaderboard) -> Leaderboard:
    return Leaderboard(
        id=row.id,
        title=row.title,
        sport=row.sport,
        period=row.period,
        entries=[
            LeaderboardEntry(user_id=e.user_id, score=e.score, rank=e.rank)
            for e in row.entries
        ],
    )


def _find(session: Session, model: type[Row], entity_id: str) -> Row | None:
    return session.scalar(select(model).where(model.id == entity_id))


def _column_value(value: Any) -> Any:
    """Convert a validated snapshot value into what the column stores."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str):  # StrEnum members are str
        return str(value)
    return value


def _editable_changes(kind: str, fields: dict[str, Any], editable: frozenset[str]) -> dict[str, Any]:
    """Split *fields* into the editable subset; ignored keys are logged."""
    ignored = sorted(k for k in fields if k not in editable)
    if ignored:
        logger.debug("update_%s ignoring non-editable fields: %s", kind, ", ".join(ignored))
    return {k: v for k, v in fields.items() if k in editable}


def _merge(current: S, changes: dict[str, Any], rules: type[BaseModel] | None = None) -> S:
    """Shallow-merge *changes* into *current*, re-validating the result.

    With *rules* (the kind's ``*Create`` model) the merged record must also
    pass the checks a new record would; normalised values (stripped name,
    stripped email) replace the raw changes.

    Raises :class:`pydantic.ValidationError` for ill-typed values.
    """
    merged = type(current).model_validate({**current.model_dump(), **changes})
    if rules is None:
        return merged
    checked = rules.model_validate(merged.model_dump(include=set(rules.model_fields)))
    normalised = {k: getattr(checked, k) for k in changes if k in rules.model_fields}
    return merged.model_copy(update=normalised)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
class Database:
    """In-memory store for the whole community.

    Construct one per process and hand it to collaborators::

        store = Database()
        seed_sample_data(store)
        auth = AuthService(store, slot, secret=...)

    All public methods are synchronous and serialised by an internal
    re-entrant lock.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine if engine is not None else create_memory_engine()
        init_db(self._engine)
        self._lock = threading.RLock()

    @property
    def engine(self) -> Engine:
        return self._engine

    # -------------------------------------------------------------------
    # Generic helpers
    # -------------------------------------------------------------------
    def _list(self, model: type[Row], convert: Callable[[Row], S], *where) -> list[S]:
        with self._lock, get_session(self._engine) as session:
            rows = session.scalars(select(model).where(*where).order_by(model.pk)).all()
            return [convert(r) for r in rows]

    def _get(self, model: type[Row], convert: Callable[[Row], S], entity_id: str) -> S | None:
        with self._lock, get_session(self._engine) as session:
            row = _find(session, model, entity_id)
            return convert(row) if row is not None else None

    def _update(
        self,
        model: type[Row],
        convert: Callable[[Row], S],
        entity_id: str,
        fields: dict[str, Any],
        editable: frozenset[str],
        *,
        rules: type[BaseModel] | None = None,
        check: Callable[[Session, Row, S], None] | None = None,
        stamp_updated: bool = False,
    ) -> S | None:
        """Validated shallow merge shared by the ``update_*`` operations.

        get → snapshot → merge + re-validate against *rules* → *check* → write columns.
        Returns the updated snapshot, or ``None`` if *entity_id* is unknown.
        """
        kind = model.__name__.lower()
        changes = _editable_changes(kind, fields, editable)
        with self._lock:
            with get_session(self._engine) as session:
                row = _find(session, model, entity_id)
                if row is None:
                    return None
                merged = _merge(convert(row), changes, rules)
                if check is not None:
                    check(session, row, merged)
                for key in changes:
                    if key == "entries":
                        continue  # rebuilt by the leaderboard check
                    setattr(row, key, _column_value(getattr(merged, key)))
                if stamp_updated:
                    row.updated_at = _utcnow()
            if changes:
                logger.debug("Updated %s %s: %s", kind, entity_id, ", ".join(sorted(changes)))
            return self._get(model, convert, entity_id)

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------
    def list_users(self) -> list[User]:
        return self._list(models.User, _to_user)

    def get_user_by_id(self, user_id: str) -> User | None:
        return self._get(models.User, _to_user, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup by email address."""
        key = normalize_email(email)
        with self._lock, get_session(self._engine) as session:
            row = session.scalar(select(models.User).where(models.User.email_key == key))
            return _to_user(row) if row is not None else None

    def create_user(self, data: UserCreate) -> User:
        """Add a member.

        Raises
        ------
        EmailAlreadyInUse
            If another user holds the same email (ignoring case).
        """
        key = normalize_email(data.email)
        with self._lock:
            with get_session(self._engine) as session:
                taken = session.scalar(
                    select(models.User.pk).where(models.User.email_key == key)
                )
                if taken is not None:
                    raise EmailAlreadyInUse(data.email)
                row = models.User(
                    name=data.name,
                    email=data.email,
                    email_key=key,
                    avatar=data.avatar,
                    location=data.location,
                    bio=data.bio,
                    joined_date=_utcnow(),
                    favorite_activities=list(data.favorite_activities),
                )
                session.add(row)
                session.flush()
                user_id = row.id
            logger.info("Created user %s (%s)", user_id, data.email)
            return self.get_user_by_id(user_id)

    def update_user(self, user_id: str, **fields: Any) -> User | None:
        """Shallow-merge profile fields.

        ``teams``, ``events_attended``, ``events_hosted`` and
        ``achievements`` are ignored; use the compound operations.
        """

        def check(session: Session, row: models.User, merged: User) -> None:
            key = normalize_email(merged.email)
            if key != row.email_key:
                other = session.scalar(
                    select(models.User.pk).where(models.User.email_key == key)
                )
                if other is not None:
                    raise EmailAlreadyInUse(merged.email)
                row.email_key = key

        return self._update(
            models.User, _to_user, user_id, fields, USER_EDITABLE,
            rules=UserCreate, check=check,
        )

    # -- credentials --------------------------------------------------------
    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Store *password_hash* for a user.  ``False`` if the id is unknown."""
        with self._lock, get_session(self._engine) as session:
            row = _find(session, models.User, user_id)
            if row is None:
                return False
            row.password_hash = password_hash
            return True

    def get_password_hash(self, user_id: str) -> str | None:
        with self._lock, get_session(self._engine) as session:
            row = _find(session, models.User, user_id)
            return row.password_hash if row is not None else None

    # -------------------------------------------------------------------
    # Activities
    # -------------------------------------------------------------------
    def list_activities(self) -> list[Activity]:
        return self._list(models.Activity, _to_activity)

    def filter_activities(
        self, category: str | None = None, status: str | None = None
    ) -> list[Activity]:
        """Activities matching *category* and/or *status* (exact match)."""
        where = []
        if category:
            where.append(models.Activity.category == category)
        if status:
            where.append(models.Activity.status == str(status))
        return self._list(models.Activity, _to_activity, *where)

    def get_activity_by_id(self, activity_id: str) -> Activity | None:
        return self._get(models.Activity, _to_activity, activity_id)

    def create_activity(self, data: ActivityCreate) -> Activity:
        """Add an activity and link its host and initial participants.

        Initial participants are de-duplicated; ids that do not resolve to
        a user are dropped before the cap is checked.

        Raises
        ------
        CapacityExceeded
            If more known initial participants are given than
            ``max_participants``.
        """
        activity_id = models.new_id()

        with self._lock:
            with get_session(self._engine) as session:
                participants = []
                for uid in _unique(data.participants):
                    user = _find(session, models.User, uid)
                    if user is None:
                        logger.warning("Skipping unknown participant %s for %s", uid, activity_id)
                        continue
                    participants.append(user)
                if data.max_participants is not None and len(participants) > data.max_participants:
                    raise CapacityExceeded(activity_id, data.max_participants)

                host = _find(session, models.User, data.host_id)
                if host is None:
                    logger.warning(
                        "Activity %r created with unknown host %s", data.title, data.host_id
                    )
                row = models.Activity(
                    id=activity_id,
                    title=data.title,
                    description=data.description,
                    category=data.category,
                    location=data.location,
                    date=data.date,
                    time=data.time,
                    duration=data.duration,
                    host_id=data.host_id,
                    max_participants=data.max_participants,
                    image=data.image,
                    status=str(data.status),
                )
                session.add(row)
                for user in participants:
                    session.add(models.ActivityParticipant(activity=row, user=user))
            logger.info("Created activity %s (%s) hosted by %s", activity_id, data.title, data.host_id)
            return self.get_activity_by_id(activity_id)

    def update_activity(self, activity_id: str, **fields: Any) -> Activity | None:
        """Shallow-merge activity fields; ``participants`` is ignored.

        Raises
        ------
        CapacityExceeded
            If ``max_participants`` would drop below the current participant count.
        """

        def check(session: Session, row: models.Activity, merged: Activity) -> None:
            if merged.max_participants is not None and len(merged.participants) > merged.max_participants:
                raise CapacityExceeded(row.id, merged.max_participants)

        return self._update(
            models.Activity, _to_activity, activity_id, fields, ACTIVITY_EDITABLE,
            rules=ActivityCreate, check=check,
        )

    def join_activity(self, activity_id: str, user_id: str) -> Activity | None:
        """Add *user_id* to an activity's participants.

        Joining an activity the user already belongs to changes nothing.
        Returns ``None`` if either id does not resolve.

        Raises
        ------
        CapacityExceeded
            If the activity has a cap and it has been reached.
        """
        with self._lock:
            with get_session(self._engine) as session:
                activity = _find(session, models.Activity, activity_id)
                user = _find(session, models.User, user_id)
                if activity is None or user is None:
                    return None
                joined = [p.user_id for p in activity.participant_rows]
                if user_id in joined:
                    logger.debug("User %s already in activity %s", user_id, activity_id)
                else:
                    cap = activity.max_participants
                    if cap is not None and len(joined) >= cap:
                        raise CapacityExceeded(activity_id, cap)
                    session.add(models.ActivityParticipant(activity=activity, user=user))
                    logger.info("User %s joined activity %s", user_id, activity_id)
            return self.get_activity_by_id(activity_id)

    def activities_for_user(self, user_id: str) -> list[Activity]:
        """Activities *user_id* hosts or participates in, in insertion order."""
        joined = select(models.ActivityParticipant.activity_id).where(
            models.ActivityParticipant.user_id == user_id
        )
        return self._list(
            models.Activity,
            _to_activity,
            or_(models.Activity.host_id == user_id, models.Activity.id.in_(joined)),
        )

    # -------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------
    def list_teams(self) -> list[Team]:
        return self._list(models.Team, _to_team)

    def get_team_by_id(self, team_id: str) -> Team | None:
        return self._get(models.Team, _to_team, team_id)

    def search_teams(self, term: str = "", sport: str | None = None) -> list[Team]:
        """Teams whose name or description contains *term* (any case),
        optionally restricted to one *sport*."""
        where = []
        term = term.strip()
        if term:
            where.append(or_(
                models.Team.name.icontains(term, autoescape=True),
                models.Team.description.icontains(term, autoescape=True),
            ))
        if sport:
            where.append(models.Team.sport == sport)
        return self._list(models.Team, _to_team, *where)

    def create_team(self, data: TeamCreate) -> Team:
        """Add a team; each listed member gains the team in ``teams``.

        Members are de-duplicated; ids that do not resolve are dropped.
        The captain is not added implicitly.
        """
        team_id = models.new_id()
        with self._lock:
            with get_session(self._engine) as session:
                row = models.Team(
                    id=team_id,
                    name=data.name,
                    description=data.description,
                    sport=data.sport,
                    captain_id=data.captain_id,
                    location=data.location,
                    founded_date=data.founded_date,
                    logo=data.logo,
                    upcoming_events=list(data.upcoming_events),
                )
                session.add(row)
                for uid in _unique(data.members):
                    user = _find(session, models.User, uid)
                    if user is None:
                        logger.warning("Skipping unknown member %s for team %s", uid, team_id)
                        continue
                    session.add(models.TeamMember(team=row, user=user))
            logger.info("Created team %s (%s)", team_id, data.name)
            return self.get_team_by_id(team_id)

    def update_team(self, team_id: str, **fields: Any) -> Team | None:
        """Shallow-merge team fields; ``members`` is ignored."""
        return self._update(models.Team, _to_team, team_id, fields, TEAM_EDITABLE, rules=TeamCreate)

    def join_team(self, team_id: str, user_id: str) -> Team | None:
        """Add *user_id* to a team's members (no-op if already a member).

        Returns ``None`` if either id does not resolve.
        """
        with self._lock:
            with get_session(self._engine) as session:
                team = _find(session, models.Team, team_id)
                user = _find(session, models.User, user_id)
                if team is None or user is None:
                    return None
                if any(m.user_id == user_id for m in team.member_rows):
                    logger.debug("User %s already in team %s", user_id, team_id)
                else:
                    session.add(models.TeamMember(team=team, user=user))
                    logger.info("User %s joined team %s", user_id, team_id)
            return self.get_team_by_id(team_id)

    def teams_for_user(self, user_id: str) -> list[Team]:
        """Teams *user_id* captains or belongs to, in insertion order."""
        member_of = select(models.TeamMember.team_id).where(
            models.TeamMember.user_id == user_id
        )
        return self._list(
            models.Team,
            _to_team,
            or_(models.Team.captain_id == user_id, models.Team.id.in_(member_of)),
        )

    # -------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------
    def list_posts(self) -> list[Post]:
        return self._list(models.Post, _to_post)

    def get_post_by_id(self, post_id: str) -> Post | None:
        return self._get(models.Post, _to_post, post_id)

    def create_post(self, data: PostCreate) -> Post:
        post_id = models.new_id()
        with self._lock:
            with get_session(self._engine) as session:
                session.add(models.Post(
                    id=post_id,
                    title=data.title,
                    content=data.content,
                    author_id=data.author_id,
                    created_at=_utcnow(),
                    category=data.category,
                    tags=list(data.tags),
                    likes=[],
                ))
            logger.info("Created post %s by %s", post_id, data.author_id)
            return self.get_post_by_id(post_id)

    def update_post(self, post_id: str, **fields: Any) -> Post | None:
        """Shallow-merge post fields and stamp ``updated_at``.

        ``comments`` is ignored; use :meth:`add_comment`.
        """
        return self._update(
            models.Post, _to_post, post_id, fields, POST_EDITABLE,
            rules=PostCreate, stamp_updated=True,
        )

    def add_comment(self, post_id: str, data: CommentCreate) -> Post | None:
        """Append a comment to a post and stamp the post's ``updated_at``.

        Returns the updated post, or ``None`` if *post_id* is unknown.
        """
        with self._lock:
            with get_session(self._engine) as session:
                post = _find(session, models.Post, post_id)
                if post is None:
                    return None
                now = _utcnow()
                session.add(models.Comment(
                    post=post,
                    content=data.content,
                    author_id=data.author_id,
                    created_at=now,
                    likes=[],
                ))
                post.updated_at = now
            logger.info("Comment by %s added to post %s", data.author_id, post_id)
            return self.get_post_by_id(post_id)

    # -------------------------------------------------------------------
    # Achievements
    # -------------------------------------------------------------------
    def list_achievements(self) -> list[Achievement]:
        return self._list(models.Achievement, _to_achievement)

    def get_achievement_by_id(self, achievement_id: str) -> Achievement | None:
        return self._get(models.Achievement, _to_achievement, achievement_id)

    def create_achievement(self, data: AchievementCreate) -> Achievement:
        achievement_id = models.new_id()
        with self._lock:
            with get_session(self._engine) as session:
                session.add(models.Achievement(
                    id=achievement_id,
                    title=data.title,
                    description=data.description,
                    icon=data.icon,
                    date_earned=data.date_earned,
                    category=data.category,
                ))
            logger.info("Created achievement %s (%s)", achievement_id, data.title)
            return self.get_achievement_by_id(achievement_id)

    def update_achievement(self, achievement_id: str, **fields: Any) -> Achievement | None:
        """Edit the catalogue entry.  Copies already awarded are unchanged."""
        return self._update(
            models.Achievement, _to_achievement, achievement_id, fields, ACHIEVEMENT_EDITABLE,
            rules=AchievementCreate,
        )

    def award_achievement(self, user_id: str, achievement_id: str) -> User | None:
        """Give a user an achievement, copied by value.

        Awarding an achievement the user already holds changes nothing.
        Returns ``None`` if either id does not resolve.
        """
        with self._lock:
            with get_session(self._engine) as session:
                user = _find(session, models.User, user_id)
                achievement = _find(session, models.Achievement, achievement_id)
                if user is None or achievement is None:
                    return None
                if any(ua.achievement_id == achievement_id for ua in user.achievements):
                    logger.debug("User %s already holds achievement %s", user_id, achievement_id)
                else:
                    session.add(models.UserAchievement(
                        user=user,
                        achievement_id=achievement.id,
                        title=achievement.title,
                        description=achievement.description,
                        icon=achievement.icon,
                        category=achievement.category,
                        date_earned=_utcnow(),
                    ))
                    logger.info("Awarded achievement %s to user %s", achievement_id, user_id)
            return self.get_user_by_id(user_id)

    # -------------------------------------------------------------------
    # Leaderboards
    # -------------------------------------------------------------------
    def list_leaderboards(self) -> list[Leaderboard]:
        return self._list(models.Leaderboard, _to_leaderboard)

    def filter_leaderboards(
        self, sport: str | None = None, period: str | None = None
    ) -> list[Leaderboard]:
        """Leaderboards for *sport* and/or *period*; ``None`` means any."""
        where = []
        if sport:
            where.append(models.Leaderboard.sport == sport)
        if period:
            where.append(models.Leaderboard.period == str(period))
        return self._list(models.Leaderboard, _to_leaderboard, *where)

    def get_leaderboard_by_id(self, leaderboard_id: str) -> Leaderboard | None:
        return self._get(models.Leaderboard, _to_leaderboard, leaderboard_id)

    def create_leaderboard(self, data: LeaderboardCreate) -> Leaderboard:
        leaderboard_id = models.new_id()
        with self._lock:
            with get_session(self._engine) as session:
                row = models.Leaderboard(
                    id=leaderboard_id,
                    title=data.title,
                    sport=data.sport,
                    period=str(data.period),
                )
                row.entries = [
                    models.LeaderboardEntry(user_id=e.user_id, score=e.score, rank=e.rank)
                    for e in data.entries
                ]
                session.add(row)
            logger.info("Created leaderboard %s (%s)", leaderboard_id, data.title)
            return self.get_leaderboard_by_id(leaderboard_id)

    def update_leaderboard(self, leaderboard_id: str, **fields: Any) -> Leaderboard | None:
        """Shallow-merge leaderboard fields; ``entries`` replaces the whole list."""

        def check(session: Session, row: models.Leaderboard, merged: Leaderboard) -> None:
            if "entries" in fields:
                row.entries = [
                    models.LeaderboardEntry(user_id=e.user_id, score=e.score, rank=e.rank)
                    for e in merged.entries
                ]

        return self._update(
            models.Leaderboard, _to_leaderboard, leaderboard_id, fields,
            LEADERBOARD_EDITABLE, rules=LeaderboardCreate, check=check,
        )

    # -------------------------------------------------------------------
    # Cross-collection reads
    # -------------------------------------------------------------------
    def list_sports(self) -> list[str]:
        """Distinct sports across teams and leaderboards, sorted."""
        with self._lock, get_session(self._engine) as session:
            team_sports = session.scalars(select(models.Team.sport).distinct()).all()
            board_sports = session.scalars(select(models.Leaderboard.sport).distinct()).all()
        return sorted(set(team_sports) | set(board_sports))
