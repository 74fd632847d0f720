"""
clover.database.seed — Sample Community Seeder
===============================================

Loads a small sample community so a fresh process is immediately usable:
four members, five activities, four teams, four forum posts, two
achievements and four leaderboards.

Everything goes through the public :class:`~clover.services.store.Database`
operations, so hosts, participants and team members end up with the same
back-references a real sign-up flow would give them.

Not idempotent: run it once, on a fresh store.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from clover.database.models import ActivityStatus, LeaderboardPeriod
from clover.domain.entities import (
    AchievementCreate,
    ActivityCreate,
    LeaderboardCreate,
    LeaderboardEntry,
    PostCreate,
    TeamCreate,
    UserCreate,
)
from clover.services.store import Database

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/photo-{}?ixlib=rb-1.2.1&auto=format&fit=crop&w=1000&q=80"


# ---------------------------------------------------------------------------
# Sample catalogue.  Member references are by handle ("tanmoy", ...) and are
# resolved to ids once the users exist.
# ---------------------------------------------------------------------------
SAMPLE_USERS: dict[str, dict] = {
    "tanmoy": {
        "name": "Tanmoy Roy",
        "email": "tanmoy@clover.com",
        "location": "Kolkata",
        "bio": "Sports enthusiast and community organizer",
        "favorite_activities": ["Cricket", "Football", "Chess", "Running"],
    },
    "rahul": {
        "name": "Rahul Sharma",
        "email": "rahul@clover.com",
        "location": "Mumbai",
        "bio": "Professional cricket player and coach",
        "favorite_activities": ["Cricket", "Swimming", "Badminton"],
    },
    "priya": {
        "name": "Priya Patel",
        "email": "priya@clover.com",
        "location": "Delhi",
        "bio": "Yoga instructor and amateur footballer",
        "favorite_activities": ["Yoga", "Football", "Chess", "Hiking"],
    },
    "amit": {
        "name": "Amit Kumar",
        "email": "amit@clover.com",
        "location": "Bangalore",
        "bio": "Chess champion and badminton enthusiast",
        "favorite_activities": ["Chess", "Badminton"],
    },
}

SAMPLE_ACTIVITIES: list[dict] = [
    {
        "title": "Weekend Cricket Match",
        "description": "Friendly cricket match at the local park. All skill levels welcome!",
        "category": "Cricket",
        "location": "Salt Lake Stadium, Kolkata",
        "date": dt.date(2025, 5, 15),
        "time": "10:00 AM",
        "duration": 3,
        "host": "tanmoy",
        "participants": ["tanmoy", "rahul"],
        "max_participants": 22,
        "image": _UNSPLASH.format("1531415074968-036ba1b575da"),
    },
    {
        "title": "Yoga in the Park",
        "description": "Morning yoga session in the community park. Bring your own mat.",
        "category": "Yoga",
        "location": "Central Park, Kolkata",
        "date": dt.date(2025, 5, 12),
        "time": "7:00 AM",
        "duration": 1,
        "host": "priya",
        "participants": ["priya"],
        "max_participants": 15,
        "image": _UNSPLASH.format("1545205597-3d9d02c29597"),
    },
    {
        "title": "Football Tournament",
        "description": "5-a-side football tournament for all ages. Form a team or join individually.",
        "category": "Football",
        "location": "DLF Sports Complex, Delhi",
        "date": dt.date(2025, 5, 20),
        "time": "3:00 PM",
        "duration": 4,
        "host": "priya",
        "participants": ["tanmoy", "priya"],
        "max_participants": 30,
        "image": _UNSPLASH.format("1600679472829-3044539ce8ed"),
    },
    {
        "title": "Chess Club Meeting",
        "description": "Weekly chess club meeting. Players of all levels welcome.",
        "category": "Chess",
        "location": "Gariahat Chess Club, Kolkata",
        "date": dt.date(2025, 5, 14),
        "time": "6:00 PM",
        "duration": 2,
        "host": "amit",
        "participants": ["tanmoy", "priya", "amit"],
        "max_participants": 12,
        "image": _UNSPLASH.format("1586165368502-1bad197a6461"),
    },
    {
        "title": "Badminton Doubles Tournament",
        "description": "Join our monthly badminton doubles tournament with great prizes.",
        "category": "Badminton",
        "location": "Prakash Padukone Badminton Academy, Bangalore",
        "date": dt.date(2025, 5, 18),
        "time": "2:00 PM",
        "duration": 5,
        "host": "rahul",
        "participants": ["rahul", "amit"],
        "max_participants": 16,
        "image": _UNSPLASH.format("1626224583764-f87db24ac4ea"),
    },
]

SAMPLE_TEAMS: list[dict] = [
    {
        "name": "Kolkata Tigers",
        "description": "Local cricket team for friendly matches",
        "sport": "Cricket",
        "captain": "tanmoy",
        "members": ["tanmoy", "rahul"],
        "location": "Kolkata",
        "founded_date": dt.date(2024, 2, 10),
        "logo": _UNSPLASH.format("1546519638-68e109acd618"),
    },
    {
        "name": "Delhi Dragons FC",
        "description": "Community football club focusing on youth development",
        "sport": "Football",
        "captain": "priya",
        "members": ["tanmoy", "priya"],
        "location": "Delhi",
        "founded_date": dt.date(2024, 3, 5),
        "logo": _UNSPLASH.format("1522778119026-d647f0596c20"),
    },
    {
        "name": "Bangalore Knights",
        "description": "Competitive chess team participating in national tournaments",
        "sport": "Chess",
        "captain": "amit",
        "members": ["priya", "amit"],
        "location": "Bangalore",
        "founded_date": dt.date(2024, 2, 20),
        "logo": _UNSPLASH.format("1529699211952-734e80c4d42b"),
    },
    {
        "name": "Mumbai Smashers",
        "description": "Badminton team for all ages and skill levels",
        "sport": "Badminton",
        "captain": "rahul",
        "members": ["rahul", "amit"],
        "location": "Mumbai",
        "founded_date": dt.date(2024, 4, 15),
        "logo": _UNSPLASH.format("1626224583764-f87db24ac4ea"),
    },
]

SAMPLE_POSTS: list[dict] = [
    {
        "title": "Tips for Beginners in Cricket",
        "content": (
            "If you're just starting out in cricket, here are some tips that "
            "helped me improve my game quickly..."
        ),
        "author": "rahul",
        "category": "Cricket",
        "tags": ["beginner", "tips", "cricket"],
    },
    {
        "title": "Looking for Football Players",
        "content": (
            "We're forming a new football team in Kolkata. If you're interested "
            "in joining, please comment below!"
        ),
        "author": "tanmoy",
        "category": "Football",
        "tags": ["recruitment", "football", "team"],
    },
    {
        "title": "Chess Opening Strategies",
        "content": "Master these three chess openings to improve your win rate dramatically...",
        "author": "amit",
        "category": "Chess",
        "tags": ["strategy", "chess", "openings"],
    },
    {
        "title": "Badminton Footwork Techniques",
        "content": "Good footwork is the foundation of badminton. Here's how to improve yours...",
        "author": "rahul",
        "category": "Badminton",
        "tags": ["technique", "badminton", "footwork"],
    },
]

SAMPLE_ACHIEVEMENTS: list[dict] = [
    {
        "title": "Team Creator",
        "description": "Created your first team",
        "icon": "trophy",
        "category": "General",
    },
    {
        "title": "Event Organizer",
        "description": "Organized your first sporting event",
        "icon": "calendar",
        "category": "General",
    },
]

SAMPLE_LEADERBOARDS: list[dict] = [
    {
        "title": "Cricket Runs - Monthly",
        "sport": "Cricket",
        "period": LeaderboardPeriod.MONTHLY,
        "entries": [("tanmoy", 120, 2), ("rahul", 156, 1)],
    },
    {
        "title": "Football Goals - Weekly",
        "sport": "Football",
        "period": LeaderboardPeriod.WEEKLY,
        "entries": [("tanmoy", 5, 2), ("priya", 7, 1)],
    },
    {
        "title": "Chess Tournament Rankings",
        "sport": "Chess",
        "period": LeaderboardPeriod.MONTHLY,
        "entries": [("priya", 1800, 2), ("amit", 2100, 1)],
    },
    {
        "title": "Badminton Championships",
        "sport": "Badminton",
        "period": LeaderboardPeriod.YEARLY,
        "entries": [("rahul", 320, 1), ("amit", 280, 2)],
    },
]


@dataclass(frozen=True, slots=True)
class SeedSummary:
    """Ids of everything the seeder created, keyed by member handle for users."""

    users: dict[str, str]
    activities: list[str]
    teams: list[str]
    posts: list[str]
    achievements: list[str]
    leaderboards: list[str]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def seed_sample_data(store: Database, *, password_hash: str | None = None) -> SeedSummary:
    """Insert the sample community into *store*.

    If *password_hash* is given every sample member gets it, so they can
    log in with the matching password.
    """
    users: dict[str, str] = {}
    for handle, fields in SAMPLE_USERS.items():
        user = store.create_user(UserCreate(
            avatar=f"https://i.pravatar.cc/150?u={handle}", **fields
        ))
        users[handle] = user.id
        if password_hash:
            store.set_password_hash(user.id, password_hash)

    activities = [
        store.create_activity(ActivityCreate(
            title=a["title"],
            description=a["description"],
            category=a["category"],
            location=a["location"],
            date=a["date"],
            time=a["time"],
            duration=a["duration"],
            host_id=users[a["host"]],
            participants=[users[h] for h in a["participants"]],
            max_participants=a["max_participants"],
            image=a["image"],
            status=ActivityStatus.UPCOMING,
        )).id
        for a in SAMPLE_ACTIVITIES
    ]

    teams = [
        store.create_team(TeamCreate(
            name=t["name"],
            description=t["description"],
            sport=t["sport"],
            captain_id=users[t["captain"]],
            members=[users[h] for h in t["members"]],
            location=t["location"],
            founded_date=t["founded_date"],
            logo=t["logo"],
        )).id
        for t in SAMPLE_TEAMS
    ]

    posts = [
        store.create_post(PostCreate(
            title=p["title"],
            content=p["content"],
            author_id=users[p["author"]],
            category=p["category"],
            tags=p["tags"],
        )).id
        for p in SAMPLE_POSTS
    ]

    achievements = [
        store.create_achievement(AchievementCreate(**a)).id
        for a in SAMPLE_ACHIEVEMENTS
    ]

    leaderboards = [
        store.create_leaderboard(LeaderboardCreate(
            title=b["title"],
            sport=b["sport"],
            period=b["period"],
            entries=[
                LeaderboardEntry(user_id=users[h], score=score, rank=rank)
                for h, score, rank in b["entries"]
            ],
        )).id
        for b in SAMPLE_LEADERBOARDS
    ]

    logger.info(
        "Seeded sample community: %d users, %d activities, %d teams, "
        "%d posts, %d achievements, %d leaderboards",
        len(users), len(activities), len(teams),
        len(posts), len(achievements), len(leaderboards),
    )
    return SeedSummary(
        users=users,
        activities=activities,
        teams=teams,
        posts=posts,
        achievements=achievements,
        leaderboards=leaderboards,
    )
