"""
Clover — A Local Sports Community Backend
==========================================
Members register, host and join activities, form teams, post in the
community forum, collect achievements and climb sport leaderboards.
Everything lives in one in-memory store per process; only the logged-in
session survives a restart.

Package layout::

    clover/
    ├── config.py          # YAML → typed Python config, session secret
    ├── constants.py       # Avatars, post defaults, rank medals
    ├── errors.py          # CloverError taxonomy
    ├── database/
    │   ├── engine.py      # In-memory SQLAlchemy engine + session helper
    │   ├── models.py      # ORM tables incl. membership link tables
    │   └── seed.py        # Sample community
    ├── domain/
    │   └── entities.py    # Frozen pydantic snapshots + *Create inputs
    ├── services/
    │   ├── store.py           # Database: queries, updates, joins, awards
    │   ├── auth_service.py    # Session manager (register/login/logout)
    │   ├── session_slot.py    # Signed persisted session
    │   └── notices.py         # User-facing notices ring buffer
    └── api/
        ├── main.py        # FastAPI app factory
        ├── auth.py        # Session endpoints
        └── routes/        # Users, activities, teams, posts, ...
"""

__version__ = "0.1.0"
