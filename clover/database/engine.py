"""
clover.database.engine — In-Memory Engine & Session Helper
===========================================================

Clover keeps its whole community in a private SQLite database that lives
in process memory.  Nothing is written to disk; every start rebuilds the
schema and reseeds it (see :mod:`clover.database.seed`).

An in-memory SQLite database exists only as long as its connection, so
the engine uses :class:`~sqlalchemy.pool.StaticPool` to share one
connection between every :class:`~sqlalchemy.orm.Session`.
``check_same_thread=False`` lets the API's threadpool reach it; callers
serialise access themselves (the store holds a lock).

Usage::

    from clover.database.engine import create_memory_engine, get_session, init_db

    engine = create_memory_engine()
    init_db(engine)

    with get_session(engine) as session:
        session.add(User(...))
        # commit happens automatically on block exit
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from clover.database.models import Base

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_memory_engine(echo: bool = False) -> Engine:
    """Build an engine bound to a fresh, private in-memory SQLite database.

    Parameters
    ----------
    echo:
        Log every SQL statement (debugging only).

    Returns
    -------
    Engine
        An engine whose single pooled connection holds the database.
    """
    engine = create_engine(
        "sqlite://",
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    logger.debug("In-memory database engine created.")
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables defined in :mod:`clover.database.models`.

    Safe to call repeatedly; ``CREATE TABLE IF NOT EXISTS`` under the hood.
    """
    Base.metadata.create_all(engine)
    logger.debug("Database tables created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that commits on success and rolls back on
    exception.

    ``expire_on_commit=False`` keeps loaded attributes readable after the
    commit so results can be turned into snapshots before the session closes.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
