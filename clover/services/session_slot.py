"""
clover.services.session_slot — Persisted Session Slot
======================================================

The session survives a restart through one durable key-value slot holding
the logged-in user.  The slot content is an HS256 JWT whose ``user`` claim
is the serialised :class:`~clover.domain.entities.User` snapshot, so a
value edited on disk fails signature verification and is discarded.

Two slot backends:

* :class:`FileSessionSlot` — a single file, replaced atomically on write.
* :class:`MemorySessionSlot` — process-local, for tests and throwaway runs.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

import jwt
from jwt.exceptions import InvalidTokenError
from pydantic import ValidationError

from clover.domain.entities import User

logger = logging.getLogger(__name__)

SESSION_ALGORITHM = "HS256"
SESSION_ISSUER = "clover"


class SessionDecodeError(ValueError):
    """The stored session value is malformed, tampered with, or unreadable."""


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def encode_session(user: User, secret: str) -> str:
    """Serialise *user* into a signed slot value."""
    payload = {
        "sub": user.id,
        "iss": SESSION_ISSUER,
        "iat": datetime.now(UTC),
        "user": user.model_dump(mode="json"),
    }
    return jwt.encode(payload, secret, algorithm=SESSION_ALGORITHM)


def decode_session(token: str, secret: str) -> User:
    """Verify and decode a slot value back into a :class:`User`.

    Raises
    ------
    SessionDecodeError
        If the signature, issuer or user payload is invalid.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[SESSION_ALGORITHM],
            issuer=SESSION_ISSUER,
            options={"require": ["sub", "iss", "user"]},
        )
    except InvalidTokenError as exc:
        raise SessionDecodeError(f"invalid session token: {exc}") from exc

    try:
        user = User.model_validate(payload["user"])
    except ValidationError as exc:
        raise SessionDecodeError("session token carries an invalid user") from exc

    if user.id != payload["sub"]:
        raise SessionDecodeError("session subject does not match user")
    return user


# ---------------------------------------------------------------------------
# Slot backends
# ---------------------------------------------------------------------------
class SessionSlot(Protocol):
    """A single durable key-value entry."""

    def read(self) -> str | None: ...

    def write(self, value: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionSlot:
    """Slot held in process memory."""

    def __init__(self, value: str | None = None) -> None:
        self._value = value

    def read(self) -> str | None:
        return self._value

    def write(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class FileSessionSlot:
    """Slot stored in one file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write never leaves a truncated value.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def read(self) -> str | None:
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError:
            logger.exception("Could not read session slot %s", self.path)
            return None
        return value or None

    def write(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, self.path)
        except Exception:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
