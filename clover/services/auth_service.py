"""
clover.services.auth_service — Session Manager
===============================================

:class:`AuthService` owns the single session value of a Clover process.

States::

    Anonymous ──login/register──▶ Authenticated ──logout──▶ Anonymous
                                      │  ▲
                                      └──┘ update_profile / refresh

Every transition follows the same order:
  1. Mutate the store (create user, update profile, ...)
  2. Swap the in-memory :class:`SessionState`
  3. Write (or clear) the persisted session slot
  4. Call subscribers, in registration order
  5. Emit a user-facing :class:`~clover.services.notices.Notice`

Operations never raise.  They return an :class:`AuthResult` that is truthy
on success and carries the error and notice on failure.

Passwords are hashed with passlib (``pbkdf2_sha256``) and verified on
login; a member without a stored hash cannot log in.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from passlib.context import CryptContext

from clover.constants import DEFAULT_AVATAR_BASE_URL, avatar_url
from clover.domain.entities import User, UserCreate
from clover.errors import (
    EmailAlreadyInUse,
    InvalidCredentials,
    NotAuthenticated,
    NotFound,
)
from clover.services.notices import Notice, NoticeBuffer
from clover.services.session_slot import (
    SessionDecodeError,
    SessionSlot,
    decode_session,
    encode_session,
)
from clover.services.store import Database

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SessionState:
    """Who, if anyone, is logged in."""

    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


ANONYMOUS = SessionState()

Listener = Callable[[SessionState], None]


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Outcome of a session operation.  Truthy on success."""

    ok: bool
    user: User | None = None
    error: Exception | None = None
    notice: Notice | None = None

    def __bool__(self) -> bool:
        return self.ok


# ---------------------------------------------------------------------------
# AuthService
# ---------------------------------------------------------------------------
class AuthService:
    """Login/registration front-end over a :class:`Database`.

    Parameters
    ----------
    store:
        The process's data store.
    slot:
        Durable slot for the session value; read once here.
    secret:
        Key signing the persisted session.
    notify:
        Sink for user-facing notices.  Defaults to a private
        :class:`NoticeBuffer`, which also logs them.
    """

    def __init__(
        self,
        store: Database,
        slot: SessionSlot,
        *,
        secret: str,
        notify: Callable[[Notice], None] | None = None,
        avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
        community_name: str = "Clover Sports",
    ) -> None:
        self._store = store
        self._slot = slot
        self._secret = secret
        self._notify = notify if notify is not None else NoticeBuffer()
        self._avatar_base_url = avatar_base_url
        self._community_name = community_name
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self._state = self._restore()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_state(self) -> SessionState:
        return self._state

    @property
    def current_user(self) -> User | None:
        return self._state.user

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    # -------------------------------------------------------------------
    # Subscribers
    # -------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new state after every transition.

        Returns a function that removes the listener (safe to call twice).
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and log it in."""
        with self._lock:
            try:
                if not password:
                    raise ValueError("password is required")
                if self._store.get_user_by_email(email) is not None:
                    raise EmailAlreadyInUse(email)
                user = self._store.create_user(UserCreate(
                    name=name,
                    email=email,
                    avatar=avatar_url(email, self._avatar_base_url),
                ))
                self._store.set_password_hash(user.id, hash_password(password))
            except EmailAlreadyInUse as exc:
                return self._fail(exc, "Registration Failed", "Email is already in use.")
            except ValueError as exc:
                return self._fail(
                    exc, "Registration Failed",
                    "Name, a valid email and a password are required.",
                )
            except Exception as exc:
                logger.exception("Registration error")
                return self._fail(exc, "Registration Failed", "An unexpected error occurred.")

            self._bind(user)
            return self._succeed(
                user, "Registration Successful", f"Welcome to {self._community_name}!"
            )

    def login(self, email: str, password: str) -> AuthResult:
        """Log in with an email and password."""
        with self._lock:
            try:
                user = self._store.get_user_by_email(email)
                if user is None or not self._check_password(user.id, password):
                    raise InvalidCredentials()
            except InvalidCredentials as exc:
                return self._fail(exc, "Login Failed", "Invalid email or password.")
            except Exception as exc:
                logger.exception("Login error")
                return self._fail(exc, "Login Failed", "An unexpected error occurred.")

            self._bind(user)
            return self._succeed(
                user, "Login Successful", f"Welcome back to {self._community_name}!"
            )

    def logout(self) -> AuthResult:
        """End the session.  Always succeeds."""
        with self._lock:
            previous = self._state.user
            self._state = ANONYMOUS
            try:
                self._slot.clear()
            except Exception:
                logger.exception("Could not clear the session slot")
            self._publish()
            if previous is not None:
                logger.info("User %s logged out", previous.id)
            return self._succeed(None, "Logged Out", "You have been logged out successfully.")

    def update_profile(self, **fields: Any) -> AuthResult:
        """Update the logged-in user's profile fields."""
        with self._lock:
            current = self._state.user
            try:
                if current is None:
                    raise NotAuthenticated()
                updated = self._store.update_user(current.id, **fields)
                if updated is None:
                    raise NotFound("user", current.id)
            except NotAuthenticated as exc:
                return self._fail(
                    exc, "Update Failed", "You must be logged in to update your profile."
                )
            except NotFound as exc:
                return self._fail(exc, "Update Failed", "Failed to update profile.")
            except EmailAlreadyInUse as exc:
                return self._fail(exc, "Update Failed", "Email is already in use.")
            except ValueError as exc:
                return self._fail(exc, "Update Failed", "Some profile fields are invalid.")
            except Exception as exc:
                logger.exception("Update profile error")
                return self._fail(exc, "Update Failed", "An unexpected error occurred.")

            self._bind(updated)
            return self._succeed(
                updated, "Profile Updated", "Your profile has been updated successfully."
            )

    def refresh(self) -> SessionState:
        """Reload the session user from the store.

        Picks up changes made through the store directly (joined teams,
        awarded achievements).  Subscribers are only called when the
        snapshot actually changed.
        """
        with self._lock:
            current = self._state.user
            if current is None:
                return self._state
            fresh = self._store.get_user_by_id(current.id)
            if fresh is not None and fresh != current:
                self._bind(fresh)
            return self._state

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _restore(self) -> SessionState:
        """Rebuild the session from the slot, discarding unreadable values."""
        try:
            raw = self._slot.read()
        except Exception:
            logger.exception("Could not read the session slot")
            return ANONYMOUS
        if not raw:
            return ANONYMOUS
        try:
            saved = decode_session(raw, self._secret)
        except SessionDecodeError as exc:
            logger.warning("Discarding saved session: %s", exc)
            try:
                self._slot.clear()
            except Exception:
                logger.exception("Could not clear the session slot")
            return ANONYMOUS
        fresh = self._store.get_user_by_id(saved.id)
        logger.info("Restored session for user %s", saved.id)
        return SessionState(user=fresh if fresh is not None else saved)

    def _check_password(self, user_id: str, password: str) -> bool:
        stored = self._store.get_password_hash(user_id)
        if not stored or not password:
            return False
        try:
            valid, new_hash = pwd_context.verify_and_update(password, stored)
        except ValueError:
            logger.warning("Unreadable password hash for user %s", user_id)
            return False
        if valid and new_hash:
            self._store.set_password_hash(user_id, new_hash)
        return valid

    def _bind(self, user: User) -> None:
        """Make *user* the session user, persist it, tell subscribers."""
        self._state = SessionState(user=user)
        try:
            self._slot.write(encode_session(user, self._secret))
        except Exception:
            logger.exception("Could not persist the session for user %s", user.id)
        self._publish()

    def _emit(self, notice: Notice) -> None:
        try:
            self._notify(notice)
        except Exception:
            logger.exception("Notice sink failed")

    def _succeed(self, user: User | None, title: str, description: str) -> AuthResult:
        notice = Notice(title, description)
        self._emit(notice)
        return AuthResult(ok=True, user=user, notice=notice)

    def _fail(self, error: Exception, title: str, description: str) -> AuthResult:
        notice = Notice(title, description, "destructive")
        self._emit(notice)
        return AuthResult(ok=False, error=error, notice=notice)
