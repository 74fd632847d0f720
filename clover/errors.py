"""
clover.errors — Error Taxonomy
===============================

Lookup misses are *not* errors: the store returns ``None`` for an id that
does not resolve.  The exceptions below cover the conditions a caller has
to handle explicitly.  :class:`~clover.services.auth_service.AuthService`
never lets them escape; it reports them on a failed ``AuthResult``.
"""

from __future__ import annotations


class CloverError(Exception):
    """Base class for every Clover domain error."""


class NotFound(CloverError):
    """An id did not resolve to a stored entity."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id


class CapacityExceeded(CloverError):
    """An activity already holds ``max_participants`` participants."""

    def __init__(self, activity_id: str, max_participants: int) -> None:
        super().__init__(
            f"Activity {activity_id!r} is full ({max_participants} participants)"
        )
        self.activity_id = activity_id
        self.max_participants = max_participants


class EmailAlreadyInUse(CloverError):
    """Another user already registered this email address."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email {email!r} is already in use")
        self.email = email


class InvalidCredentials(CloverError):
    """Unknown email, or a password that does not verify."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class NotAuthenticated(CloverError):
    """The operation needs a logged-in user."""

    def __init__(self) -> None:
        super().__init__("You must be logged in")
