"""
tests/test_auth_service.py — Session Manager Tests
===================================================

Register / login / logout / update_profile transitions, the persisted
session slot, subscriber delivery and user-facing notices.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from clover.errors import (
    EmailAlreadyInUse,
    InvalidCredentials,
    NotAuthenticated,
    NotFound,
)
from clover.services.auth_service import AuthService, hash_password
from clover.services.session_slot import MemorySessionSlot, decode_session, encode_session
from clover.services.store import Database

from conftest import SEED_PASSWORD, make_activity, make_user


def _register(auth, name="Asha Rao", email="asha@example.com", password="s3cret-pass"):
    return auth.register(name, email, password)


# ===========================================================================
# Registration
# ===========================================================================
class TestRegister:
    def test_register_logs_in_and_persists(self, auth, store, slot, secret):
        result = _register(auth)

        assert result
        assert result.user.email == "asha@example.com"
        assert auth.get_state().is_authenticated
        assert auth.current_user.id == result.user.id
        assert store.get_user_by_id(result.user.id) is not None
        assert decode_session(slot.read(), secret).id == result.user.id

    def test_register_sets_generated_avatar(self, auth):
        result = _register(auth)
        assert result.user.avatar == "https://i.pravatar.cc/150?u=asha@example.com"

    def test_register_stores_hash_not_password(self, auth, store):
        result = _register(auth, password="plain-text-pw")
        stored = store.get_password_hash(result.user.id)
        assert stored
        assert stored != "plain-text-pw"

    def test_register_success_notice(self, auth, notices):
        result = _register(auth)
        assert result.notice.title == "Registration Successful"
        assert result.notice.description == "Welcome to Clover Sports!"
        assert notices.recent()[-1] == result.notice

    def test_duplicate_email_fails(self, auth, store):
        make_user(store, "Existing", "asha@example.com")
        result = _register(auth)

        assert not result
        assert isinstance(result.error, EmailAlreadyInUse)
        assert result.notice.title == "Registration Failed"
        assert result.notice.description == "Email is already in use."
        assert result.notice.variant == "destructive"
        assert len(store.list_users()) == 1
        assert not auth.get_state().is_authenticated

    def test_duplicate_email_differing_case_fails(self, auth, store):
        make_user(store, "Existing", "asha@example.com")
        result = _register(auth, email="ASHA@Example.COM")
        assert isinstance(result.error, EmailAlreadyInUse)
        assert len(store.list_users()) == 1

    @pytest.mark.parametrize(
        "name,email,password",
        [
            ("", "asha@example.com", "pw"),
            ("Asha", "not-an-email", "pw"),
            ("Asha", "asha@example.com", ""),
        ],
    )
    def test_invalid_input_fails_without_raising(self, auth, store, name, email, password):
        result = auth.register(name, email, password)
        assert not result
        assert isinstance(result.error, ValueError)
        assert store.list_users() == []

    def test_unexpected_store_error_is_reported(self, slot, secret, notices):
        store = MagicMock()
        store.get_user_by_email.side_effect = RuntimeError("boom")
        auth = AuthService(store, slot, secret=secret, notify=notices)

        result = _register(auth)

        assert not result
        assert isinstance(result.error, RuntimeError)
        assert result.notice.is_error
        assert slot.read() is None


# ===========================================================================
# Login / logout
# ===========================================================================
class TestLogin:
    def test_login_with_correct_password(self, auth, slot, secret):
        registered = _register(auth)
        auth.logout()

        result = auth.login("asha@example.com", "s3cret-pass")

        assert result
        assert result.user.id == registered.user.id
        assert result.notice.title == "Login Successful"
        assert result.notice.description == "Welcome back to Clover Sports!"
        assert decode_session(slot.read(), secret).id == registered.user.id

    def test_login_email_ignores_case(self, auth):
        _register(auth)
        auth.logout()
        assert auth.login("ASHA@example.com", "s3cret-pass")

    def test_unknown_email_fails(self, auth, slot):
        result = auth.login("nobody@example.com", "whatever")
        assert not result
        assert isinstance(result.error, InvalidCredentials)
        assert result.notice.title == "Login Failed"
        assert result.notice.description == "Invalid email or password."
        assert not auth.get_state().is_authenticated
        assert slot.read() is None

    def test_wrong_password_fails(self, auth):
        _register(auth)
        auth.logout()
        result = auth.login("asha@example.com", "wrong")
        assert isinstance(result.error, InvalidCredentials)
        assert auth.current_user is None

    def test_user_without_password_cannot_log_in(self, auth, store):
        make_user(store, "No Password", "nopw@example.com")
        result = auth.login("nopw@example.com", "")
        assert isinstance(result.error, InvalidCredentials)

    def test_corrupt_stored_hash_is_invalid_credentials(self, auth, store):
        user = make_user(store, "Broken", "broken@example.com")
        store.set_password_hash(user.id, "not-a-real-hash")
        result = auth.login("broken@example.com", "anything")
        assert isinstance(result.error, InvalidCredentials)

    def test_logout_clears_state_and_slot(self, auth, slot):
        _register(auth)
        result = auth.logout()
        assert result
        assert result.notice.title == "Logged Out"
        assert result.notice.description == "You have been logged out successfully."
        assert auth.current_user is None
        assert slot.read() is None

    def test_logout_when_anonymous_still_succeeds(self, auth):
        assert auth.logout()


# ===========================================================================
# Profile updates
# ===========================================================================
class TestUpdateProfile:
    def test_update_requires_session(self, auth, notices):
        result = auth.update_profile(bio="x")
        assert not result
        assert isinstance(result.error, NotAuthenticated)
        assert result.notice.title == "Update Failed"
        assert result.notice.description == "You must be logged in to update your profile."

    def test_update_refreshes_session_and_slot(self, auth, store, slot, secret):
        registered = _register(auth)
        result = auth.update_profile(bio="Trail runner", location="Pune")

        assert result
        assert result.notice.title == "Profile Updated"
        assert auth.current_user.bio == "Trail runner"
        assert store.get_user_by_id(registered.user.id).location == "Pune"
        assert decode_session(slot.read(), secret).bio == "Trail runner"

    def test_update_to_taken_email_fails(self, auth, store):
        make_user(store, "Other", "other@example.com")
        _register(auth)
        result = auth.update_profile(email="OTHER@example.com")
        assert isinstance(result.error, EmailAlreadyInUse)
        assert auth.current_user.email == "asha@example.com"

    def test_update_invalid_value_fails(self, auth):
        _register(auth)
        result = auth.update_profile(favorite_activities="Cricket")
        assert not result
        assert isinstance(result.error, ValueError)

    @pytest.mark.parametrize("email", ["", "   ", "no-at-sign"])
    def test_update_to_malformed_email_fails(self, auth, store, email):
        registered = _register(auth)
        result = auth.update_profile(email=email)

        assert not result
        assert result.notice.description == "Some profile fields are invalid."
        assert auth.current_user.email == "asha@example.com"
        assert store.get_user_by_id(registered.user.id).email == "asha@example.com"
        assert store.get_user_by_email(email) is None

    def test_update_after_user_vanished(self, slot, secret, notices):
        ghost = make_user(Database(), "Ghost", "ghost@example.com")
        slot.write(encode_session(ghost, secret))
        auth = AuthService(Database(), slot, secret=secret, notify=notices)

        result = auth.update_profile(bio="x")

        assert isinstance(result.error, NotFound)
        assert result.notice.description == "Failed to update profile."


# ===========================================================================
# Restoring a persisted session
# ===========================================================================
class TestRestore:
    def test_valid_slot_restores_session(self, store, secret, notices):
        user = make_user(store, "Asha Rao")
        slot = MemorySessionSlot(encode_session(user, secret))
        auth = AuthService(store, slot, secret=secret, notify=notices)
        assert auth.get_state().is_authenticated
        assert auth.current_user.id == user.id

    def test_restore_refreshes_from_store(self, store, secret, notices):
        user = make_user(store, "Asha Rao")
        slot = MemorySessionSlot(encode_session(user, secret))
        store.update_user(user.id, bio="Changed since login")
        auth = AuthService(store, slot, secret=secret, notify=notices)
        assert auth.current_user.bio == "Changed since login"

    def test_restore_keeps_snapshot_when_user_unknown(self, store, secret, notices):
        elsewhere = make_user(Database(), "Elsewhere", "elsewhere@example.com")
        slot = MemorySessionSlot(encode_session(elsewhere, secret))
        auth = AuthService(store, slot, secret=secret, notify=notices)
        assert auth.current_user == elsewhere

    @pytest.mark.parametrize("raw", ["garbage", "a.b.c", "{\"user\": 1}"])
    def test_malformed_slot_is_cleared(self, store, secret, notices, raw):
        slot = MemorySessionSlot(raw)
        auth = AuthService(store, slot, secret=secret, notify=notices)
        assert not auth.get_state().is_authenticated
        assert slot.read() is None

    def test_slot_signed_with_other_secret_is_cleared(self, store, secret, notices):
        user = make_user(store, "Asha Rao")
        slot = MemorySessionSlot(encode_session(user, "another-secret-" + "y" * 40))
        auth = AuthService(store, slot, secret=secret, notify=notices)
        assert auth.current_user is None
        assert slot.read() is None


# ===========================================================================
# Subscribers
# ===========================================================================
class TestSubscribers:
    def test_every_transition_is_delivered(self, auth):
        seen = []
        auth.subscribe(lambda state: seen.append(state.is_authenticated))

        _register(auth)
        auth.update_profile(bio="x")
        auth.logout()
        auth.login("asha@example.com", "s3cret-pass")

        assert seen == [True, True, False, True]

    def test_failed_operations_do_not_notify(self, auth):
        listener = MagicMock()
        auth.subscribe(listener)
        auth.login("nobody@example.com", "pw")
        auth.update_profile(bio="x")
        listener.assert_not_called()

    def test_listener_sees_persisted_slot(self, auth, slot, secret):
        observed = []
        auth.subscribe(lambda state: observed.append(slot.read()))
        result = _register(auth)
        assert decode_session(observed[0], secret).id == result.user.id

    def test_unsubscribe_stops_delivery(self, auth):
        listener = MagicMock()
        unsubscribe = auth.subscribe(listener)
        _register(auth)
        unsubscribe()
        unsubscribe()
        auth.logout()
        assert listener.call_count == 1

    def test_registration_order_and_failing_listener(self, auth):
        calls = []
        auth.subscribe(lambda s: calls.append("first"))
        auth.subscribe(MagicMock(side_effect=RuntimeError("listener bug")))
        auth.subscribe(lambda s: calls.append("third"))

        result = _register(auth)

        assert result
        assert calls == ["first", "third"]


# ===========================================================================
# Notices & refresh
# ===========================================================================
class TestNotices:
    def test_failing_notice_sink_does_not_break_operation(self, store, slot, secret):
        auth = AuthService(store, slot, secret=secret, notify=MagicMock(side_effect=OSError))
        assert _register(auth)

    def test_failing_slot_does_not_break_operations(self, store, secret, caplog):
        slot = MagicMock()
        slot.read.return_value = None
        slot.write.side_effect = RuntimeError("slot offline")
        slot.clear.side_effect = RuntimeError("slot offline")
        auth = AuthService(store, slot, secret=secret)

        registered = _register(auth)
        assert registered
        assert auth.is_authenticated
        assert auth.logout()
        assert not auth.is_authenticated
        assert "Could not persist the session" in caplog.text
        assert "Could not clear the session slot" in caplog.text

    def test_unreadable_slot_starts_anonymous(self, store, secret):
        slot = MagicMock()
        slot.read.side_effect = RuntimeError("slot offline")
        auth = AuthService(store, slot, secret=secret)
        assert not auth.is_authenticated

    def test_default_sink_logs(self, store, slot, secret, caplog):
        auth = AuthService(store, slot, secret=secret)
        with caplog.at_level("INFO", logger="clover.services.notices"):
            _register(auth)
        assert "Registration Successful" in caplog.text

    def test_refresh_picks_up_store_changes(self, auth, store):
        registered = _register(auth)
        host = make_user(store, "Host", "host@example.com")
        activity = make_activity(store, host.id)
        store.join_activity(activity.id, registered.user.id)

        assert auth.current_user.events_attended == []
        state = auth.refresh()
        assert state.user.events_attended == [activity.id]

    def test_seeded_members_can_log_in(self, seeded, slot, secret):
        store, _ = seeded
        auth = AuthService(store, slot, secret=secret)
        assert auth.login("tanmoy@clover.com", SEED_PASSWORD)
        assert auth.current_user.name == "Tanmoy Roy"

    def test_custom_password_hash_accepted(self, store, slot, secret):
        user = make_user(store, "Asha Rao", "asha@example.com")
        store.set_password_hash(user.id, hash_password("pw-123"))
        auth = AuthService(store, slot, secret=secret)
        assert auth.login("asha@example.com", "pw-123")
