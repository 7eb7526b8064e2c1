"""Tests for the attendee registry."""

from uuid import uuid4

import pytest
from sqlmodel import Session, select

from app.core.exceptions import (
    AttendeeAlreadyExistsError,
    AttendeeNotFoundError,
    ConflictError,
    NotificationNotFoundError,
    PublicIdTakenError,
    TokenAlreadyExistsError,
    TokenNotFoundError,
    UserNotAttendeeError,
)
from app.models import AttendeeNotification, MessagingToken, Notification
from app.registration import attendees as registry
from app.schemas import AttendeeCreate, AttendeeUpdate, UserProfile


class TestCreateAttendee:
    def test_create(self, session: Session):
        attendee = registry.create_attendee(
            session, "user-1", AttendeeCreate(email="a@example.com", phone_number="555-0100")
        )
        assert attendee.user_id == "user-1"
        assert attendee.phone_number == "555-0100"

    def test_duplicate_user_id_conflicts(self, session: Session):
        registry.create_attendee(session, "user-1", AttendeeCreate())

        with pytest.raises(AttendeeAlreadyExistsError) as exc_info:
            registry.create_attendee(session, "user-1", AttendeeCreate(email="other@example.com"))
        assert isinstance(exc_info.value, ConflictError)

    def test_require_attendee_for_user(self, session: Session, make_attendee):
        attendee = make_attendee(user_id="known")
        assert registry.require_attendee_for_user(session, "known").id == attendee.id

        with pytest.raises(UserNotAttendeeError):
            registry.require_attendee_for_user(session, "unknown")


class TestUpdateAttendeeInfo:
    def test_partial_update(self, session: Session, make_attendee):
        attendee = make_attendee(email="me@example.com", school="Poly", phone_number="1")

        updated = registry.update_attendee_info(
            session, {"email": "me@example.com"}, AttendeeUpdate(phone_number="2")
        )

        assert updated.id == attendee.id
        assert updated.phone_number == "2"
        assert updated.school == "Poly"

    def test_attachment_replaces_cv(self, session: Session, make_attendee):
        make_attendee(email="me@example.com", cv="old-key")

        updated = registry.update_attendee_info(
            session, {"email": "me@example.com"}, AttendeeUpdate(), attachment="new-key"
        )
        assert updated.cv == "new-key"

    def test_unknown_attendee(self, session: Session):
        with pytest.raises(AttendeeNotFoundError):
            registry.update_attendee_info(session, {"email": "ghost@example.com"}, AttendeeUpdate())


class TestMessagingTokens:
    def test_add_and_remove(self, session: Session, make_attendee):
        attendee = make_attendee(user_id="u")

        registry.add_token(session, "u", "device-1")
        registry.add_token(session, "u", "device-2")
        session.refresh(attendee)
        assert [t.token for t in attendee.messaging_tokens] == ["device-1", "device-2"]

        registry.remove_token(session, "u", "device-1")
        session.refresh(attendee)
        assert [t.token for t in attendee.messaging_tokens] == ["device-2"]

    def test_duplicate_token(self, session: Session, make_attendee):
        make_attendee(user_id="u")
        registry.add_token(session, "u", "device-1")

        with pytest.raises(TokenAlreadyExistsError):
            registry.add_token(session, "u", "device-1")
        assert len(session.exec(select(MessagingToken)).all()) == 1

    def test_same_token_for_two_attendees(self, session: Session, make_attendee):
        make_attendee(user_id="u1")
        make_attendee(user_id="u2")
        registry.add_token(session, "u1", "shared")
        registry.add_token(session, "u2", "shared")
        assert len(session.exec(select(MessagingToken)).all()) == 2

    def test_remove_missing_token(self, session: Session, make_attendee):
        make_attendee(user_id="u")
        with pytest.raises(TokenNotFoundError):
            registry.remove_token(session, "u", "nope")

    def test_unknown_user(self, session: Session):
        with pytest.raises(AttendeeNotFoundError):
            registry.add_token(session, "ghost", "device-1")


class TestPublicId:
    def test_set_public_id(self, session: Session, make_attendee):
        attendee = make_attendee()
        assert registry.set_public_id(session, attendee.id, "B-042").public_id == "B-042"

    def test_public_id_taken(self, session: Session, make_attendee):
        first = make_attendee()
        second = make_attendee()
        registry.set_public_id(session, first.id, "B-042")

        with pytest.raises(PublicIdTakenError):
            registry.set_public_id(session, second.id, "B-042")

    def test_unknown_attendee(self, session: Session):
        with pytest.raises(AttendeeNotFoundError):
            registry.set_public_id(session, uuid4(), "B-1")


class TestMarkSeen:
    def test_flips_only_the_target_entry(self, session: Session, make_attendee):
        attendee = make_attendee(user_id="u")
        first = Notification(title="one")
        second = Notification(title="two")
        session.add(first)
        session.add(second)
        session.commit()
        session.add(AttendeeNotification(attendee_id=attendee.id, notification_id=first.id))
        session.add(AttendeeNotification(attendee_id=attendee.id, notification_id=second.id))
        session.commit()

        registry.mark_seen(session, "u", first.id, True)

        session.refresh(attendee)
        seen = {entry.notification_id: entry.seen for entry in attendee.notifications}
        assert seen == {first.id: True, second.id: False}

        registry.mark_seen(session, "u", first.id, False)
        session.refresh(attendee)
        assert all(entry.seen is False for entry in attendee.notifications)

    def test_notification_not_in_inbox(self, session: Session, make_attendee):
        make_attendee(user_id="u")
        with pytest.raises(NotificationNotFoundError):
            registry.mark_seen(session, "u", uuid4(), True)

    def test_unknown_user(self, session: Session):
        with pytest.raises(AttendeeNotFoundError):
            registry.mark_seen(session, "ghost", uuid4(), True)


class TestSearchAttendees:
    def test_school_filter_and_paging(self, session: Session, make_attendee):
        poly = [make_attendee(school="Poly") for _ in range(3)]
        other = make_attendee(school="ETS")
        ids = [a.id for a in poly] + [other.id]

        total, page = registry.search_attendees(session, ids, start=0, length=2, schools=["Poly"])

        assert total == 3
        assert len(page) == 2
        assert {r.id for r in page} <= {a.id for a in poly}
        assert all(r.user == UserProfile() for r in page)

    def test_only_requested_ids(self, session: Session, make_attendee):
        wanted = make_attendee()
        make_attendee()

        total, page = registry.search_attendees(session, [wanted.id])
        assert total == 1
        assert [r.id for r in page] == [wanted.id]

    def test_name_strategy_sorts_by_profile(self, session: Session, make_attendee, monkeypatch):
        zed = make_attendee(user_id="zed")
        amy = make_attendee(user_id="amy")
        bob = make_attendee(user_id="bob")
        profiles = {
            "zed": UserProfile(first_name="Zed", last_name="Adams"),
            "amy": UserProfile(first_name="Amy", last_name="Young"),
            "bob": UserProfile(first_name="Bob", last_name="Adams"),
        }
        monkeypatch.setattr(registry.identity, "get_users", lambda ids: {i: profiles[i] for i in ids})

        total, page = registry.search_attendees(
            session, [zed.id, amy.id, bob.id], start=0, length=2, strategy="name"
        )

        assert total == 3
        assert [r.user_id for r in page] == ["bob", "zed"]
        assert page[0].user.first_name == "Bob"

    def test_unknown_strategy(self, session: Session):
        with pytest.raises(ValueError):
            registry.search_attendees(session, [], strategy="random")
