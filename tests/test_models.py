"""Tests for database models and their constraints."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models import (
    Attendee,
    AttendeeNotification,
    Event,
    EventAttendee,
    Notification,
    ScannedAttendee,
    Team,
    TeamMember,
)


class TestAttendeeModel:
    """Tests for the Attendee model."""

    def test_create_attendee(self, session: Session):
        """Test creating a basic attendee."""
        attendee = Attendee(user_id="user-abc", email="abc@example.com")
        session.add(attendee)
        session.commit()

        retrieved = session.exec(select(Attendee).where(Attendee.user_id == "user-abc")).first()

        assert retrieved is not None
        assert retrieved.email == "abc@example.com"
        assert retrieved.accept_sms_notifications is False
        assert retrieved.public_id is None

    def test_attendee_unique_user_id(self, session: Session):
        """Test that user_id must be unique."""
        session.add(Attendee(user_id="duplicate"))
        session.commit()

        session.add(Attendee(user_id="duplicate"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_attendee_unique_public_id(self, session: Session):
        session.add(Attendee(user_id="a", public_id="P-1"))
        session.commit()

        session.add(Attendee(user_id="b", public_id="P-1"))
        with pytest.raises(IntegrityError):
            session.commit()


class TestRosterModel:
    """Tests for roster entries and scan edges."""

    def test_roster_entry_defaults(self, session: Session, sample_event: Event, make_attendee):
        attendee = make_attendee()
        entry = EventAttendee(event_id=sample_event.id, attendee_id=attendee.id)
        session.add(entry)
        session.commit()
        session.refresh(sample_event)

        assert len(sample_event.roster) == 1
        assert sample_event.roster[0].role == "participant"
        assert sample_event.roster[0].registered is False
        assert sample_event.roster[0].scanned_attendees == []

    def test_one_roster_entry_per_event_and_attendee(self, session: Session, sample_event: Event, make_attendee):
        attendee = make_attendee()
        session.add(EventAttendee(event_id=sample_event.id, attendee_id=attendee.id))
        session.commit()

        session.add(EventAttendee(event_id=sample_event.id, attendee_id=attendee.id, role="organizer"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_scan_edge_unique(self, session: Session, sample_event: Event, registered_attendees):
        entry = session.exec(
            select(EventAttendee).where(EventAttendee.attendee_id == registered_attendees[0].id)
        ).one()
        edge = dict(roster_entry_id=entry.id, event_id=sample_event.id, scanned_attendee_id=registered_attendees[1].id)

        session.add(ScannedAttendee(**edge))
        session.commit()
        session.add(ScannedAttendee(**edge))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_roster_requires_existing_attendee(self, session: Session, sample_event: Event):
        """Foreign keys are enforced."""
        from uuid import uuid4

        session.add(EventAttendee(event_id=sample_event.id, attendee_id=uuid4()))
        with pytest.raises(IntegrityError):
            session.commit()


class TestTeamModel:
    """Tests for the Team and TeamMember models."""

    def test_team_name_unique_per_event(self, session: Session, sample_event: Event):
        session.add(Team(name="Rockets", event_id=sample_event.id))
        session.commit()

        session.add(Team(name="Rockets", event_id=sample_event.id))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_attendee_in_one_team_per_event(self, session: Session, sample_event: Event, make_attendee):
        attendee = make_attendee()
        first = Team(name="First", event_id=sample_event.id)
        second = Team(name="Second", event_id=sample_event.id)
        session.add(first)
        session.add(second)
        session.commit()

        session.add(TeamMember(team_id=first.id, event_id=sample_event.id, attendee_id=attendee.id))
        session.commit()

        session.add(TeamMember(team_id=second.id, event_id=sample_event.id, attendee_id=attendee.id))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_is_full(self, sample_event: Event):
        team = Team(name="Tiny", event_id=sample_event.id, max_size=2, member_count=1)
        assert team.is_full is False
        team.member_count = 2
        assert team.is_full is True


class TestNotificationModel:
    """Tests for notifications and inbox entries."""

    def test_json_fields_round_trip(self, session: Session, sample_event: Event, make_attendee):
        attendee = make_attendee()
        notification = Notification(
            event_id=sample_event.id,
            title="Welcome",
            data={"type": "event", "event": str(sample_event.id), "dynamic_link": f"event/{sample_event.id}"},
            attendees=[str(attendee.id)],
        )
        session.add(notification)
        session.commit()
        session.expire_all()

        retrieved = session.get(Notification, notification.id)
        assert retrieved.attendees == [str(attendee.id)]
        assert retrieved.data["type"] == "event"

    def test_one_inbox_entry_per_notification(self, session: Session, sample_event: Event, make_attendee):
        attendee = make_attendee()
        notification = Notification(event_id=sample_event.id, title="Hi")
        session.add(notification)
        session.commit()

        session.add(AttendeeNotification(attendee_id=attendee.id, notification_id=notification.id))
        session.commit()
        session.add(AttendeeNotification(attendee_id=attendee.id, notification_id=notification.id))
        with pytest.raises(IntegrityError):
            session.commit()
