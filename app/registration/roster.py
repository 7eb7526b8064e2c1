"""Event roster: registration, confirmation and peer scanning.

Each write here is a conditional insert or a targeted update backed by a
unique constraint, so concurrent requests cannot produce duplicate roster
entries or duplicate scan edges, and a retried request fails cleanly with a
conflict instead of corrupting state.
"""
import logging
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.exceptions import (
    AlreadyRegisteredError,
    AlreadyScannedError,
    AttendeeNotFoundError,
    EventNotFoundError,
    RosterEntryNotFoundError,
    SelfScanError,
    UserNotAttendeeError,
)
from app.models import Attendee, Event, EventAttendee, ScannedAttendee
from app.registration.attendees import get_attendee_by_user, update_attendee_info
from app.schemas import AttendeeUpdate, EventCreate

logger = logging.getLogger(__name__)

# Derived attendee statuses, from least to most advanced
STATUS_NOT_REGISTERED = "not_registered"
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_PRESENT = "present"


def create_event(session: Session, data: EventCreate) -> Event:
    event = Event(**data.model_dump())
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Created event {event.name} ({event.id})")
    return event


def get_event(session: Session, event_id: UUID) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise EventNotFoundError()
    return event


def list_events(session: Session) -> list[Event]:
    return session.exec(select(Event).order_by(Event.begin_date, Event.name)).all()


def get_roster_entry(session: Session, event_id: UUID, attendee_id: UUID) -> EventAttendee | None:
    statement = (
        select(EventAttendee)
        .where(EventAttendee.event_id == event_id)
        .where(EventAttendee.attendee_id == attendee_id)
    )
    return session.exec(statement).first()


def add_attendee(
    session: Session,
    event_id: UUID,
    attendee_or_user_id: Attendee | str,
    role: str,
) -> EventAttendee:
    """
    Add an attendee to an event roster.

    ``attendee_or_user_id`` is either an Attendee or the identity directory
    user id of one. The new entry starts unconfirmed with no scans.

    Raises:
        AttendeeNotFoundError: The user has no attendee record.
        EventNotFoundError: The event does not exist.
        AlreadyRegisteredError: The attendee is already on the roster.
    """
    if isinstance(attendee_or_user_id, Attendee):
        attendee = attendee_or_user_id
    else:
        attendee = get_attendee_by_user(session, attendee_or_user_id)
    if not attendee:
        raise AttendeeNotFoundError()

    get_event(session, event_id)

    entry = EventAttendee(event_id=event_id, attendee_id=attendee.id, role=role)
    session.add(entry)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyRegisteredError() from None

    session.refresh(entry)
    logger.info(f"Added attendee {attendee.id} to event {event_id} as {role}")
    return entry


def ensure_attendee(session: Session, event_id: UUID, attendee: Attendee, role: str = "participant") -> bool:
    """Add the attendee to the roster unless already there. Returns True if added."""
    try:
        add_attendee(session, event_id, attendee, role)
    except AlreadyRegisteredError:
        return False
    return True


def has_attendee(session: Session, event_id: UUID, attendee_id: UUID) -> bool:
    return get_roster_entry(session, event_id, attendee_id) is not None


def has_attendee_for_user(session: Session, event_id: UUID, user_id: str) -> bool:
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        raise UserNotAttendeeError()
    return has_attendee(session, event_id, attendee.id)


def confirm_attendee(
    session: Session,
    event_id: UUID,
    email: str,
    fields: AttendeeUpdate,
    attachment: str | None = None,
) -> Attendee:
    """
    Confirm an attendee's registration, then update their profile.

    These are two independent writes. If the process dies between them the
    attendee stays confirmed with the old profile; replaying the call is safe
    because both writes are idempotent.
    """
    attendee = session.exec(select(Attendee).where(Attendee.email == email)).first()
    if not attendee:
        raise UserNotAttendeeError()

    result = session.exec(
        update(EventAttendee)
        .where(EventAttendee.event_id == event_id)
        .where(EventAttendee.attendee_id == attendee.id)
        .values(registered=True)
    )
    if result.rowcount == 0:
        session.rollback()
        raise RosterEntryNotFoundError()
    session.commit()
    logger.info(f"Confirmed attendee {attendee.id} for event {event_id}")

    return update_attendee_info(session, {"email": email}, fields, attachment)


def scan_attendee(session: Session, event_id: UUID, attendee_id: UUID, scanned_attendee_id: UUID) -> ScannedAttendee:
    """
    Record that ``attendee_id`` scanned ``scanned_attendee_id`` at the event.

    Edges are directed: A scanning B says nothing about B scanning A.

    Raises:
        SelfScanError: Both ids are the same attendee.
        EventNotFoundError: The event does not exist.
        RosterEntryNotFoundError: Either attendee is not on the roster.
        AlreadyScannedError: The edge already exists.
    """
    if attendee_id == scanned_attendee_id:
        raise SelfScanError()

    get_event(session, event_id)

    entry = get_roster_entry(session, event_id, attendee_id)
    if not entry:
        raise RosterEntryNotFoundError("Attendee not found in event")
    if not has_attendee(session, event_id, scanned_attendee_id):
        raise RosterEntryNotFoundError("Scanned attendee not found in event")

    edge = ScannedAttendee(
        roster_entry_id=entry.id,
        event_id=event_id,
        scanned_attendee_id=scanned_attendee_id,
    )
    session.add(edge)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyScannedError() from None

    session.refresh(edge)
    logger.info(f"Attendee {attendee_id} scanned {scanned_attendee_id} at event {event_id}")
    return edge


def get_attendee_status(session: Session, event_id: UUID, attendee_id: UUID) -> str:
    """
    Derive an attendee's status at an event from the current roster.

    ``present`` once any peer scanned them, ``confirmed`` once registration
    is confirmed, ``pending`` while on the roster unconfirmed, and
    ``not_registered`` without a roster entry.
    """
    entry = get_roster_entry(session, event_id, attendee_id)
    if not entry:
        return STATUS_NOT_REGISTERED

    scanned_by = session.exec(
        select(func.count())
        .select_from(ScannedAttendee)
        .where(ScannedAttendee.event_id == event_id)
        .where(ScannedAttendee.scanned_attendee_id == attendee_id)
    ).one()
    if scanned_by:
        return STATUS_PRESENT
    if entry.registered:
        return STATUS_CONFIRMED
    return STATUS_PENDING


def get_roster_attendees(session: Session, event_id: UUID) -> list[Attendee]:
    """Attendees on the event roster, in registration order."""
    statement = (
        select(Attendee)
        .join(EventAttendee, EventAttendee.attendee_id == Attendee.id)
        .where(EventAttendee.event_id == event_id)
        .order_by(EventAttendee.id)
    )
    return session.exec(statement).all()
