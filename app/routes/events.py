"""Event routes: roster, scanning, notifications and activities."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.database import get_session
from app.core.deps import get_user_id
from app.core.exceptions import AttendeeNotFoundError
from app.models import Attendee, EventAttendee
from app.registration import activities, notifications, roster
from app.schemas import (
    ActivityCreate,
    ActivityRead,
    AttendeeConfirm,
    AttendeeRead,
    EventCreate,
    EventRead,
    InboxEntryRead,
    NotificationCreate,
    NotificationRead,
    RosterAdd,
    RosterEntryRead,
    ScanCreate,
    SmsCreate,
)

router = APIRouter(prefix="/events", tags=["events"])


def _roster_entry_read(entry: EventAttendee) -> RosterEntryRead:
    return RosterEntryRead(
        attendee_id=entry.attendee_id,
        role=entry.role,
        registered=entry.registered,
        scanned_attendees=[s.scanned_attendee_id for s in entry.scanned_attendees],
    )


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventCreate, session: Session = Depends(get_session)):
    return roster.create_event(session, data)


@router.get("", response_model=list[EventRead])
async def list_events(session: Session = Depends(get_session)):
    return roster.list_events(session)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: UUID, session: Session = Depends(get_session)):
    return roster.get_event(session, event_id)


@router.get("/{event_id}/attendees", response_model=list[RosterEntryRead])
async def get_roster(event_id: UUID, session: Session = Depends(get_session)):
    """Roster entries in registration order, with the peers each attendee scanned."""
    event = roster.get_event(session, event_id)
    return [_roster_entry_read(entry) for entry in event.roster]


@router.post("/{event_id}/attendees", response_model=RosterEntryRead, status_code=status.HTTP_201_CREATED)
async def add_attendee(event_id: UUID, data: RosterAdd, session: Session = Depends(get_session)):
    """
    Add an attendee to the event roster.

    The attendee is given either by ``attendee_id`` or by identity
    ``user_id``. Returns 409 if the attendee is already registered.
    """
    attendee: Attendee | str | None = data.user_id
    if data.attendee_id:
        attendee = session.get(Attendee, data.attendee_id)
    if attendee is None:
        raise AttendeeNotFoundError()
    entry = roster.add_attendee(session, event_id, attendee, data.role)
    return _roster_entry_read(entry)


@router.get("/{event_id}/attendees/me")
async def has_attendee(
    event_id: UUID,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """Whether the calling user is on the event roster."""
    return {"registered": roster.has_attendee_for_user(session, event_id, user_id)}


@router.put("/{event_id}/confirm", response_model=AttendeeRead)
async def confirm_attendee(event_id: UUID, data: AttendeeConfirm, session: Session = Depends(get_session)):
    """Confirm an attendee's participation and apply their profile update."""
    return roster.confirm_attendee(session, event_id, data.email, data.fields, data.cv)


@router.put("/{event_id}/attendees/{attendee_id}/scan", status_code=status.HTTP_204_NO_CONTENT)
async def scan_attendee(
    event_id: UUID,
    attendee_id: UUID,
    data: ScanCreate,
    session: Session = Depends(get_session),
):
    """Record that ``attendee_id`` scanned another attendee's badge."""
    roster.scan_attendee(session, event_id, attendee_id, data.scanned_attendee)


@router.post("/{event_id}/notifications", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def send_notification(event_id: UUID, data: NotificationCreate, session: Session = Depends(get_session)):
    return notifications.send_to_event(session, event_id, data.title, data.body)


@router.get("/{event_id}/notifications", response_model=list[InboxEntryRead])
async def get_notifications(
    event_id: UUID,
    seen: bool | None = None,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """The calling user's notifications for the event, optionally filtered by read state."""
    entries = notifications.list_for_user(session, event_id, user_id, seen)
    return [InboxEntryRead.model_validate(entry) for entry in entries]


@router.post("/{event_id}/sms")
async def send_sms(event_id: UUID, data: SmsCreate, session: Session = Depends(get_session)):
    numbers = notifications.send_sms(session, event_id, data.text)
    return {"recipients": len(numbers)}


@router.post("/{event_id}/activities", response_model=ActivityRead, status_code=status.HTTP_201_CREATED)
async def create_activity(event_id: UUID, data: ActivityCreate, session: Session = Depends(get_session)):
    activity = activities.create_activity(session, event_id, data)
    return activities.to_read(activity)


@router.get("/{event_id}/activities", response_model=list[ActivityRead])
async def get_activities(event_id: UUID, session: Session = Depends(get_session)):
    return [activities.to_read(a) for a in activities.get_activities(session, event_id)]
