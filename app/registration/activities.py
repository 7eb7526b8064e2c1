"""Activities held during an event and their attendance lists."""
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.exceptions import ActivityNotFoundError, AlreadyInActivityError, AttendeeNotFoundError
from app.models import Activity, ActivityAttendee, Attendee
from app.registration.roster import get_event
from app.schemas import ActivityCreate, ActivityRead

logger = logging.getLogger(__name__)


def to_read(activity: Activity) -> ActivityRead:
    return ActivityRead(
        **activity.model_dump(),
        attendees=[a.attendee_id for a in activity.attendees],
    )


def create_activity(session: Session, event_id: UUID, data: ActivityCreate) -> Activity:
    get_event(session, event_id)

    activity = Activity(event_id=event_id, **data.model_dump())
    session.add(activity)
    session.commit()
    session.refresh(activity)
    logger.info(f"Created activity {activity.name} ({activity.id}) for event {event_id}")
    return activity


def get_activities(session: Session, event_id: UUID) -> list[Activity]:
    get_event(session, event_id)
    statement = (
        select(Activity)
        .where(Activity.event_id == event_id)
        .order_by(Activity.begin_date)
    )
    return session.exec(statement).all()


def get_activity(session: Session, activity_id: UUID) -> Activity:
    activity = session.get(Activity, activity_id)
    if not activity:
        raise ActivityNotFoundError(f"Activity {activity_id} not found.")
    return activity


def add_activity_attendee(session: Session, activity_id: UUID, attendee_id: UUID) -> Activity:
    """Record an attendee's presence at an activity."""
    activity = get_activity(session, activity_id)
    if not session.get(Attendee, attendee_id):
        raise AttendeeNotFoundError(f"Attendee {attendee_id} not found.")

    session.add(ActivityAttendee(activity_id=activity.id, attendee_id=attendee_id))
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyInActivityError(
            f"Attendee {attendee_id} is already a participant to activity {activity_id}."
        ) from None

    session.refresh(activity)
    return activity


def get_activity_attendee_ids(session: Session, activity_id: UUID) -> list[UUID]:
    """Attendee ids of an activity, in check-in order."""
    get_activity(session, activity_id)
    statement = (
        select(ActivityAttendee.attendee_id)
        .where(ActivityAttendee.activity_id == activity_id)
        .order_by(ActivityAttendee.id)
    )
    return list(session.exec(statement).all())
