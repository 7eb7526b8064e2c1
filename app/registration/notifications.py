"""Notification fan-out to attendee inboxes, and SMS broadcasts."""
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.clients import sms
from app.models import Attendee, AttendeeNotification, Notification
from app.registration.activities import get_activity
from app.registration.attendees import get_attendee_by_user
from app.registration.roster import get_event, get_roster_attendees
from app.schemas import (
    ActivityNotificationData,
    EventNotificationData,
    NotificationData,
    notification_data_adapter,
)

logger = logging.getLogger(__name__)


def _create(
    session: Session,
    event_id: UUID,
    title: str,
    body: str,
    data: NotificationData,
    recipients: list[UUID],
) -> Notification:
    notification = Notification(
        event_id=event_id,
        title=title,
        body=body,
        data=notification_data_adapter.dump_python(data, mode="json"),
        attendees=[str(attendee_id) for attendee_id in recipients],
    )
    session.add(notification)
    session.commit()
    session.refresh(notification)
    logger.info(f"Created {data.type} notification {notification.id} for {len(recipients)} attendees")
    return notification


def send_to_event(session: Session, event_id: UUID, title: str, body: str = "") -> Notification:
    """
    Notify every attendee currently on the event roster.

    The notification record is committed before any inbox is touched. If
    delivery stops halfway, ``deliver`` (or the periodic ``redeliver_pending``
    job) completes it later without duplicating entries.
    """
    get_event(session, event_id)
    recipients = [a.id for a in get_roster_attendees(session, event_id)]

    data = EventNotificationData(event=str(event_id), dynamic_link=f"event/{event_id}")
    notification = _create(session, event_id, title, body, data, recipients)
    deliver(session, notification)
    return notification


def send_to_activity(session: Session, activity_id: UUID, title: str, body: str = "") -> Notification:
    """Notify the attendees checked into an activity. Scoped to the activity's event."""
    activity = get_activity(session, activity_id)
    recipients = [a.attendee_id for a in activity.attendees]

    data = ActivityNotificationData(activity=str(activity_id), dynamic_link=f"activity/{activity_id}")
    notification = _create(session, activity.event_id, title, body, data, recipients)
    deliver(session, notification)
    return notification


def deliver(session: Session, notification: Notification) -> int:
    """
    Add the notification to the inbox of each recipient still missing it.

    Recipients that already hold it are never written again. Each new entry
    is committed on its own and guarded by the (attendee, notification)
    unique constraint, so a concurrent delivery of the same entry is skipped.
    Returns the number of entries created.
    """
    notification_id = notification.id
    missing = [UUID(attendee_id) for attendee_id in missing_recipients(session, notification)]
    if not missing:
        return 0

    known = set(session.exec(select(Attendee.id).where(col(Attendee.id).in_(missing))).all())
    delivered = 0
    for attendee_id in missing:
        if attendee_id not in known:
            logger.warning(f"Notification {notification_id} recipient {attendee_id} has no attendee record, skipping")
            continue
        session.add(AttendeeNotification(attendee_id=attendee_id, notification_id=notification_id))
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if not _has_entry(session, attendee_id, notification_id):
                logger.warning(f"Could not deliver notification {notification_id} to {attendee_id}: {e.orig}")
            continue
        delivered += 1

    if delivered:
        logger.info(f"Delivered notification {notification_id} to {delivered}/{len(notification.attendees)} inboxes")
    return delivered


def _has_entry(session: Session, attendee_id: UUID, notification_id: UUID) -> bool:
    statement = (
        select(AttendeeNotification.id)
        .where(AttendeeNotification.attendee_id == attendee_id)
        .where(AttendeeNotification.notification_id == notification_id)
    )
    return session.exec(statement).first() is not None


def missing_recipients(session: Session, notification: Notification) -> list[str]:
    """Recipient attendee ids whose inbox does not hold the notification yet."""
    delivered = {
        str(attendee_id)
        for attendee_id in session.exec(
            select(AttendeeNotification.attendee_id)
            .where(AttendeeNotification.notification_id == notification.id)
        ).all()
    }
    return [a for a in notification.attendees if a not in delivered]


def redeliver_pending(session: Session) -> int:
    """Complete the fan-out of every notification. Returns entries created."""
    total = 0
    for notification in session.exec(select(Notification).order_by(Notification.created_at)).all():
        total += deliver(session, notification)
    if total:
        logger.info(f"Redelivery created {total} missing inbox entries")
    return total


def list_for_user(
    session: Session,
    event_id: UUID,
    user_id: str,
    seen: bool | None = None,
) -> list[AttendeeNotification]:
    """
    Inbox entries of a user for notifications of one event, in delivery order.

    An unknown user simply has no notifications.
    """
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        return []

    statement = (
        select(AttendeeNotification)
        .join(Notification, Notification.id == AttendeeNotification.notification_id)
        .where(AttendeeNotification.attendee_id == attendee.id)
        .where(Notification.event_id == event_id)
        .order_by(AttendeeNotification.id)
    )
    if seen is not None:
        statement = statement.where(AttendeeNotification.seen == seen)
    return session.exec(statement).all()


def send_sms(session: Session, event_id: UUID, text: str) -> list[str]:
    """
    Text every roster attendee who opted in and has a phone number.

    Nothing is persisted; the gateway call is fire-and-forget. Returns the
    numbers the message was addressed to.
    """
    get_event(session, event_id)
    numbers = [
        a.phone_number
        for a in get_roster_attendees(session, event_id)
        if a.accept_sms_notifications and a.phone_number
    ]
    if not numbers:
        return []

    sms.send_sms(numbers, text)
    return numbers
