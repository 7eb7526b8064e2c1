"""Attendee registry: identity records, device tokens, inbox read state."""
import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.clients import identity
from app.core.config import settings
from app.core.exceptions import (
    AttendeeAlreadyExistsError,
    AttendeeNotFoundError,
    NotificationNotFoundError,
    PublicIdTakenError,
    TokenAlreadyExistsError,
    TokenNotFoundError,
    UserNotAttendeeError,
)
from app.models import Attendee, AttendeeNotification, MessagingToken
from app.schemas import AttendeeCreate, AttendeeSearchResult, AttendeeUpdate, UserProfile

logger = logging.getLogger(__name__)

SEARCH_STRATEGIES = ("insertion", "name")


def create_attendee(session: Session, user_id: str, fields: AttendeeCreate) -> Attendee:
    """Create the attendee record for a user. Fails if the user already has one."""
    attendee = Attendee(user_id=user_id, **fields.model_dump())
    session.add(attendee)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AttendeeAlreadyExistsError() from None

    session.refresh(attendee)
    logger.info(f"Created attendee {attendee.id} for user {user_id}")
    return attendee


def get_attendee_by_user(session: Session, user_id: str) -> Attendee | None:
    return session.exec(select(Attendee).where(Attendee.user_id == user_id)).first()


def require_attendee_for_user(session: Session, user_id: str) -> Attendee:
    """Resolve the attendee of a user, raising UserNotAttendeeError if none exists."""
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        raise UserNotAttendeeError()
    return attendee


def update_attendee_info(
    session: Session,
    filters: dict[str, Any],
    fields: AttendeeUpdate,
    attachment: str | None = None,
) -> Attendee:
    """
    Apply a partial profile update to the attendee matching ``filters``.

    ``attachment`` is the storage key of an already uploaded résumé and
    replaces the current one. Only fields explicitly set on ``fields`` are
    written, so replaying the same update is harmless.
    """
    attendee = session.exec(select(Attendee).filter_by(**filters)).first()
    if not attendee:
        raise AttendeeNotFoundError()

    for name, value in fields.model_dump(exclude_unset=True).items():
        setattr(attendee, name, value)
    if attachment is not None:
        attendee.cv = attachment

    session.add(attendee)
    session.commit()
    session.refresh(attendee)
    return attendee


def add_token(session: Session, user_id: str, token: str) -> None:
    """Register a device token for push delivery."""
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        raise AttendeeNotFoundError()

    session.add(MessagingToken(attendee_id=attendee.id, token=token))
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise TokenAlreadyExistsError() from None


def remove_token(session: Session, user_id: str, token: str) -> None:
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        raise AttendeeNotFoundError()

    result = session.exec(
        delete(MessagingToken)
        .where(MessagingToken.attendee_id == attendee.id)
        .where(MessagingToken.token == token)
    )
    if result.rowcount == 0:
        session.rollback()
        raise TokenNotFoundError()
    session.commit()


def set_public_id(session: Session, attendee_id: UUID, public_id: str) -> Attendee:
    attendee = session.get(Attendee, attendee_id)
    if not attendee:
        raise AttendeeNotFoundError(f"Attendee {attendee_id} not found.")

    attendee.public_id = public_id
    session.add(attendee)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise PublicIdTakenError() from None

    session.refresh(attendee)
    return attendee


def mark_seen(session: Session, user_id: str, notification_id: UUID, seen: bool) -> None:
    """
    Set the read state of one inbox entry.

    The update targets the single (attendee, notification) entry; the rest of
    the inbox is not touched.
    """
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        raise AttendeeNotFoundError()

    result = session.exec(
        update(AttendeeNotification)
        .where(AttendeeNotification.attendee_id == attendee.id)
        .where(AttendeeNotification.notification_id == notification_id)
        .values(seen=seen)
    )
    if result.rowcount == 0:
        session.rollback()
        raise NotificationNotFoundError()
    session.commit()


def search_attendees(
    session: Session,
    attendee_ids: list[UUID],
    start: int = 0,
    length: int = 10,
    schools: list[str] | None = None,
    strategy: str | None = None,
) -> tuple[int, list[AttendeeSearchResult]]:
    """
    Page through a set of attendees, optionally restricted to some schools.

    Two orderings are available:
        - ``insertion``: creation order, paged in the database.
        - ``name``: last name then first name from the identity directory.
          Names are not stored locally, so the whole filtered set is resolved
          before paging.

    Returns the total number of matches and the requested page, each entry
    enriched with its identity profile (blank when unresolvable).
    """
    strategy = strategy or settings.attendee_search_strategy
    if strategy not in SEARCH_STRATEGIES:
        raise ValueError(f"Unknown attendee search strategy: {strategy}")

    statement = select(Attendee).where(col(Attendee.id).in_(attendee_ids))
    if schools:
        statement = statement.where(col(Attendee.school).in_(schools))

    total = session.exec(
        select(func.count()).select_from(statement.subquery())
    ).one()

    if strategy == "insertion":
        page = session.exec(
            statement.order_by(Attendee.created_at, Attendee.id).offset(start).limit(length)
        ).all()
        profiles = identity.get_users([a.user_id for a in page])
    else:
        everyone = session.exec(statement).all()
        profiles = identity.get_users([a.user_id for a in everyone])
        everyone = sorted(
            everyone,
            key=lambda a: (
                profiles.get(a.user_id, UserProfile()).last_name.lower(),
                profiles.get(a.user_id, UserProfile()).first_name.lower(),
            ),
        )
        page = everyone[start:start + length]

    results = [
        AttendeeSearchResult.model_validate(
            {
                **attendee.model_dump(),
                "user": profiles.get(attendee.user_id, UserProfile()),
            }
        )
        for attendee in page
    ]
    return total, results
