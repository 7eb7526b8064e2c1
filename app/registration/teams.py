"""Team coordination: create-or-join, leave, and team reads.

A team moves through three states per (event, name): absent (no row), open
(fewer members than ``max_size``) and full. It returns to absent when its
last member leaves.

Two database guarantees keep the invariants under concurrent requests:

    - Seats are taken with a compare-and-swap on ``Team.member_count``
      (``... WHERE member_count < max_size``). A join that matches no row
      lost the race for the last seat.
    - ``TeamMember`` is unique on (event_id, attendee_id), so an attendee
      can never be inserted into a second team of the same event.

Both happen in one transaction: if the membership insert fails, the rollback
also returns the seat and discards a team created by the same call.
"""
import logging
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.clients import identity
from app.core.config import settings
from app.core.exceptions import (
    AlreadyOnTeamError,
    NotATeamMemberError,
    TeamFullError,
    TeamNotFoundError,
)
from app.models import Attendee, Team, TeamMember
from app.registration.attendees import get_attendee_by_user, require_attendee_for_user
from app.registration.roster import ensure_attendee, get_attendee_status, get_event
from app.schemas import AttendeeRead, LeaveTeamResponse, TeamMemberRead, TeamRead, UserProfile

logger = logging.getLogger(__name__)


def _find_team(session: Session, event_id: UUID, name: str) -> Team | None:
    statement = select(Team).where(Team.event_id == event_id).where(Team.name == name)
    return session.exec(statement).first()


def _claim_seat(session: Session, event_id: UUID, name: str, max_size: int | None) -> UUID | None:
    """
    Take a seat in the named team, creating the team when absent.

    Returns the team id, or None when the team was deleted between the
    lookup and the seat update. The seat stays uncommitted.
    """
    team = _find_team(session, event_id, name)
    if team is None:
        team = Team(
            name=name,
            event_id=event_id,
            max_size=max_size or settings.team_max_size,
        )
        session.add(team)
        try:
            session.flush()
            logger.info(f"Creating team {name} for event {event_id}")
        except IntegrityError:
            # Another request created it first, join that one instead
            session.rollback()
            team = _find_team(session, event_id, name)
            if team is None:
                return None
    team_id = team.id

    result = session.exec(
        update(Team)
        .where(Team.id == team_id)
        .where(Team.member_count < Team.max_size)
        .values(member_count=Team.member_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        session.rollback()
        if _find_team(session, event_id, name) is None:
            return None
        raise TeamFullError()
    return team_id


def create_or_join(
    session: Session,
    name: str,
    event_id: UUID,
    user_id: str,
    max_size: int | None = None,
) -> Team:
    """
    Join the team called ``name`` in the event, creating it if needed.

    The caller is added to the event roster first if they are not on it yet.
    A team emptied by its last member while this call runs is created anew.

    Raises:
        UserNotAttendeeError: The user has no attendee record.
        EventNotFoundError: The event does not exist.
        TeamFullError: The team has no seat left.
        AlreadyOnTeamError: The attendee already belongs to a team of this event.
    """
    attendee = require_attendee_for_user(session, user_id)
    get_event(session, event_id)
    ensure_attendee(session, event_id, attendee)
    attendee_id = attendee.id

    team_id = _claim_seat(session, event_id, name, max_size)
    if team_id is None:
        logger.info(f"Team {name} of event {event_id} was deleted during the join, recreating it")
        team_id = _claim_seat(session, event_id, name, max_size)
        if team_id is None:
            raise TeamNotFoundError()

    session.add(TeamMember(team_id=team_id, event_id=event_id, attendee_id=attendee_id))
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyOnTeamError() from None

    team = session.get(Team, team_id)
    session.refresh(team)
    logger.info(f"Attendee {attendee_id} joined team {team.name} ({team.member_count}/{team.max_size})")
    return team


def leave(session: Session, team_id: UUID, attendee_id: UUID) -> LeaveTeamResponse:
    """
    Remove an attendee from a team, deleting the team when it becomes empty.

    Remaining members keep their join order; there is no owner to reassign.
    """
    team = session.get(Team, team_id)
    if not team:
        raise TeamNotFoundError()

    result = session.exec(
        delete(TeamMember)
        .where(TeamMember.team_id == team_id)
        .where(TeamMember.attendee_id == attendee_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        session.rollback()
        raise NotATeamMemberError()

    session.exec(
        update(Team)
        .where(Team.id == team_id)
        .values(member_count=Team.member_count - 1)
        .execution_options(synchronize_session=False)
    )
    remaining = session.exec(select(Team.member_count).where(Team.id == team_id)).one()

    deleted = remaining == 0
    if deleted:
        session.exec(
            delete(Team)
            .where(Team.id == team_id)
            .execution_options(synchronize_session=False)
        )
    session.commit()
    session.expire_all()

    if deleted:
        logger.info(f"Attendee {attendee_id} left team {team_id}, team deleted")
    else:
        logger.info(f"Attendee {attendee_id} left team {team_id}, {remaining} members remain")
    return LeaveTeamResponse(deleted=deleted, remaining_count=remaining)


def list_teams(session: Session, event_id: UUID | None = None) -> list[Team]:
    statement = select(Team).order_by(Team.created_at)
    if event_id:
        statement = statement.where(Team.event_id == event_id)
    return session.exec(statement).all()


def to_read(session: Session, team: Team) -> TeamRead:
    """
    Build the team view with each member's current status and profile.

    Status comes from the event roster at read time; it is never stored on
    the team.
    """
    attendees = session.exec(
        select(Attendee)
        .join(TeamMember, TeamMember.attendee_id == Attendee.id)
        .where(TeamMember.team_id == team.id)
        .order_by(TeamMember.id)
    ).all()
    profiles = identity.get_users([a.user_id for a in attendees])

    members = [
        TeamMemberRead(
            attendee=AttendeeRead.model_validate(attendee),
            user=profiles.get(attendee.user_id, UserProfile()),
            status=get_attendee_status(session, team.event_id, attendee.id),
        )
        for attendee in attendees
    ]
    return TeamRead(
        id=team.id,
        name=team.name,
        event_id=team.event_id,
        max_size=team.max_size,
        is_full=team.is_full,
        attendees=members,
    )


def get_team(session: Session, team_id: UUID) -> TeamRead:
    team = session.get(Team, team_id)
    if not team:
        raise TeamNotFoundError()
    return to_read(session, team)


def get_team_by_user_and_event(session: Session, event_id: UUID, user_id: str) -> TeamRead | None:
    """The team the user belongs to in the event, or None."""
    attendee = get_attendee_by_user(session, user_id)
    if not attendee:
        return None

    team = session.exec(
        select(Team)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.event_id == event_id)
        .where(TeamMember.attendee_id == attendee.id)
    ).first()
    if not team:
        return None
    return to_read(session, team)
