"""Team routes: create-or-join, leave and team lookups."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.core.deps import get_user_id
from app.registration import teams
from app.registration.attendees import require_attendee_for_user
from app.schemas import LeaveTeamResponse, TeamCreateOrJoin, TeamRead

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", response_model=TeamRead)
async def create_or_join(
    data: TeamCreateOrJoin,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """
    Join the named team of an event, creating it when it does not exist.

    Returns 409 when the team is full or the caller is already on a team
    of this event.
    """
    team = teams.create_or_join(session, data.name, data.event, user_id)
    return teams.to_read(session, team)


@router.get("", response_model=list[TeamRead])
async def list_teams(event: UUID | None = None, session: Session = Depends(get_session)):
    return [teams.to_read(session, team) for team in teams.list_teams(session, event)]


@router.get("/info", response_model=TeamRead | None)
async def get_info(
    event: UUID,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """The calling user's team in the event, or null."""
    return teams.get_team_by_user_and_event(session, event, user_id)


@router.get("/event/{event_id}/user/{user_id}", response_model=TeamRead | None)
async def get_team_by_user_and_event(event_id: UUID, user_id: str, session: Session = Depends(get_session)):
    return teams.get_team_by_user_and_event(session, event_id, user_id)


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(team_id: UUID, session: Session = Depends(get_session)):
    return teams.get_team(session, team_id)


@router.delete("/{team_id}", response_model=LeaveTeamResponse)
async def leave_team(
    team_id: UUID,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """Leave a team. The team is deleted when its last member leaves."""
    attendee = require_attendee_for_user(session, user_id)
    return teams.leave(session, team_id, attendee.id)
