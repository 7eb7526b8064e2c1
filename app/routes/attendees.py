"""Attendee routes: profile, device tokens and notification read state."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from app.core.database import get_session
from app.core.deps import get_user_id
from app.core.exceptions import AttendeeNotFoundError
from app.models import Attendee
from app.registration import attendees as registry
from app.schemas import (
    AttendeeCreate,
    AttendeeRead,
    AttendeeSearchRequest,
    AttendeeSearchResponse,
    AttendeeUpdate,
    NotificationSeenUpdate,
    TokenCreate,
)

router = APIRouter(prefix="/attendees", tags=["attendees"])


@router.post("", response_model=AttendeeRead, status_code=status.HTTP_201_CREATED)
async def create_attendee(
    data: AttendeeCreate,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """Create the attendee record of the calling user. Returns 409 if it already exists."""
    return registry.create_attendee(session, user_id, data)


@router.get("", response_model=list[AttendeeRead])
async def list_attendees(session: Session = Depends(get_session)):
    return session.exec(select(Attendee).order_by(Attendee.created_at)).all()


@router.get("/info", response_model=AttendeeRead | None)
async def get_info(user_id: str = Depends(get_user_id), session: Session = Depends(get_session)):
    """The calling user's attendee record, or null if they have none."""
    return registry.get_attendee_by_user(session, user_id)


@router.put("", response_model=AttendeeRead)
async def update_attendee(
    data: AttendeeUpdate,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    return registry.update_attendee_info(session, {"user_id": user_id}, data)


@router.post("/search", response_model=AttendeeSearchResponse)
async def search_attendees(data: AttendeeSearchRequest, session: Session = Depends(get_session)):
    """
    Page through a set of attendees, optionally filtered by school.

    Ordering follows the configured search strategy.
    """
    total, results = registry.search_attendees(
        session,
        data.attendee_ids,
        start=data.start,
        length=data.length,
        schools=data.schools,
    )
    return AttendeeSearchResponse(
        draw=data.draw,
        records_total=total,
        records_filtered=total,
        data=results,
    )


@router.put("/token", status_code=status.HTTP_204_NO_CONTENT)
async def add_token(
    data: TokenCreate,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    registry.add_token(session, user_id, data.token)


@router.delete("/token/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_token(
    token: str,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    registry.remove_token(session, user_id, token)


@router.put("/notification", status_code=status.HTTP_204_NO_CONTENT)
async def update_notification(
    data: NotificationSeenUpdate,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """Mark one of the calling user's notifications as seen or unseen."""
    registry.mark_seen(session, user_id, data.notification, data.seen)


@router.get("/user/{user_id}", response_model=AttendeeRead)
async def get_by_user_id(user_id: str, session: Session = Depends(get_session)):
    attendee = registry.get_attendee_by_user(session, user_id)
    if not attendee:
        raise AttendeeNotFoundError()
    return attendee


@router.get("/public/{public_id}", response_model=AttendeeRead)
async def get_by_public_id(public_id: str, session: Session = Depends(get_session)):
    attendee = session.exec(select(Attendee).where(Attendee.public_id == public_id)).first()
    if not attendee:
        raise AttendeeNotFoundError()
    return attendee


@router.put("/{attendee_id}/public_id/{public_id}", response_model=AttendeeRead)
async def set_public_id(attendee_id: UUID, public_id: str, session: Session = Depends(get_session)):
    return registry.set_public_id(session, attendee_id, public_id)
