"""Activity routes: attendance, notifications and raffle."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.database import get_session
from app.registration import activities, notifications
from app.registration.raffle import raffle_activity
from app.schemas import ActivityRead, NotificationCreate, NotificationRead, RaffleWinner

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("/{activity_id}", response_model=ActivityRead)
async def get_activity(activity_id: UUID, session: Session = Depends(get_session)):
    return activities.to_read(activities.get_activity(session, activity_id))


@router.put("/{activity_id}/attendees/{attendee_id}", response_model=ActivityRead)
async def add_attendee(activity_id: UUID, attendee_id: UUID, session: Session = Depends(get_session)):
    """Check an attendee into an activity. Returns 409 if already checked in."""
    activity = activities.add_activity_attendee(session, activity_id, attendee_id)
    return activities.to_read(activity)


@router.post("/{activity_id}/notifications", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def send_notification(activity_id: UUID, data: NotificationCreate, session: Session = Depends(get_session)):
    """Notify everyone checked into the activity."""
    return notifications.send_to_activity(session, activity_id, data.title, data.body)


@router.get("/{activity_id}/raffle", response_model=RaffleWinner)
async def raffle(activity_id: UUID, session: Session = Depends(get_session)):
    """Draw a random winner among the activity's attendees."""
    return raffle_activity(session, activity_id)
