"""Raffle draw among an activity's attendees."""
import logging
import secrets
from collections.abc import Callable, Sequence
from typing import TypeVar
from uuid import UUID

from sqlmodel import Session

from app.clients import identity
from app.core.exceptions import NoCandidatesError
from app.models import Attendee
from app.registration.activities import get_activity_attendee_ids
from app.schemas import AttendeeRead, RaffleWinner

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns a uniformly distributed integer in [0, n)
RandBelow = Callable[[int], int]


def select_winner(candidates: Sequence[T], randbelow: RandBelow = secrets.randbelow) -> T:
    """
    Pick one candidate uniformly at random.

    ``randbelow`` is the random source; production uses the OS CSPRNG and
    tests may substitute a deterministic one.
    """
    if not candidates:
        raise NoCandidatesError()
    return candidates[randbelow(len(candidates))]


def raffle_activity(
    session: Session,
    activity_id: UUID,
    randbelow: RandBelow = secrets.randbelow,
) -> RaffleWinner:
    """Draw a winner among the attendees of an activity."""
    attendee_ids = get_activity_attendee_ids(session, activity_id)
    if not attendee_ids:
        raise NoCandidatesError(f"Activity {activity_id} has no attendee.")

    winner_id = select_winner(attendee_ids, randbelow)
    attendee = session.get(Attendee, winner_id)
    logger.info(f"Raffle for activity {activity_id} won by attendee {winner_id}")

    return RaffleWinner(
        attendee=AttendeeRead.model_validate(attendee),
        user=identity.get_user(attendee.user_id),
    )
