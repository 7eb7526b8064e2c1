"""Activity models: sessions held during an event, with their own attendance."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event


class Activity(SQLModel, table=True):
    """An activity (workshop, talk, meal...) within an event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Parent event.
        name: Display name.
        location: Where it takes place.
        begin_date: Start time.
        end_date: End time.
        attendees: Attendance records, in check-in order.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    name: str
    location: str
    begin_date: datetime
    end_date: datetime

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="activities")
    attendees: list["ActivityAttendee"] = Relationship(
        back_populates="activity",
        sa_relationship_kwargs={"order_by": "ActivityAttendee.id"},
    )


class ActivityAttendee(SQLModel, table=True):
    """Attendance of one attendee at one activity."""
    __table_args__ = (UniqueConstraint("activity_id", "attendee_id"),)

    id: int | None = Field(default=None, primary_key=True)
    activity_id: UUID = Field(foreign_key="activity.id", index=True)
    attendee_id: UUID = Field(foreign_key="attendee.id", index=True)

    activity: Optional[Activity] = Relationship(back_populates="attendees")
