"""Event model and its roster.

An Event owns its roster: one ``EventAttendee`` per registered attendee,
each carrying a role, a confirmation flag and the set of peers the attendee
has scanned at the venue.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.activity import Activity


class Event(SQLModel, table=True):
    """An event attendees register to.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name.
        begin_date: When the event starts.
        end_date: When the event ends.
        image_url: Optional banner image.
        created_at: When the event was created.
        roster: Roster entries, in registration order.
        activities: Activities held during the event.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    begin_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    roster: list["EventAttendee"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={"order_by": "EventAttendee.id"},
    )
    activities: list["Activity"] = Relationship(back_populates="event")


class EventAttendee(SQLModel, table=True):
    """A roster entry linking one attendee to one event.

    At most one entry exists per (event, attendee) pair; the unique
    constraint turns a duplicate registration into an IntegrityError rather
    than a second row.

    Attributes:
        id: Autoincrement id, also the registration order.
        event_id: The event.
        attendee_id: The registered attendee.
        role: Free-form role, e.g. "participant", "organizer", "sponsor".
        registered: True once the attendee confirmed their participation.
        scanned_attendees: Peers this attendee scanned, in scan order.
    """
    __table_args__ = (UniqueConstraint("event_id", "attendee_id"),)

    id: int | None = Field(default=None, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    attendee_id: UUID = Field(foreign_key="attendee.id", index=True)
    role: str = Field(default="participant")
    registered: bool = Field(default=False)

    # Relationships
    event: Optional[Event] = Relationship(back_populates="roster")
    scanned_attendees: list["ScannedAttendee"] = Relationship(
        back_populates="roster_entry",
        sa_relationship_kwargs={"order_by": "ScannedAttendee.id"},
    )


class ScannedAttendee(SQLModel, table=True):
    """A directed scan edge: the roster entry's attendee scanned another attendee.

    Edges only accumulate. Self scans are rejected before insert and
    duplicates are rejected by the unique constraint.
    """
    __table_args__ = (UniqueConstraint("roster_entry_id", "scanned_attendee_id"),)

    id: int | None = Field(default=None, primary_key=True)
    roster_entry_id: int = Field(foreign_key="eventattendee.id", index=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    scanned_attendee_id: UUID = Field(foreign_key="attendee.id", index=True)
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    roster_entry: Optional[EventAttendee] = Relationship(back_populates="scanned_attendees")
