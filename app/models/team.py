"""Team models for per-event team formation."""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


class Team(SQLModel, table=True):
    """A team of attendees within one event.

    ``member_count`` mirrors the number of ``TeamMember`` rows and is the
    value the join path compares against ``max_size`` in a conditional
    update, so two concurrent joins can never both take the last seat.

    Attributes:
        id: Unique identifier (UUID).
        name: Team name, unique within the event.
        event_id: The event the team belongs to.
        max_size: Capacity captured when the team was created.
        member_count: Current number of members.
        created_at: When the team was created.
        members: Memberships in join order; the first one is the creator.
    """
    __table_args__ = (UniqueConstraint("event_id", "name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    event_id: UUID = Field(foreign_key="event.id", index=True)
    max_size: int = Field(default=4)
    member_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    members: list["TeamMember"] = Relationship(
        back_populates="team",
        sa_relationship_kwargs={"order_by": "TeamMember.id", "cascade": "all, delete-orphan"},
    )

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_size


class TeamMember(SQLModel, table=True):
    """Membership of one attendee in one team.

    ``event_id`` is denormalized from the team so the database can enforce
    that an attendee belongs to at most one team per event.
    """
    __table_args__ = (UniqueConstraint("event_id", "attendee_id"),)

    id: int | None = Field(default=None, primary_key=True)
    team_id: UUID = Field(foreign_key="team.id", index=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    attendee_id: UUID = Field(foreign_key="attendee.id", index=True)
    joined_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    team: Optional[Team] = Relationship(back_populates="members")
