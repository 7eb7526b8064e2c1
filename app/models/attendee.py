"""Attendee model and the records it owns.

An Attendee is the single owner of a participant's identity. Events, teams
and activities only reference it by id. The attendee also owns two sets:
the device tokens used for push delivery, and the notification inbox that
tracks read state per notification.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.notification import Notification


class Attendee(SQLModel, table=True):
    """A person taking part in one or more events.

    Profile fields such as first and last name live in the external identity
    directory and are looked up by ``user_id`` when needed.

    Attributes:
        id: Internal record id (UUID).
        user_id: Opaque id of the user in the identity directory (unique).
        public_id: Optional public-facing id, e.g. printed on a badge (unique).
        email: Contact email, used to match attendees on confirmation.
        phone_number: Phone number for SMS broadcasts.
        accept_sms_notifications: Opt-in flag for SMS broadcasts.
        school: Free-text school name.
        cv: Storage key of the uploaded résumé, if any.
        created_at: When the attendee record was created.
        messaging_tokens: Device tokens registered for push delivery.
        notifications: Inbox entries, in delivery order.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    public_id: str | None = Field(default=None, index=True, unique=True)
    email: str | None = Field(default=None, index=True)
    phone_number: str | None = None
    accept_sms_notifications: bool = Field(default=False)
    school: str | None = None
    cv: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    messaging_tokens: list["MessagingToken"] = Relationship(
        back_populates="attendee",
        sa_relationship_kwargs={"order_by": "MessagingToken.id"},
    )
    notifications: list["AttendeeNotification"] = Relationship(
        back_populates="attendee",
        sa_relationship_kwargs={"order_by": "AttendeeNotification.id"},
    )


class MessagingToken(SQLModel, table=True):
    """A device token for push notifications, unique per attendee."""
    __table_args__ = (UniqueConstraint("attendee_id", "token"),)

    id: int | None = Field(default=None, primary_key=True)
    attendee_id: UUID = Field(foreign_key="attendee.id", index=True)
    token: str

    attendee: Optional[Attendee] = Relationship(back_populates="messaging_tokens")


class AttendeeNotification(SQLModel, table=True):
    """An inbox entry: one notification delivered to one attendee.

    The notification record itself is immutable; whether the attendee has
    seen it is tracked here. The unique constraint guarantees that delivering
    the same notification twice never produces a second entry.

    Attributes:
        id: Autoincrement id, also the inbox ordering.
        attendee_id: Recipient.
        notification_id: Delivered notification.
        seen: Whether the attendee has read the notification.
    """
    __table_args__ = (UniqueConstraint("attendee_id", "notification_id"),)

    id: int | None = Field(default=None, primary_key=True)
    attendee_id: UUID = Field(foreign_key="attendee.id", index=True)
    notification_id: UUID = Field(foreign_key="notification.id", index=True)
    seen: bool = Field(default=False)

    # Relationships
    attendee: Optional[Attendee] = Relationship(back_populates="notifications")
    notification: Optional["Notification"] = Relationship()
