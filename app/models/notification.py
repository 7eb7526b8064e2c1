"""Notification model.

A Notification is written once by the fan-out and never updated afterwards.
Read state lives on each recipient's inbox (``AttendeeNotification``).
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Notification(SQLModel, table=True):
    """A message sent to a list of attendees.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Event the notification is scoped to.
        title: Short title.
        body: Message text.
        data: Typed payload, see ``app.schemas.NotificationData``.
        attendees: Recipient attendee ids, captured at send time.
        created_at: When the notification was created.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID | None = Field(default=None, foreign_key="event.id", index=True)
    title: str
    body: str = ""
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    attendees: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
