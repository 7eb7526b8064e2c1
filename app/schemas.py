"""Request and response bodies for the HTTP API."""
from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# --- Notification payloads ---

class EventNotificationData(BaseModel):
    type: Literal["event"] = "event"
    event: str
    dynamic_link: str


class ActivityNotificationData(BaseModel):
    type: Literal["activity"] = "activity"
    activity: str
    dynamic_link: str


NotificationData = Annotated[
    EventNotificationData | ActivityNotificationData,
    Field(discriminator="type"),
]
notification_data_adapter = TypeAdapter(NotificationData)


# --- Attendees ---

class AttendeeCreate(BaseModel):
    email: str | None = None
    phone_number: str | None = None
    accept_sms_notifications: bool = False
    school: str | None = None
    cv: str | None = None


class AttendeeUpdate(BaseModel):
    """Partial profile update; unset fields are left untouched."""
    email: str | None = None
    phone_number: str | None = None
    accept_sms_notifications: bool | None = None
    school: str | None = None


class AttendeeRead(BaseModel):
    id: UUID
    user_id: str
    public_id: str | None = None
    email: str | None = None
    phone_number: str | None = None
    accept_sms_notifications: bool
    school: str | None = None
    cv: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfile(BaseModel):
    """Profile fields resolved from the identity directory (blank when unknown)."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    birth_date: str = ""


class AttendeeSearchResult(AttendeeRead):
    user: UserProfile


class AttendeeSearchRequest(BaseModel):
    attendee_ids: list[UUID]
    start: int = Field(default=0, ge=0)
    length: int = Field(default=10, ge=0)
    schools: list[str] = []
    draw: int = 0


class AttendeeSearchResponse(BaseModel):
    draw: int
    records_total: int
    records_filtered: int
    data: list[AttendeeSearchResult]


class TokenCreate(BaseModel):
    token: str


class NotificationSeenUpdate(BaseModel):
    notification: UUID
    seen: bool


# --- Events ---

class EventCreate(BaseModel):
    name: str
    begin_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None


class EventRead(BaseModel):
    id: UUID
    name: str
    begin_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RosterAdd(BaseModel):
    """Add an attendee to an event roster by attendee id or by user id."""
    attendee_id: UUID | None = None
    user_id: str | None = None
    role: str = "participant"


class RosterEntryRead(BaseModel):
    attendee_id: UUID
    role: str
    registered: bool
    scanned_attendees: list[UUID]


class AttendeeConfirm(BaseModel):
    email: str
    fields: AttendeeUpdate = AttendeeUpdate()
    cv: str | None = None


class ScanCreate(BaseModel):
    scanned_attendee: UUID


class NotificationCreate(BaseModel):
    title: str
    body: str = ""


class SmsCreate(BaseModel):
    text: str


class NotificationRead(BaseModel):
    id: UUID
    event_id: UUID | None = None
    title: str
    body: str
    data: NotificationData
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InboxEntryRead(BaseModel):
    notification: NotificationRead
    seen: bool

    model_config = ConfigDict(from_attributes=True)


# --- Teams ---

class TeamCreateOrJoin(BaseModel):
    name: str = Field(min_length=1)
    event: UUID


class TeamMemberRead(BaseModel):
    attendee: AttendeeRead
    user: UserProfile
    status: str


class TeamRead(BaseModel):
    id: UUID
    name: str
    event_id: UUID
    max_size: int
    is_full: bool
    attendees: list[TeamMemberRead]


class LeaveTeamResponse(BaseModel):
    deleted: bool
    remaining_count: int


# --- Activities ---

class ActivityCreate(BaseModel):
    name: str
    location: str
    begin_date: datetime
    end_date: datetime


class ActivityRead(BaseModel):
    id: UUID
    event_id: UUID
    name: str
    location: str
    begin_date: datetime
    end_date: datetime
    attendees: list[UUID] = []


class RaffleWinner(BaseModel):
    attendee: AttendeeRead
    user: UserProfile
