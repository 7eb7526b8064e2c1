from app.models.activity import Activity, ActivityAttendee
from app.models.attendee import Attendee, AttendeeNotification, MessagingToken
from app.models.event import Event, EventAttendee, ScannedAttendee
from app.models.notification import Notification
from app.models.team import Team, TeamMember

__all__ = [
    "Activity",
    "ActivityAttendee",
    "Attendee",
    "AttendeeNotification",
    "Event",
    "EventAttendee",
    "MessagingToken",
    "Notification",
    "ScannedAttendee",
    "Team",
    "TeamMember",
]
