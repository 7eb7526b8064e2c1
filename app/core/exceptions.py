"""Error taxonomy for the registration services.

Every failure the services can report is a ``RegistrationError`` subclass with
a stable ``code`` and an HTTP ``status_code``. The API layer translates them
with a single exception handler (see ``app.main``), so services raise and
routes never catch.

Kinds:
    - ``NotFoundError``: a referenced attendee, event, team, roster entry,
      notification or activity does not exist.
    - ``ConflictError``: the write would break a uniqueness or capacity rule.
    - ``InvalidOperationError``: the request can never succeed as stated.
"""


class RegistrationError(Exception):
    """Base class for all domain failures."""
    code = "registration_error"
    status_code = 500
    message = "Registration error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.detail = message or self.message


class NotFoundError(RegistrationError):
    code = "not_found"
    status_code = 404
    message = "Not found"


class ConflictError(RegistrationError):
    code = "conflict"
    status_code = 409
    message = "Conflict"


class InvalidOperationError(RegistrationError):
    code = "invalid_operation"
    status_code = 400
    message = "Invalid operation"


# Not found

class AttendeeNotFoundError(NotFoundError):
    code = "attendee_not_found"
    message = "Attendee not found"


class UserNotAttendeeError(NotFoundError):
    code = "user_not_attendee"
    message = "User is not an attendee"


class EventNotFoundError(NotFoundError):
    code = "event_not_found"
    message = "Event not found"


class TeamNotFoundError(NotFoundError):
    code = "team_not_found"
    message = "Team not found"


class RosterEntryNotFoundError(NotFoundError):
    code = "roster_entry_not_found"
    message = "Attendee not found in event"


class NotificationNotFoundError(NotFoundError):
    code = "notification_not_found"
    message = "Notification not found"


class ActivityNotFoundError(NotFoundError):
    code = "activity_not_found"
    message = "Activity not found"


# Conflicts

class AttendeeAlreadyExistsError(ConflictError):
    code = "attendee_already_exists"
    message = "An attendee already exists for this user"


class PublicIdTakenError(ConflictError):
    code = "public_id_taken"
    message = "Public id already assigned to another attendee"


class AlreadyRegisteredError(ConflictError):
    code = "attendee_already_registered"
    message = "Attendee already registered to event"


class AlreadyOnTeamError(ConflictError):
    code = "attendee_already_on_team"
    message = "Attendee already belongs to a team for this event"


class AlreadyScannedError(ConflictError):
    code = "attendee_already_scanned"
    message = "Scanned attendee already scanned by attendee"


class TokenAlreadyExistsError(ConflictError):
    code = "token_already_exists"
    message = "Token already exists"


class TeamFullError(ConflictError):
    code = "team_full"
    message = "Team is full"


class AlreadyInActivityError(ConflictError):
    code = "attendee_already_in_activity"
    message = "Attendee is already a participant to this activity"


# Invalid operations

class SelfScanError(InvalidOperationError):
    code = "self_scan"
    message = "An attendee cannot scan itself"


class NoCandidatesError(InvalidOperationError):
    code = "no_candidates"
    message = "Cannot raffle without candidates"


class NotATeamMemberError(InvalidOperationError):
    code = "not_a_team_member"
    message = "Attendee is not a member of this team"


class TokenNotFoundError(InvalidOperationError):
    code = "token_not_found"
    message = "Token doesn't exist"
