from typing import Any, Optional


class AttendanceError(Exception):
    """Base class for attendance domain errors.

    Every error carries the offending field and value so callers can show
    a specific message.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value


class InvalidSessionType(AttendanceError):
    """Session type is not one of the recognised session types."""


class InvalidStatus(AttendanceError):
    """Attendance status is not one of the recognised statuses."""


class InvalidCalendarPeriod(AttendanceError):
    """Month/year pair does not describe a calendar month."""


class InvalidLeavePeriod(AttendanceError):
    """Leave ends before it starts."""


class UnknownSession(AttendanceError):
    """No attendance session with the given id."""


class UnknownStudent(AttendanceError):
    """One or more student ids do not exist."""


class StoreUnavailable(AttendanceError):
    """The underlying database failed to answer."""


class ConstraintRace(AttendanceError):
    """A concurrent writer created the same session first.

    Raised and handled inside the session resolver only.
    """


class InvalidLateMinutes(InvalidStatus):
    """Late minutes must be a non-negative whole number."""
