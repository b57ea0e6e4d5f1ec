from enum import Enum
from typing import Union

from hostel_attendance.core.exceptions import InvalidSessionType, InvalidStatus


class ProfileRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"


class SessionType(str, Enum):
    NIGHT_ROLL = "NightRoll"
    MORNING = "Morning"
    EVENING = "Evening"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: Union[str, "SessionType"]) -> "SessionType":
        """Map a raw value onto a session type. Matching is case-sensitive."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSessionType(
                f"Unknown session type {value!r}; expected one of "
                f"{', '.join(t.value for t in cls)}",
                field="session_type",
                value=value,
            ) from None


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    LEAVE = "Leave"
    HOLIDAY = "Holiday"

    @classmethod
    def parse(cls, value: Union[str, "AttendanceStatus"]) -> "AttendanceStatus":
        """Map a raw value onto a status. 'Excused' is the old label for Leave."""
        if isinstance(value, cls):
            return value
        if value == "Excused":
            return cls.LEAVE
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatus(
                f"Unknown attendance status {value!r}; expected one of "
                f"{', '.join(s.value for s in cls)}",
                field="status",
                value=value,
            ) from None

    @property
    def rank(self) -> int:
        return STATUS_PRECEDENCE[self]


# Higher rank wins when one day has several records for the same student
STATUS_PRECEDENCE = {
    AttendanceStatus.HOLIDAY: 5,
    AttendanceStatus.ABSENT: 4,
    AttendanceStatus.LEAVE: 3,
    AttendanceStatus.LATE: 2,
    AttendanceStatus.PRESENT: 1,
}
