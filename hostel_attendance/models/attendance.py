from typing import Optional, List
from datetime import date, datetime

from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum as SQLAEnum,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
    literal_column,
)

from hostel_attendance.core.datetime_utils import UTCDateTime, utc_now
from hostel_attendance.models.enums import AttendanceStatus, SessionType


def _enum_values(enum_cls):
    # Persist the display values ("NightRoll"), not the member names
    return [member.value for member in enum_cls]


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------

class AttendanceSession(SQLModel, table=True):
    """One roll call: a date, a session type and an optional scope.

    Sessions are created lazily by the session resolver and never updated.
    """
    __tablename__ = "attendance_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_date: date = Field(index=True)
    session_type: SessionType = Field(
        sa_column=Column(
            SQLAEnum(SessionType, name="attendance_session_type", values_callable=_enum_values),
            nullable=False,
        )
    )

    # Optional scope; NULL means "not scoped on this attribute"
    block: Optional[str] = None
    room_id: Optional[int] = Field(default=None, foreign_key="rooms.id")
    course: Optional[str] = None
    year: Optional[str] = None

    created_by: Optional[int] = Field(default=None, foreign_key="profiles.id")
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    records: List["AttendanceRecord"] = Relationship(back_populates="session")


class AttendanceRecord(SQLModel, table=True):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("session_id", "student_id", name="uq_attendance_records_session_student"),
        CheckConstraint("late_minutes >= 0", name="ck_attendance_records_late_minutes"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("attendance_sessions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    student_id: int = Field(foreign_key="students.id", index=True)

    status: AttendanceStatus = Field(
        sa_column=Column(
            SQLAEnum(AttendanceStatus, name="attendance_status", values_callable=_enum_values),
            nullable=False,
        )
    )
    note: Optional[str] = None
    late_minutes: int = Field(default=0)

    marked_by: Optional[int] = Field(default=None, foreign_key="profiles.id")
    marked_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    session: Optional[AttendanceSession] = Relationship(back_populates="records")


# Absent scope fields compare equal through these sentinels, so NULLs cannot
# sneak a second session in for the same (date, type, scope).
SESSION_SCOPE_INDEX = Index(
    "uq_attendance_sessions_scoped",
    AttendanceSession.__table__.c.session_date,
    AttendanceSession.__table__.c.session_type,
    func.coalesce(AttendanceSession.__table__.c.block, literal_column("''")),
    func.coalesce(AttendanceSession.__table__.c.room_id, literal_column("0")),
    func.coalesce(AttendanceSession.__table__.c.course, literal_column("''")),
    func.coalesce(AttendanceSession.__table__.c.year, literal_column("''")),
    unique=True,
)
