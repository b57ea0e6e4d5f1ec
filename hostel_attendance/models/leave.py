from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field

from hostel_attendance.core.datetime_utils import UTCDateTime, utc_now


class Leave(SQLModel, table=True):
    """Approved absence period (outpass) for a student."""
    __tablename__ = "leaves"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_leaves_period"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: int = Field(foreign_key="students.id", index=True)
    start_date: date
    end_date: date
    reason: Optional[str] = None
    approved_by: Optional[int] = Field(default=None, foreign_key="profiles.id")
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
