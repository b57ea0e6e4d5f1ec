from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from hostel_attendance.core.datetime_utils import UTCDateTime, utc_now


class Student(SQLModel, table=True):
    """Hostel resident. Only the columns attendance scoping needs are modelled."""
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    course: Optional[str] = None
    year: Optional[str] = None

    room_id: Optional[int] = Field(default=None, foreign_key="rooms.id")
    # Set when the student has their own login
    profile_id: Optional[int] = Field(default=None, foreign_key="profiles.id", unique=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
