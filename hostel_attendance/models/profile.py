from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Enum as SQLAEnum
from sqlmodel import SQLModel, Field

from hostel_attendance.core.datetime_utils import UTCDateTime, utc_now
from hostel_attendance.models.enums import ProfileRole


class Profile(SQLModel, table=True):
    """Login identity provisioned by the external auth provider. Read-only here."""
    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    full_name: str
    role: ProfileRole = Field(
        sa_column=Column(SQLAEnum(ProfileRole, name="profile_role", values_callable=lambda e: [m.value for m in e]), nullable=False)
    )
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
