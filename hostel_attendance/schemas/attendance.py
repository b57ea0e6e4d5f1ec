from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict
from datetime import date, datetime
from hostel_attendance.models.enums import AttendanceStatus, SessionType

# --- INPUT MODELS ---

class SessionResolveRequest(BaseModel):
    """
    Used for the /sessions/resolve endpoint.
    session_type stays a plain string so unknown values reach the domain check.
    """
    session_date: date
    session_type: str = SessionType.NIGHT_ROLL.value
    block: Optional[str] = None
    room_id: Optional[int] = None
    course: Optional[str] = None
    year: Optional[str] = None


class AttendanceMark(BaseModel):
    """Status for one student in an existing session"""
    status: str
    note: Optional[str] = None
    # Range is checked in services.records
    late_minutes: Optional[int] = None


class AttendanceBulkEntry(AttendanceMark):
    student_id: int


class AttendanceBulkRequest(BaseModel):
    records: List[AttendanceBulkEntry]


# --- RESPONSE MODELS ---

class SessionResolveResponse(BaseModel):
    session_id: int


class AttendanceRecordResponse(BaseModel):
    """Matches the 'attendance_records' table structure."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    student_id: int
    status: AttendanceStatus
    note: Optional[str] = None
    late_minutes: int = 0
    marked_by: Optional[int] = None
    marked_at: datetime


class AttendanceSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_date: date
    session_type: SessionType
    block: Optional[str] = None
    room_id: Optional[int] = None
    course: Optional[str] = None
    year: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime


class AttendanceSessionDetail(AttendanceSessionResponse):
    """Session details + list of records."""
    records: List[AttendanceRecordResponse] = []


class BulkMarkResponse(BaseModel):
    session_id: int
    records_count: int


class MonthlyCalendarResponse(BaseModel):
    student_id: int
    month: int
    year: int
    # day of month -> resolved status; unmarked days are absent from the mapping
    days: Dict[int, AttendanceStatus]


class CalendarEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    session_id: int
    session_type: SessionType
    status: AttendanceStatus
    note: Optional[str] = None
    late_minutes: int = 0


class SessionSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: int
    session_date: date
    session_type: SessionType
    block: Optional[str] = None
    room_id: Optional[int] = None
    course: Optional[str] = None
    year: Optional[str] = None
    present: int
    absent: int
    late: int
    leave: int
    holiday: int
    total_marked: int

