from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.dependencies import get_current_staff, require_student_access
from hostel_attendance.db.session import get_session
from hostel_attendance.models.enums import SessionType
from hostel_attendance.models.profile import Profile
from hostel_attendance.schemas.attendance import (
    AttendanceBulkRequest,
    AttendanceMark,
    AttendanceRecordResponse,
    AttendanceSessionDetail,
    AttendanceSessionResponse,
    BulkMarkResponse,
    CalendarEntryResponse,
    MonthlyCalendarResponse,
    SessionResolveRequest,
    SessionResolveResponse,
    SessionSummaryResponse,
)
from hostel_attendance.services import (
    RecordInput,
    SessionScope,
    calendar_entries,
    daily_summary,
    get_session_with_records,
    list_sessions,
    mark_attendance,
    mark_attendance_bulk,
    monthly_calendar,
    resolve_session,
)

router = APIRouter()


# -----------------------------------------------------------------------------
# 1. RESOLVE SESSION (get or create)
# -----------------------------------------------------------------------------
@router.post("/sessions/resolve", response_model=SessionResolveResponse)
async def resolve_attendance_session(
    data: SessionResolveRequest,
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    """Return the session for a date/type/scope, creating it on first use."""
    session_id = await resolve_session(
        session,
        data.session_date,
        data.session_type,
        SessionScope(block=data.block, room_id=data.room_id, course=data.course, year=data.year),
        created_by=current_user.id,
    )
    return SessionResolveResponse(session_id=session_id)


# -----------------------------------------------------------------------------
# 2. LIST SESSIONS
# -----------------------------------------------------------------------------
@router.get("/sessions/", response_model=List[AttendanceSessionResponse])
async def list_attendance_sessions(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    session_type: Optional[SessionType] = Query(None),
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    return await list_sessions(session, date_from=date_from, date_to=date_to, session_type=session_type)


# -----------------------------------------------------------------------------
# 3. GET SINGLE SESSION (roster)
# -----------------------------------------------------------------------------
@router.get("/sessions/{session_id}", response_model=AttendanceSessionDetail)
async def get_session_details(
    session_id: int,
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    return await get_session_with_records(session, session_id)


# -----------------------------------------------------------------------------
# 4. MARK ONE STUDENT
# -----------------------------------------------------------------------------
@router.put("/sessions/{session_id}/records/{student_id}", response_model=AttendanceRecordResponse)
async def mark_student(
    session_id: int,
    student_id: int,
    mark: AttendanceMark,
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    """Mark attendance for an individual student (replaces any earlier mark)."""
    return await mark_attendance(
        session,
        session_id,
        student_id,
        mark.status,
        note=mark.note,
        late_minutes=mark.late_minutes,
        marked_by=current_user.id,
    )


# -----------------------------------------------------------------------------
# 5. BULK MARK (whole roster, all or nothing)
# -----------------------------------------------------------------------------
@router.post("/sessions/{session_id}/records/bulk", response_model=BulkMarkResponse)
async def mark_students_bulk(
    session_id: int,
    data: AttendanceBulkRequest,
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    count = await mark_attendance_bulk(
        session,
        session_id,
        [
            RecordInput(student_id=r.student_id, status=r.status, note=r.note, late_minutes=r.late_minutes)
            for r in data.records
        ],
        marked_by=current_user.id,
    )
    return BulkMarkResponse(session_id=session_id, records_count=count)


# -----------------------------------------------------------------------------
# 6. STUDENT MONTHLY CALENDAR
# -----------------------------------------------------------------------------
@router.get("/students/{student_id}/calendar", response_model=MonthlyCalendarResponse)
async def student_monthly_calendar(
    student_id: int,
    month: int = Query(..., description="Month number, 1-12"),
    year: int = Query(...),
    current_user: Profile = Depends(require_student_access),
    session: AsyncSession = Depends(get_session),
):
    days = await monthly_calendar(session, student_id, month, year)
    return MonthlyCalendarResponse(student_id=student_id, month=month, year=year, days=days)


@router.get("/students/{student_id}/calendar/entries", response_model=List[CalendarEntryResponse])
async def student_calendar_entries(
    student_id: int,
    month: int = Query(..., description="Month number, 1-12"),
    year: int = Query(...),
    current_user: Profile = Depends(require_student_access),
    session: AsyncSession = Depends(get_session),
):
    return await calendar_entries(session, student_id, month, year)


# -----------------------------------------------------------------------------
# 7. DAILY SUMMARY (per session counts)
# -----------------------------------------------------------------------------
@router.get("/summary", response_model=List[SessionSummaryResponse])
async def attendance_summary(
    date_from: date = Query(...),
    date_to: date = Query(...),
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    return await daily_summary(session, date_from, date_to)
