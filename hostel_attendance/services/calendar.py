"""
Per-student monthly views.

`monthly_calendar` reduces every record a student has on a given day to
one status, using the precedence in `STATUS_PRECEDENCE`. Days without any
record are left out: unmarked is not the same as absent.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.exceptions import InvalidCalendarPeriod
from hostel_attendance.models.attendance import AttendanceRecord, AttendanceSession
from hostel_attendance.models.enums import AttendanceStatus, SessionType
from hostel_attendance.services import store


@dataclass(frozen=True)
class CalendarEntry:
    day: date
    session_id: int
    session_type: SessionType
    status: AttendanceStatus
    note: Optional[str]
    late_minutes: int


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise InvalidCalendarPeriod(f"Month must be between 1 and 12, got {month}", field="month", value=month)
    if not 1 <= year <= 9999:
        raise InvalidCalendarPeriod(f"Year {year} is out of range", field="year", value=year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def resolve_day_statuses(marks: Iterable[Tuple[date, AttendanceStatus]]) -> Dict[int, AttendanceStatus]:
    """Collapse (day, status) pairs to the highest-ranked status per day of month."""
    resolved: Dict[int, AttendanceStatus] = {}
    for day, status in marks:
        current = resolved.get(day.day)
        if current is None or status.rank > current.rank:
            resolved[day.day] = status
    return dict(sorted(resolved.items()))


async def monthly_calendar(
    session: AsyncSession, student_id: int, month: int, year: int
) -> Dict[int, AttendanceStatus]:
    first, last = month_bounds(month, year)
    q = (
        select(AttendanceSession.session_date, AttendanceRecord.status)
        .join(AttendanceRecord, AttendanceRecord.session_id == AttendanceSession.id)
        .where(
            AttendanceRecord.student_id == student_id,
            AttendanceSession.session_date >= first,
            AttendanceSession.session_date <= last,
        )
    )
    with store.store_errors("load the monthly calendar"):
        result = await session.execute(q)
        marks = result.all()
    return resolve_day_statuses((row.session_date, row.status) for row in marks)


async def calendar_entries(
    session: AsyncSession, student_id: int, month: int, year: int
) -> List[CalendarEntry]:
    """Every record of the student in the month, one entry per session."""
    first, last = month_bounds(month, year)
    q = (
        select(
            AttendanceSession.session_date,
            AttendanceSession.id,
            AttendanceSession.session_type,
            AttendanceRecord.status,
            AttendanceRecord.note,
            AttendanceRecord.late_minutes,
        )
        .join(AttendanceRecord, AttendanceRecord.session_id == AttendanceSession.id)
        .where(
            AttendanceRecord.student_id == student_id,
            AttendanceSession.session_date >= first,
            AttendanceSession.session_date <= last,
        )
        .order_by(AttendanceSession.session_date, AttendanceSession.id)
    )
    with store.store_errors("load calendar entries"):
        result = await session.execute(q)
        rows = result.all()
    return [
        CalendarEntry(
            day=row.session_date,
            session_id=row.id,
            session_type=row.session_type,
            status=row.status,
            note=row.note,
            late_minutes=row.late_minutes,
        )
        for row in rows
    ]
