from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.models.attendance import AttendanceRecord, AttendanceSession
from hostel_attendance.models.enums import AttendanceStatus, SessionType
from hostel_attendance.services import store


@dataclass(frozen=True)
class SessionSummary:
    session_id: int
    session_date: date
    session_type: SessionType
    block: Optional[str]
    room_id: Optional[int]
    course: Optional[str]
    year: Optional[str]
    present: int
    absent: int
    late: int
    leave: int
    holiday: int
    total_marked: int


def _count_of(status: AttendanceStatus):
    return func.coalesce(func.sum(case((AttendanceRecord.status == status, 1), else_=0)), 0)


async def daily_summary(session: AsyncSession, date_from: date, date_to: date) -> List[SessionSummary]:
    """Per-session status counts for sessions dated within [date_from, date_to]."""
    q = (
        select(
            AttendanceSession.id,
            AttendanceSession.session_date,
            AttendanceSession.session_type,
            AttendanceSession.block,
            AttendanceSession.room_id,
            AttendanceSession.course,
            AttendanceSession.year,
            _count_of(AttendanceStatus.PRESENT).label("present"),
            _count_of(AttendanceStatus.ABSENT).label("absent"),
            _count_of(AttendanceStatus.LATE).label("late"),
            _count_of(AttendanceStatus.LEAVE).label("leave"),
            _count_of(AttendanceStatus.HOLIDAY).label("holiday"),
            func.count(AttendanceRecord.id).label("total_marked"),
        )
        .outerjoin(AttendanceRecord, AttendanceRecord.session_id == AttendanceSession.id)
        .where(
            AttendanceSession.session_date >= date_from,
            AttendanceSession.session_date <= date_to,
        )
        .group_by(AttendanceSession.id)
        .order_by(AttendanceSession.session_date, AttendanceSession.id)
    )
    with store.store_errors("summarise attendance"):
        result = await session.execute(q)
        rows = result.all()
    return [
        SessionSummary(
            session_id=row.id,
            session_date=row.session_date,
            session_type=row.session_type,
            block=row.block,
            room_id=row.room_id,
            course=row.course,
            year=row.year,
            present=row.present,
            absent=row.absent,
            late=row.late,
            leave=row.leave,
            holiday=row.holiday,
            total_marked=row.total_marked,
        )
        for row in rows
    ]
