"""
Marking attendance: idempotent upserts of one status per (session, student).
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.exceptions import InvalidLateMinutes, UnknownStudent
from hostel_attendance.models.attendance import AttendanceRecord
from hostel_attendance.models.enums import AttendanceStatus
from hostel_attendance.services import store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordInput:
    student_id: int
    status: Union[str, AttendanceStatus]
    note: Optional[str] = None
    late_minutes: Optional[int] = None


def _late_minutes_for(status: AttendanceStatus, late_minutes: Optional[int], student_id: int) -> int:
    if status is not AttendanceStatus.LATE:
        return 0
    if late_minutes is None:
        return 0
    if isinstance(late_minutes, bool) or not isinstance(late_minutes, int) or late_minutes < 0:
        raise InvalidLateMinutes(
            f"Late minutes for student {student_id} must be a non-negative integer",
            field="late_minutes",
            value=late_minutes,
        )
    return late_minutes


def _prepare(
    session_id: int, records: Sequence[RecordInput], marked_by: Optional[int]
) -> Dict[int, dict]:
    # Keyed by student: a student listed twice keeps the last entry
    rows: Dict[int, dict] = {}
    for rec in records:
        status = AttendanceStatus.parse(rec.status)
        rows[rec.student_id] = store.record_row(
            session_id=session_id,
            student_id=rec.student_id,
            status=status,
            note=rec.note,
            late_minutes=_late_minutes_for(status, rec.late_minutes, rec.student_id),
            marked_by=marked_by,
        )
    return rows


async def mark_attendance_bulk(
    session: AsyncSession,
    session_id: int,
    records: Sequence[RecordInput],
    *,
    marked_by: Optional[int] = None,
) -> int:
    """Upsert a batch of records as one transaction.

    Either every record in the batch is written or none is. Returns the
    number of distinct students written.
    """
    rows = _prepare(session_id, records, marked_by)

    try:
        with store.store_errors("mark attendance"):
            await store.get_session_row(session, session_id)
            missing = await store.missing_student_ids(session, rows.keys())
            if missing:
                raise UnknownStudent(
                    f"Unknown student id(s): {', '.join(str(i) for i in sorted(missing))}",
                    field="student_id",
                    value=sorted(missing),
                )
            await store.upsert_records(session, list(rows.values()))
            await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("Marked %d record(s) on session %s", len(rows), session_id)
    return len(rows)


async def mark_attendance(
    session: AsyncSession,
    session_id: int,
    student_id: int,
    status: Union[str, AttendanceStatus],
    note: Optional[str] = None,
    late_minutes: Optional[int] = None,
    *,
    marked_by: Optional[int] = None,
) -> AttendanceRecord:
    """Upsert a single record and return it as stored."""
    await mark_attendance_bulk(
        session,
        session_id,
        [RecordInput(student_id=student_id, status=status, note=note, late_minutes=late_minutes)],
        marked_by=marked_by,
    )
    return await get_record(session, session_id, student_id)


async def get_record(session: AsyncSession, session_id: int, student_id: int) -> Optional[AttendanceRecord]:
    with store.store_errors("read an attendance record"):
        return await store.get_record(session, session_id, student_id)
