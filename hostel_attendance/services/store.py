"""
Table access for attendance sessions and records.

Everything that talks to the database for the attendance core goes
through here, so uniqueness handling and error translation live in one
place. Functions never commit; the calling service owns the transaction.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.datetime_utils import utc_now
from hostel_attendance.core.exceptions import (
    AttendanceError,
    ConstraintRace,
    StoreUnavailable,
    UnknownSession,
)
from hostel_attendance.models.attendance import AttendanceRecord, AttendanceSession
from hostel_attendance.models.enums import SessionType
from hostel_attendance.models.student import Student

logger = logging.getLogger(__name__)

# Sentinels matching the coalesce() expressions of uq_attendance_sessions_scoped
EMPTY_TEXT = ""
EMPTY_ROOM = 0

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate driver/ORM failures into StoreUnavailable."""
    try:
        yield
    except AttendanceError:
        raise
    except SQLAlchemyError as exc:
        logger.exception("Attendance store failed during %s", action)
        raise StoreUnavailable(f"Attendance store unavailable while trying to {action}") from exc


async def find_session_id(
    session: AsyncSession,
    session_date: date,
    session_type: SessionType,
    block: Optional[str],
    room_id: Optional[int],
    course: Optional[str],
    year: Optional[str],
) -> Optional[int]:
    q = select(AttendanceSession.id).where(
        AttendanceSession.session_date == session_date,
        AttendanceSession.session_type == session_type,
        func.coalesce(AttendanceSession.block, EMPTY_TEXT) == (block or EMPTY_TEXT),
        func.coalesce(AttendanceSession.room_id, EMPTY_ROOM) == (room_id or EMPTY_ROOM),
        func.coalesce(AttendanceSession.course, EMPTY_TEXT) == (course or EMPTY_TEXT),
        func.coalesce(AttendanceSession.year, EMPTY_TEXT) == (year or EMPTY_TEXT),
    )
    result = await session.execute(q)
    return result.scalar_one_or_none()


async def insert_session(session: AsyncSession, row: AttendanceSession) -> int:
    """Insert a session inside a savepoint.

    Raises ConstraintRace when the scoped unique index rejects the row,
    i.e. another writer committed the same tuple first. The outer
    transaction stays usable.
    """
    try:
        async with session.begin_nested():
            session.add(row)
    except IntegrityError as exc:
        raise ConstraintRace(
            "Session was created concurrently",
            field="session",
            value=(row.session_date, row.session_type, row.block, row.room_id, row.course, row.year),
        ) from exc
    return row.id


async def get_session_row(session: AsyncSession, session_id: int) -> AttendanceSession:
    row = await session.get(AttendanceSession, session_id)
    if row is None:
        raise UnknownSession(f"Attendance session {session_id} not found", field="session_id", value=session_id)
    return row


async def missing_student_ids(session: AsyncSession, student_ids: Iterable[int]) -> Set[int]:
    wanted = set(student_ids)
    if not wanted:
        return set()
    result = await session.execute(select(Student.id).where(Student.id.in_(wanted)))
    return wanted - set(result.scalars().all())


async def upsert_records(session: AsyncSession, rows: List[Dict[str, Any]]) -> None:
    """Insert or replace records keyed by (session_id, student_id).

    `rows` must not contain the same pair twice.
    """
    if not rows:
        return

    insert_fn = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
    if insert_fn is None:
        await _upsert_records_portable(session, rows)
        return

    stmt = insert_fn(AttendanceRecord.__table__).values(rows)
    upsert = stmt.on_conflict_do_update(
        index_elements=["session_id", "student_id"],
        set_={
            "status": stmt.excluded.status,
            "note": stmt.excluded.note,
            "late_minutes": stmt.excluded.late_minutes,
            "marked_by": stmt.excluded.marked_by,
            "marked_at": stmt.excluded.marked_at,
        },
    )
    await session.execute(upsert)


async def _upsert_records_portable(session: AsyncSession, rows: List[Dict[str, Any]]) -> None:
    # Dialects without ON CONFLICT: update first, insert what was not there
    table = AttendanceRecord.__table__
    for row in rows:
        result = await session.execute(
            update(table)
            .where(table.c.session_id == row["session_id"], table.c.student_id == row["student_id"])
            .values(
                status=row["status"],
                note=row["note"],
                late_minutes=row["late_minutes"],
                marked_by=row["marked_by"],
                marked_at=row["marked_at"],
            )
        )
        if result.rowcount == 0:
            await session.execute(table.insert().values(**row))


async def get_record(session: AsyncSession, session_id: int, student_id: int) -> Optional[AttendanceRecord]:
    result = await session.execute(
        select(AttendanceRecord)
        .where(
            AttendanceRecord.session_id == session_id,
            AttendanceRecord.student_id == student_id,
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def record_row(
    session_id: int,
    student_id: int,
    status,
    note: Optional[str],
    late_minutes: int,
    marked_by: Optional[int],
) -> Dict[str, Any]:
    return {
        "session_id": session_id,
        "student_id": student_id,
        "status": status,
        "note": note,
        "late_minutes": late_minutes,
        "marked_by": marked_by,
        "marked_at": utc_now(),
    }
