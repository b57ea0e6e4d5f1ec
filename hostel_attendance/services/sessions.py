"""
Session resolution: turn (date, session type, scope) into a session id,
creating the session the first time the tuple is seen.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hostel_attendance.core.exceptions import ConstraintRace, StoreUnavailable, UnknownSession
from hostel_attendance.models.attendance import AttendanceSession
from hostel_attendance.models.enums import SessionType
from hostel_attendance.services import store

logger = logging.getLogger(__name__)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class SessionScope:
    """Optional narrowing of a session to a block, room, course or year."""

    block: Optional[str] = None
    room_id: Optional[int] = None
    course: Optional[str] = None
    year: Optional[str] = None

    def normalized(self) -> "SessionScope":
        """Blank text and room 0 mean "not scoped", same as None."""
        return replace(
            self,
            block=_clean_text(self.block),
            room_id=self.room_id or None,
            course=_clean_text(self.course),
            year=_clean_text(self.year),
        )


async def resolve_session(
    session: AsyncSession,
    session_date: date,
    session_type: Union[str, SessionType],
    scope: Optional[SessionScope] = None,
    *,
    created_by: Optional[int] = None,
) -> int:
    """Return the id of the session for this tuple, creating it if needed.

    Safe to call concurrently for the same tuple: the scoped unique index
    rejects the second insert and the loser re-reads the winner's row.
    """
    kind = SessionType.parse(session_type)
    scope = (scope or SessionScope()).normalized()
    key = (scope.block, scope.room_id, scope.course, scope.year)

    with store.store_errors("resolve an attendance session"):
        existing = await store.find_session_id(session, session_date, kind, *key)
        if existing is not None:
            return existing

        row = AttendanceSession(
            session_date=session_date,
            session_type=kind,
            block=scope.block,
            room_id=scope.room_id,
            course=scope.course,
            year=scope.year,
            created_by=created_by,
        )
        try:
            session_id = await store.insert_session(session, row)
        except ConstraintRace:
            logger.warning(
                "Concurrent creation of %s session on %s (scope=%s); re-reading",
                kind.value, session_date, key,
            )
            existing = await store.find_session_id(session, session_date, kind, *key)
            if existing is None:
                raise StoreUnavailable(
                    "Session insert was rejected but no matching session exists",
                    field="session",
                    value=(session_date, kind.value) + key,
                )
            return existing

        await session.commit()

    logger.info("Created %s session %s on %s (scope=%s)", kind.value, session_id, session_date, key)
    return session_id


async def get_session_with_records(session: AsyncSession, session_id: int) -> AttendanceSession:
    """Load a session together with every record marked against it."""
    with store.store_errors("load an attendance session"):
        result = await session.execute(
            select(AttendanceSession)
            .where(AttendanceSession.id == session_id)
            .options(selectinload(AttendanceSession.records))
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
    if row is None:
        raise UnknownSession(f"Attendance session {session_id} not found", field="session_id", value=session_id)
    return row


async def list_sessions(
    session: AsyncSession,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    session_type: Union[str, SessionType, None] = None,
) -> List[AttendanceSession]:
    q = select(AttendanceSession)
    if date_from is not None:
        q = q.where(AttendanceSession.session_date >= date_from)
    if date_to is not None:
        q = q.where(AttendanceSession.session_date <= date_to)
    if session_type is not None:
        q = q.where(AttendanceSession.session_type == SessionType.parse(session_type))
    q = q.order_by(AttendanceSession.session_date, AttendanceSession.session_type, AttendanceSession.id)

    with store.store_errors("list attendance sessions"):
        result = await session.execute(q)
        return list(result.scalars().all())
