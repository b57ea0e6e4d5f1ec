import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.exceptions import InvalidLeavePeriod, UnknownStudent
from hostel_attendance.models.leave import Leave
from hostel_attendance.services import store

logger = logging.getLogger(__name__)


async def grant_leave(
    session: AsyncSession,
    student_id: int,
    start_date: date,
    end_date: date,
    reason: Optional[str] = None,
    *,
    approved_by: Optional[int] = None,
) -> Leave:
    """Record an approved leave period for a student."""
    if end_date < start_date:
        raise InvalidLeavePeriod(
            f"Leave cannot end ({end_date}) before it starts ({start_date})",
            field="end_date",
            value=end_date,
        )

    with store.store_errors("grant leave"):
        if await store.missing_student_ids(session, [student_id]):
            raise UnknownStudent(f"Student {student_id} not found", field="student_id", value=student_id)

        leave = Leave(
            student_id=student_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            approved_by=approved_by,
        )
        session.add(leave)
        await session.commit()
        await session.refresh(leave)

    logger.info("Leave %s granted to student %s (%s to %s)", leave.id, student_id, start_date, end_date)
    return leave


async def list_leaves(
    session: AsyncSession,
    student_id: Optional[int] = None,
    active_on: Optional[date] = None,
) -> List[Leave]:
    q = select(Leave)
    if student_id is not None:
        q = q.where(Leave.student_id == student_id)
    if active_on is not None:
        q = q.where(Leave.start_date <= active_on, Leave.end_date >= active_on)
    q = q.order_by(Leave.start_date, Leave.id)

    with store.store_errors("list leaves"):
        result = await session.execute(q)
        return list(result.scalars().all())
