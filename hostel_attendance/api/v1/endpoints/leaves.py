from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_attendance.core.dependencies import get_current_staff
from hostel_attendance.db.session import get_session
from hostel_attendance.models.profile import Profile
from hostel_attendance.schemas.leave import LeaveCreate, LeaveResponse
from hostel_attendance.services import grant_leave, list_leaves

router = APIRouter()


@router.post("/", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
async def create_leave(
    data: LeaveCreate,
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    """Approve a leave (outpass) period for a student."""
    return await grant_leave(
        session,
        data.student_id,
        data.start_date,
        data.end_date,
        data.reason,
        approved_by=current_user.id,
    )


@router.get("/", response_model=List[LeaveResponse])
async def get_leaves(
    student_id: Optional[int] = Query(None),
    active_on: Optional[date] = Query(None, description="Only leaves covering this date"),
    current_user: Profile = Depends(get_current_staff),
    session: AsyncSession = Depends(get_session),
):
    return await list_leaves(session, student_id=student_id, active_on=active_on)
