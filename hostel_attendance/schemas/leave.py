from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime


class LeaveCreate(BaseModel):
    student_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None


class LeaveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    created_at: datetime
