from fastapi import APIRouter
from hostel_attendance.api.v1.endpoints import attendance, leaves

api_router = APIRouter()

api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
