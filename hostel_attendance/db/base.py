# hostel_attendance/db/base.py

from hostel_attendance.models.profile import Profile
from hostel_attendance.models.room import Room
from hostel_attendance.models.student import Student
from hostel_attendance.models.attendance import AttendanceSession, AttendanceRecord
from hostel_attendance.models.leave import Leave

# This list tells Alembic what to look for
__all__ = [
    "Profile",
    "Room",
    "Student",
    "AttendanceSession",
    "AttendanceRecord",
    "Leave",
]
