"""In-process API of the attendance core."""

from hostel_attendance.services.calendar import CalendarEntry, calendar_entries, monthly_calendar
from hostel_attendance.services.leaves import grant_leave, list_leaves
from hostel_attendance.services.records import RecordInput, mark_attendance, mark_attendance_bulk
from hostel_attendance.services.sessions import (
    SessionScope,
    get_session_with_records,
    list_sessions,
    resolve_session,
)
from hostel_attendance.services.summary import SessionSummary, daily_summary

__all__ = [
    "CalendarEntry",
    "RecordInput",
    "SessionScope",
    "SessionSummary",
    "calendar_entries",
    "daily_summary",
    "get_session_with_records",
    "grant_leave",
    "list_leaves",
    "list_sessions",
    "mark_attendance",
    "mark_attendance_bulk",
    "monthly_calendar",
    "resolve_session",
]
