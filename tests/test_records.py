import pytest
from datetime import timedelta
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from hostel_attendance.core.exceptions import (
    InvalidLateMinutes,
    InvalidStatus,
    StoreUnavailable,
    UnknownSession,
    UnknownStudent,
)
from hostel_attendance.models.attendance import AttendanceRecord, AttendanceSession
from hostel_attendance.models.enums import AttendanceStatus, SessionType
from hostel_attendance.services import store
from hostel_attendance.services.records import (
    RecordInput,
    get_record,
    mark_attendance,
    mark_attendance_bulk,
)
from hostel_attendance.services.sessions import resolve_session


async def _record_count(async_session, session_id) -> int:
    result = await async_session.execute(
        select(func.count()).select_from(AttendanceRecord).where(AttendanceRecord.session_id == session_id)
    )
    return result.scalar_one()


@pytest.fixture
async def night_roll(async_session, march_first):
    return await resolve_session(async_session, march_first, "NightRoll")


@pytest.mark.anyio
async def test_second_mark_replaces_first(async_session, night_roll, students):
    student_id = students[0].id

    await mark_attendance(async_session, night_roll, student_id, "Present")
    record = await mark_attendance(async_session, night_roll, student_id, "Absent", note="not in room")

    assert record.status is AttendanceStatus.ABSENT
    assert record.note == "not in room"
    assert await _record_count(async_session, night_roll) == 1


@pytest.mark.anyio
async def test_same_mark_twice_is_idempotent(async_session, night_roll, students):
    student_id = students[0].id

    first = await mark_attendance(async_session, night_roll, student_id, "Leave", note="home visit")
    first_state = (first.id, first.status, first.note, first.late_minutes)
    second = await mark_attendance(async_session, night_roll, student_id, "Leave", note="home visit")

    assert (second.id, second.status, second.note, second.late_minutes) == first_state
    assert await _record_count(async_session, night_roll) == 1


@pytest.mark.anyio
async def test_late_minutes_kept_only_while_late(async_session, night_roll, students, staff):
    student_id = students[1].id
    staff_id = staff.id

    late = await mark_attendance(async_session, night_roll, student_id, "Late", late_minutes=15, marked_by=staff_id)
    assert late.status is AttendanceStatus.LATE
    assert late.late_minutes == 15
    assert late.marked_by == staff_id

    present = await mark_attendance(async_session, night_roll, student_id, "Present", late_minutes=15)
    assert present.status is AttendanceStatus.PRESENT
    assert present.late_minutes == 0


@pytest.mark.anyio
async def test_excused_is_stored_as_leave(async_session, night_roll, students):
    record = await mark_attendance(async_session, night_roll, students[0].id, "Excused")
    assert record.status is AttendanceStatus.LEAVE


@pytest.mark.anyio
async def test_invalid_status_writes_nothing(async_session, night_roll, students):
    with pytest.raises(InvalidStatus) as exc_info:
        await mark_attendance(async_session, night_roll, students[0].id, "present")

    assert exc_info.value.field == "status"
    assert await _record_count(async_session, night_roll) == 0


@pytest.mark.anyio
async def test_negative_late_minutes_rejected(async_session, night_roll, students):
    with pytest.raises(InvalidLateMinutes):
        await mark_attendance(async_session, night_roll, students[0].id, "Late", late_minutes=-5)


@pytest.mark.anyio
async def test_unknown_session(async_session, students):
    with pytest.raises(UnknownSession) as exc_info:
        await mark_attendance(async_session, 999, students[0].id, "Present")
    assert exc_info.value.value == 999


@pytest.mark.anyio
async def test_unknown_student(async_session, night_roll, students):
    with pytest.raises(UnknownStudent) as exc_info:
        await mark_attendance(async_session, night_roll, 999, "Present")
    assert exc_info.value.value == [999]


@pytest.mark.anyio
async def test_bulk_marks_whole_roster(async_session, night_roll, students):
    ids = [s.id for s in students]

    count = await mark_attendance_bulk(
        async_session,
        night_roll,
        [
            RecordInput(student_id=ids[0], status="Present"),
            RecordInput(student_id=ids[1], status="Late", late_minutes=10),
            RecordInput(student_id=ids[2], status=AttendanceStatus.ABSENT, note="no show"),
        ],
    )

    assert count == 3
    assert await _record_count(async_session, night_roll) == 3
    late = await get_record(async_session, night_roll, ids[1])
    assert late.late_minutes == 10


@pytest.mark.anyio
async def test_bulk_duplicate_student_keeps_last_entry(async_session, night_roll, students):
    student_id = students[0].id

    count = await mark_attendance_bulk(
        async_session,
        night_roll,
        [
            RecordInput(student_id=student_id, status="Present"),
            RecordInput(student_id=student_id, status="Absent"),
        ],
    )

    assert count == 1
    record = await get_record(async_session, night_roll, student_id)
    assert record.status is AttendanceStatus.ABSENT


@pytest.mark.anyio
async def test_bulk_with_unknown_student_commits_nothing(async_session, night_roll, students):
    ids = [s.id for s in students]
    await mark_attendance(async_session, night_roll, ids[0], "Present")

    with pytest.raises(UnknownStudent):
        await mark_attendance_bulk(
            async_session,
            night_roll,
            [
                RecordInput(student_id=ids[0], status="Absent"),
                RecordInput(student_id=ids[1], status="Present"),
                RecordInput(student_id=12345, status="Present"),
            ],
        )

    assert await _record_count(async_session, night_roll) == 1
    record = await get_record(async_session, night_roll, ids[0])
    assert record.status is AttendanceStatus.PRESENT


@pytest.mark.anyio
async def test_bulk_failing_midway_rolls_back(async_session, night_roll, students, monkeypatch):
    ids = [s.id for s in students]
    real_upsert = store.upsert_records

    async def flaky_upsert(session, rows):
        await real_upsert(session, rows[:1])
        raise OperationalError("INSERT INTO attendance_records", {}, Exception("connection dropped"))

    monkeypatch.setattr(store, "upsert_records", flaky_upsert)

    with pytest.raises(StoreUnavailable):
        await mark_attendance_bulk(
            async_session,
            night_roll,
            [RecordInput(student_id=i, status="Present") for i in ids],
        )

    monkeypatch.undo()
    assert await _record_count(async_session, night_roll) == 0


@pytest.mark.anyio
async def test_bulk_with_empty_list_still_checks_session(async_session):
    with pytest.raises(UnknownSession):
        await mark_attendance_bulk(async_session, 31337, [])


def test_timestamps_are_timezone_aware(march_first):
    row = store.record_row(1, 2, AttendanceStatus.PRESENT, None, 0, None)
    assert row["marked_at"].utcoffset() == timedelta(0)

    created = AttendanceSession(session_date=march_first, session_type=SessionType.MORNING).created_at
    assert created.utcoffset() == timedelta(0)

    for model in (AttendanceSession, AttendanceRecord):
        stamp = "created_at" if model is AttendanceSession else "marked_at"
        assert model.__table__.c[stamp].type.timezone is True
