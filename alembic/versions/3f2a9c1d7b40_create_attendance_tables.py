"""create attendance tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


profile_role = sa.Enum('admin', 'staff', 'student', name='profile_role')
session_type = sa.Enum('NightRoll', 'Morning', 'Evening', 'Custom', name='attendance_session_type')
attendance_status = sa.Enum('Present', 'Absent', 'Late', 'Leave', 'Holiday', name='attendance_status')


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('role', profile_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_number', sa.String(), nullable=False),
        sa.Column('block', sa.String(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
    )
    op.create_index('ix_rooms_room_number', 'rooms', ['room_number'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('course', sa.String(), nullable=True),
        sa.Column('year', sa.String(), nullable=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=True),
        sa.Column('profile_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'attendance_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('session_type', session_type, nullable=False),
        sa.Column('block', sa.String(), nullable=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=True),
        sa.Column('course', sa.String(), nullable=True),
        sa.Column('year', sa.String(), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_attendance_sessions_session_date', 'attendance_sessions', ['session_date'])
    # NULL scope columns compare through sentinels so the tuple stays unique
    op.execute(
        """
        CREATE UNIQUE INDEX uq_attendance_sessions_scoped
        ON attendance_sessions (
            session_date,
            session_type,
            coalesce(block, ''),
            coalesce(room_id, 0),
            coalesce(course, ''),
            coalesce(year, '')
        )
        """
    )

    op.create_table(
        'attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'session_id',
            sa.Integer(),
            sa.ForeignKey('attendance_sessions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('status', attendance_status, nullable=False),
        sa.Column('note', sa.String(), nullable=True),
        sa.Column('late_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('marked_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('marked_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('session_id', 'student_id', name='uq_attendance_records_session_student'),
        sa.CheckConstraint('late_minutes >= 0', name='ck_attendance_records_late_minutes'),
    )
    op.create_index('ix_attendance_records_session_id', 'attendance_records', ['session_id'])
    op.create_index('ix_attendance_records_student_id', 'attendance_records', ['student_id'])

    op.create_table(
        'leaves',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('end_date >= start_date', name='ck_leaves_period'),
    )
    op.create_index('ix_leaves_student_id', 'leaves', ['student_id'])


def downgrade() -> None:
    op.drop_table('leaves')
    op.drop_table('attendance_records')
    op.execute("DROP INDEX IF EXISTS uq_attendance_sessions_scoped")
    op.drop_table('attendance_sessions')
    op.drop_table('students')
    op.drop_table('rooms')
    op.drop_table('profiles')

    # Enums outlive the tables on PostgreSQL
    bind = op.get_bind()
    attendance_status.drop(bind, checkfirst=True)
    session_type.drop(bind, checkfirst=True)
    profile_role.drop(bind, checkfirst=True)
