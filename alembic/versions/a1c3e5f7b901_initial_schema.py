"""initial schema: users, classes, class_users, students, sessions, attendances

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-18 09:12:40.512204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b901'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

session_status = sa.Enum('scheduled', 'cancelled', 'holiday', 'vacation', 'extra', name='session_status')
attendance_status = sa.Enum('present', 'absent', 'excused', name='attendance_status')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='prof'),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'prof')", name='ck_users_role'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('weekday', sa.Integer()),
        *_timestamps(),
        sa.CheckConstraint('weekday IS NULL OR weekday BETWEEN 1 AND 7', name='ck_classes_weekday'),
    )
    op.create_index('ix_classes_name', 'classes', ['name'])
    op.create_index('ix_classes_owner_id', 'classes', ['owner_id'])

    op.create_table(
        'class_users',
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('phone', sa.String(30)),
        sa.Column('weekday', sa.Integer()),
        *_timestamps(),
        sa.CheckConstraint('weekday IS NULL OR weekday BETWEEN 1 AND 7', name='ck_students_weekday'),
    )
    op.create_index('ix_students_last_name', 'students', ['last_name'])
    op.create_index('ix_students_class_id', 'students', ['class_id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', session_status, nullable=False, server_default='scheduled'),
        sa.Column('note', sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint('class_id', 'date', name='uq_sessions_class_date'),
    )
    op.create_index('ix_sessions_class_id', 'sessions', ['class_id'])

    op.create_table(
        'attendances',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', attendance_status, nullable=False),
        sa.Column('comment', sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint('student_id', 'session_id', name='uq_attendances_student_session'),
        sa.CheckConstraint(
            "(status = 'excused' AND comment IS NOT NULL AND length(trim(comment)) > 0)"
            " OR (status <> 'excused' AND comment IS NULL)",
            name='ck_attendances_excused_comment',
        ),
    )
    op.create_index('ix_attendances_student_id', 'attendances', ['student_id'])
    op.create_index('ix_attendances_session_id', 'attendances', ['session_id'])


def downgrade() -> None:
    op.drop_table('attendances')
    op.drop_table('sessions')
    op.drop_table('students')
    op.drop_table('class_users')
    op.drop_table('classes')
    op.drop_table('users')
    attendance_status.drop(op.get_bind(), checkfirst=True)
    session_status.drop(op.get_bind(), checkfirst=True)
