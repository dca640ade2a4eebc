"""initial schema: schools, users, classes, lessons, attendance, grades, assignments, invite codes

Revision ID: 5b1c0e7a9d42
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1c0e7a9d42'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ('superadmin', 'bigadmin', 'admin', 'teacher', 'student', 'parent')

# Тип в Postgres создаётся один раз, а используется в users и invite_codes
user_role = sa.Enum(*ROLES, name='user_role').with_variant(
    postgresql.ENUM(*ROLES, name='user_role', create_type=False), 'postgresql'
)


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        postgresql.ENUM(*ROLES, name='user_role').create(bind, checkfirst=True)

    op.create_table(
        'schools',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_schools_id', 'schools', ['id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('schools.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('schools.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('head_teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_school_id', 'classes', ['school_id'])

    op.create_table(
        'class_students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.UniqueConstraint('class_id', 'student_id'),
    )
    op.create_index('ix_class_students_id', 'class_students', ['id'])
    op.create_index('ix_class_students_class_id', 'class_students', ['class_id'])
    op.create_index('ix_class_students_student_id', 'class_students', ['student_id'])

    op.create_table(
        'parent_student',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.UniqueConstraint('parent_id', 'student_id'),
    )
    op.create_index('ix_parent_student_id', 'parent_student', ['id'])
    op.create_index('ix_parent_student_parent_id', 'parent_student', ['parent_id'])
    op.create_index('ix_parent_student_student_id', 'parent_student', ['student_id'])

    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_subjects_id', 'subjects', ['id'])
    op.create_index('ix_subjects_class_id', 'subjects', ['class_id'])
    op.create_index('ix_subjects_teacher_id', 'subjects', ['teacher_id'])

    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(), nullable=True),
        sa.Column('end_time', sa.String(), nullable=True),
        sa.Column('room', sa.String(), nullable=True),
    )
    op.create_index('ix_lessons_id', 'lessons', ['id'])
    op.create_index('ix_lessons_subject_id', 'lessons', ['subject_id'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('lesson_id', sa.Integer(), sa.ForeignKey('lessons.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('excuse_note', sa.Text(), nullable=True),
        sa.Column('excuse_status', sa.String(), nullable=False, server_default='none'),
        sa.Column('excuse_attachment_url', sa.String(), nullable=True),
        sa.Column('recorded_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('recorded_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('student_id', 'lesson_id', 'date'),
    )
    op.create_index('ix_attendance_id', 'attendance', ['id'])
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])
    op.create_index('ix_attendance_lesson_id', 'attendance', ['lesson_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])

    op.create_table(
        'grades',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('grade_type', sa.String(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_grades_id', 'grades', ['id'])
    op.create_index('ix_grades_student_id', 'grades', ['student_id'])
    op.create_index('ix_grades_subject_id', 'grades', ['subject_id'])

    op.create_table(
        'assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_assignments_id', 'assignments', ['id'])
    op.create_index('ix_assignments_subject_id', 'assignments', ['subject_id'])

    op.create_table(
        'assignment_submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('assignment_id', sa.Integer(), sa.ForeignKey('assignments.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('attachment_url', sa.String(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('grade', sa.Float(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('graded_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('assignment_id', 'student_id'),
    )
    op.create_index('ix_assignment_submissions_id', 'assignment_submissions', ['id'])
    op.create_index('ix_assignment_submissions_assignment_id', 'assignment_submissions', ['assignment_id'])
    op.create_index('ix_assignment_submissions_student_id', 'assignment_submissions', ['student_id'])

    op.create_table(
        'invite_codes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('school_id', sa.Integer(), sa.ForeignKey('schools.id'), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('usage_limit', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('times_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('usage_limit >= 1', name='ck_invite_codes_usage_limit'),
    )
    op.create_index('ix_invite_codes_id', 'invite_codes', ['id'])
    op.create_index('ix_invite_codes_code', 'invite_codes', ['code'], unique=True)
    op.create_index('ix_invite_codes_school_id', 'invite_codes', ['school_id'])


def downgrade() -> None:
    for table in (
        'invite_codes',
        'assignment_submissions',
        'assignments',
        'grades',
        'attendance',
        'lessons',
        'subjects',
        'parent_student',
        'class_students',
        'classes',
        'users',
        'schools',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        postgresql.ENUM(name='user_role').drop(bind, checkfirst=True)
