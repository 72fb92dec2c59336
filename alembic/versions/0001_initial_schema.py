"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    ]


def _fk(column: str, target: str, ondelete: str, nullable: bool = True) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        'schools',
        *_base_columns(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('school_code', sa.String(10), nullable=False, unique=True),
        sa.Column('school_type', sa.String(50)),
        sa.Column('address', sa.String(500)),
        sa.Column('contact_email', sa.String(254)),
        sa.Column('contact_phone', sa.String(20)),
        sa.Column('levels_offered', postgresql.ARRAY(sa.String()), nullable=False),
    )
    op.create_index('idx_school_type_name', 'schools', ['school_type', 'name'])

    op.create_table(
        'profiles',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'SET NULL'),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column(
            'role',
            sa.Enum('super_admin', 'school_admin', 'teacher', 'student', 'parent', name='user_role'),
            nullable=False,
        ),
    )
    op.create_index('ix_profiles_school_id', 'profiles', ['school_id'])
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table(
        'classes',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE', nullable=False),
        _fk('class_teacher_id', 'profiles.id', 'SET NULL'),
        sa.Column('grade_level', sa.String(50), nullable=False),
        sa.Column('section', sa.String(10), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.UniqueConstraint('school_id', 'grade_level', 'section', 'academic_year', name='uq_class_identity'),
    )
    op.create_index('ix_classes_school_id', 'classes', ['school_id'])

    op.create_table(
        'subjects',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE', nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.UniqueConstraint('school_id', 'name', name='uq_subject_school_name'),
    )

    op.create_table(
        'students',
        *_base_columns(),
        _fk('user_id', 'profiles.id', 'CASCADE', nullable=False),
        _fk('school_id', 'schools.id', 'CASCADE'),
        _fk('class_id', 'classes.id', 'SET NULL'),
        _fk('parent_id', 'profiles.id', 'SET NULL'),
        sa.Column('roll_number', sa.String(20)),
        sa.Column('admission_date', sa.Date()),
        sa.UniqueConstraint('user_id', name='uq_students_user_id'),
    )
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_parent_id', 'students', ['parent_id'])

    op.create_table(
        'teacher_subject_assignments',
        *_base_columns(),
        _fk('teacher_id', 'profiles.id', 'CASCADE', nullable=False),
        _fk('subject_id', 'subjects.id', 'CASCADE', nullable=False),
        _fk('school_id', 'schools.id', 'CASCADE', nullable=False),
        sa.UniqueConstraint('teacher_id', 'subject_id', name='uq_teacher_subject'),
    )

    op.create_table(
        'class_subject_assignments',
        *_base_columns(),
        _fk('teacher_id', 'profiles.id', 'CASCADE', nullable=False),
        _fk('class_id', 'classes.id', 'CASCADE', nullable=False),
        _fk('subject_id', 'subjects.id', 'CASCADE', nullable=False),
        sa.UniqueConstraint('class_id', 'subject_id', name='uq_class_subject'),
    )
    op.create_index('ix_class_subject_assignments_teacher_id', 'class_subject_assignments', ['teacher_id'])

    op.create_table(
        'exams',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE', nullable=False),
        _fk('class_id', 'classes.id', 'CASCADE'),
        _fk('subject_id', 'subjects.id', 'SET NULL'),
        _fk('created_by', 'profiles.id', 'SET NULL'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('exam_date', sa.Date(), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.CheckConstraint('total_marks > 0', name='ck_exam_total_marks_positive'),
    )
    op.create_index('ix_exams_class_id', 'exams', ['class_id'])
    op.create_index('ix_exams_exam_date', 'exams', ['exam_date'])

    op.create_table(
        'exam_results',
        *_base_columns(),
        _fk('exam_id', 'exams.id', 'CASCADE', nullable=False),
        _fk('student_id', 'students.id', 'CASCADE', nullable=False),
        _fk('graded_by', 'profiles.id', 'SET NULL'),
        sa.Column('marks_obtained', sa.Numeric(6, 2)),
        sa.Column('percentage', sa.Numeric(5, 2)),
        sa.Column('grade', sa.String(1)),
        sa.Column('remarks', sa.Text()),
        sa.Column('graded_at', sa.DateTime(timezone=True)),
        sa.UniqueConstraint('exam_id', 'student_id', name='uq_exam_result_student'),
    )

    op.create_table(
        'attendance',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE'),
        _fk('class_id', 'classes.id', 'CASCADE', nullable=False),
        _fk('student_id', 'students.id', 'CASCADE', nullable=False),
        _fk('marked_by', 'profiles.id', 'SET NULL'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('present', 'absent', 'late', 'excused', name='attendance_status'),
            nullable=False,
        ),
        sa.Column('remarks', sa.Text()),
        sa.Column('marked_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('student_id', 'class_id', 'date', name='uq_attendance_student_day'),
    )
    op.create_index('idx_attendance_class_date', 'attendance', ['class_id', 'date'])

    op.create_table(
        'assignments',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE'),
        _fk('class_id', 'classes.id', 'CASCADE', nullable=False),
        _fk('subject_id', 'subjects.id', 'SET NULL'),
        _fk('created_by', 'profiles.id', 'SET NULL'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('file_url', sa.String(1000)),
        sa.Column('file_name', sa.String(255)),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=False),
    )
    op.create_index('ix_assignments_due_date', 'assignments', ['due_date'])

    op.create_table(
        'assignment_submissions',
        *_base_columns(),
        _fk('assignment_id', 'assignments.id', 'CASCADE', nullable=False),
        _fk('student_id', 'students.id', 'CASCADE', nullable=False),
        _fk('graded_by', 'profiles.id', 'SET NULL'),
        sa.Column('submission_file_url', sa.String(1000)),
        sa.Column('submission_file_name', sa.String(255)),
        sa.Column('submitted_at', sa.DateTime(timezone=True)),
        sa.Column('marks_obtained', sa.Numeric(6, 2)),
        sa.Column('feedback', sa.Text()),
        sa.Column('graded_at', sa.DateTime(timezone=True)),
        sa.UniqueConstraint('assignment_id', 'student_id', name='uq_submission_student'),
    )

    op.create_table(
        'lesson_plans',
        *_base_columns(),
        _fk('school_id', 'schools.id', 'CASCADE'),
        _fk('class_id', 'classes.id', 'CASCADE', nullable=False),
        _fk('subject_id', 'subjects.id', 'SET NULL'),
        _fk('uploaded_by', 'profiles.id', 'SET NULL'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column(
            'document_type',
            sa.Enum('lesson_plan', 'syllabus', 'scheme_of_work', name='document_type'),
            nullable=False,
        ),
        sa.Column('file_url', sa.String(1000), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('period_start', sa.Date()),
        sa.Column('period_end', sa.Date()),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_lesson_plans_uploaded_at', 'lesson_plans', ['uploaded_at'])


def downgrade() -> None:
    for table in (
        'lesson_plans',
        'assignment_submissions',
        'assignments',
        'attendance',
        'exam_results',
        'exams',
        'class_subject_assignments',
        'teacher_subject_assignments',
        'students',
        'subjects',
        'classes',
        'profiles',
        'schools',
    ):
        op.drop_table(table)

    op.execute("DROP TYPE IF EXISTS document_type")
    op.execute("DROP TYPE IF EXISTS attendance_status")
    op.execute("DROP TYPE IF EXISTS user_role")
