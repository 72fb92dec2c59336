# school_erp/models/__init__.py
"""Import all models here, if needed for Alembic migration."""
from .base import Base
from .enums import UserRole, AttendanceStatus, DocumentType

from .school import School
from .profile import Profile
from .class_model import ClassModel
from .subject import Subject
from .student import Student
from .teacher_assignment import TeacherSubjectAssignment, ClassSubjectAssignment
from .exam import Exam, ExamResult
from .attendance import Attendance
from .assignment import Assignment, AssignmentSubmission
from .lesson_plan import LessonPlan

# This ensures all models are loaded when importing models
