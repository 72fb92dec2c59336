# school_erp/models/enums.py
import enum
from sqlalchemy import Enum


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class DocumentType(str, enum.Enum):
    LESSON_PLAN = "lesson_plan"
    SYLLABUS = "syllabus"
    SCHEME_OF_WORK = "scheme_of_work"


def value_enum(enum_cls, name: str) -> Enum:
    """Store the lowercase enum values in the database, not the member names."""
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])
