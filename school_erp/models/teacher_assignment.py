# school_erp/models/teacher_assignment.py
# Links teachers to the subjects they teach and to class/subject pairs
from sqlalchemy import Column, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base

class TeacherSubjectAssignment(Base):
    __tablename__ = "teacher_subject_assignments"

    teacher_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('teacher_id', 'subject_id', name='uq_teacher_subject'),
    )

    subject = relationship("Subject")


class ClassSubjectAssignment(Base):
    __tablename__ = "class_subject_assignments"

    teacher_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('class_id', 'subject_id', name='uq_class_subject'),
    )

    class_ref = relationship("ClassModel")
    subject = relationship("Subject")
