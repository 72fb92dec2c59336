# school_erp/models/assignment.py
from sqlalchemy import Column, String, Integer, DateTime, Numeric, Text, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base


class Assignment(Base):
    __tablename__ = "assignments"

    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    file_url = Column(String(1000))
    file_name = Column(String(255))
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    total_marks = Column(Integer, nullable=False)

    class_ref = relationship("ClassModel")
    subject = relationship("Subject")
    teacher = relationship("Profile")
    submissions = relationship("AssignmentSubmission", back_populates="assignment", cascade="all, delete-orphan", passive_deletes=True)


class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"

    assignment_id = Column(UUID(as_uuid=True), ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    graded_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    submission_file_url = Column(String(1000))
    submission_file_name = Column(String(255))
    submitted_at = Column(DateTime(timezone=True))
    marks_obtained = Column(Numeric(6, 2))
    feedback = Column(Text)
    graded_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('assignment_id', 'student_id', name='uq_submission_student'),
    )

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("Student")
