# school_erp/models/exam.py
from sqlalchemy import Column, String, Integer, Date, DateTime, Numeric, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base


class Exam(Base):
    __tablename__ = "exams"

    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=True, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    exam_date = Column(Date, nullable=False, index=True)
    total_marks = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint('total_marks > 0', name='ck_exam_total_marks_positive'),
    )

    class_ref = relationship("ClassModel")
    subject = relationship("Subject")
    results = relationship("ExamResult", back_populates="exam", cascade="all, delete-orphan", passive_deletes=True)


class ExamResult(Base):
    __tablename__ = "exam_results"

    exam_id = Column(UUID(as_uuid=True), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    graded_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    marks_obtained = Column(Numeric(6, 2))
    percentage = Column(Numeric(5, 2))
    grade = Column(String(1))
    remarks = Column(Text)
    graded_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('exam_id', 'student_id', name='uq_exam_result_student'),
    )

    exam = relationship("Exam", back_populates="results")
