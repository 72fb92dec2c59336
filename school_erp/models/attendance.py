# school_erp/models/attendance.py
from sqlalchemy import Column, Date, DateTime, Text, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base
from .enums import AttendanceStatus, value_enum


class Attendance(Base):
    __tablename__ = "attendance"

    # Foreign Keys
    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    marked_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    # Attendance Information
    date = Column(Date, nullable=False, index=True)
    status = Column(value_enum(AttendanceStatus, "attendance_status"), nullable=False)
    remarks = Column(Text)
    marked_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('student_id', 'class_id', 'date', name='uq_attendance_student_day'),
        Index('idx_attendance_class_date', 'class_id', 'date'),
    )

    student = relationship("Student")
