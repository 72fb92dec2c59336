# school_erp/models/lesson_plan.py
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base
from .enums import DocumentType, value_enum


class LessonPlan(Base):
    __tablename__ = "lesson_plans"

    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True)
    uploaded_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    document_type = Column(value_enum(DocumentType, "document_type"), nullable=False, default=DocumentType.LESSON_PLAN)
    file_url = Column(String(1000), nullable=False)
    file_name = Column(String(255), nullable=False)
    period_start = Column(Date)
    period_end = Column(Date)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    class_ref = relationship("ClassModel")
    subject = relationship("Subject")
    teacher = relationship("Profile")
