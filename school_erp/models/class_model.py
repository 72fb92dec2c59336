# school_erp/models/class_model.py
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    # Foreign Keys
    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    class_teacher_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    # Class Information
    grade_level = Column(String(50), nullable=False, index=True)
    section = Column(String(10), nullable=False)
    academic_year = Column(String(10), nullable=False)

    __table_args__ = (
        UniqueConstraint("school_id", "grade_level", "section", "academic_year", name="uq_class_identity"),
    )

    # Relationships
    school = relationship("School", back_populates="classes")
    class_teacher = relationship("Profile")
    students = relationship("Student", back_populates="class_ref", passive_deletes=True)

    @property
    def label(self) -> str:
        return f"{self.grade_level} {self.section}".strip()
