# school_erp/models/student.py
from sqlalchemy import Column, String, Date, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base

class Student(Base):
    __tablename__ = "students"

    # Foreign Keys
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
    # Deleting a class unlinks its students
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="SET NULL"), nullable=True, index=True)
    parent_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    roll_number = Column(String(20))
    admission_date = Column(Date)

    # Relationships
    profile = relationship("Profile", foreign_keys=[user_id])
    parent = relationship("Profile", foreign_keys=[parent_id])
    class_ref = relationship("ClassModel", back_populates="students")
