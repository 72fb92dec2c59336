# school_erp/models/subject.py
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base

class Subject(Base):
    __tablename__ = "subjects"

    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_subject_school_name"),
    )
