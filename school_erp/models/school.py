# school_erp/models/school.py
"""School (tenant) model definition."""
from sqlalchemy import Column, String, ARRAY, Index
from sqlalchemy.orm import relationship, validates
from .base import Base

class School(Base):
    __tablename__ = "schools"

    name = Column(String(200), nullable=False, index=True)
    school_code = Column(String(10), unique=True, nullable=False, index=True)
    school_type = Column(String(50))
    address = Column(String(500))
    contact_email = Column(String(254))
    contact_phone = Column(String(20))
    levels_offered = Column(ARRAY(String), nullable=False, default=list)

    @validates('contact_email')
    def validate_email(self, key, value):
        # Remove mailto: prefix if present
        if value and value.startswith('mailto:'):
            value = value[7:]
        return value

    __table_args__ = (
        Index('idx_school_type_name', 'school_type', 'name'),
    )

    profiles = relationship("Profile", back_populates="school", passive_deletes=True)
    classes = relationship("ClassModel", back_populates="school", cascade="all, delete-orphan", passive_deletes=True)
