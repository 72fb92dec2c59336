# school_erp/models/profile.py
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base
from .enums import UserRole, value_enum

class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the platform's auth user, so no default
    id = Column(UUID(as_uuid=True), primary_key=True, index=True)

    school_id = Column(UUID(as_uuid=True), ForeignKey("schools.id", ondelete="SET NULL"), nullable=True, index=True)

    email = Column(String(254), nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    role = Column(value_enum(UserRole, "user_role"), nullable=False, index=True)

    school = relationship("School", back_populates="profiles")
